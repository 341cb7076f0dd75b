"""Infrastructure adapters: document store and event bus."""
