"""Event payloads, publishing and ingestion."""
