"""Files: metadata, payload and per-user permissions."""
