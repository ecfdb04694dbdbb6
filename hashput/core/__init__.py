"""Upload pipeline core: hashing, request assembly, response validation."""
