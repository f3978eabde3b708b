"""Domain entities and protocols (no framework dependencies)."""
