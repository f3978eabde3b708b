"""Infrastructure adapters: logging, persistence, security, OAuth, uploads, events."""
