"""Core configuration, container, errors and result types."""
