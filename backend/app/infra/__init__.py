"""Infrastructure adapters shared across domain services."""
