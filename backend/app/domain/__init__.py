"""Catalog domain services."""
