"""StreamAtlas backend application."""
