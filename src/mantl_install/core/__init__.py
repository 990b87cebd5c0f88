"""Core resolution engine for mantl-install."""
