"""Repository commands."""
