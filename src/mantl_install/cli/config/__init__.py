"""Config commands."""
