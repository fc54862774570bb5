"""Output formatting for proteccapi."""
