"""Command implementations for the proteccapi CLI."""
