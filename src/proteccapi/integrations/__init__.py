"""Integrations with external tooling."""
