"""Command line interface for balena settings."""
