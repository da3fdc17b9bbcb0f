"""CLI package for skillcheck."""
