"""skillcheck - discover, lint and render agent skill corpora."""

__version__ = "0.4.0"
