"""Wake-word activated voice front-end for a local completion service."""

__version__ = "0.1.0"
