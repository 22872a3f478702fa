"""blockpress - ordered content blocks and their codecs for blog posts and guides."""

__version__ = "0.1.0"
