"""CiteForge - Citation markers and rich text for bibliography output.

This package formats in-text citation markers (key-based or compacted
numeric) and provides the rich text type bibliography styles build on.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
