"""
BookMagic: turn an uploaded manuscript into a styled preview, a print PDF,
an EPUB and a publishing bundle.

MIT License - Copyright (c) 2025 BookMagic
"""

__version__ = "0.1.0"
