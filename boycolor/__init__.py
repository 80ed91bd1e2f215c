"""Game Boy CPU emulation core with display and keyboard configuration helpers."""

__version__ = "0.1.0"