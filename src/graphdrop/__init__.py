"""graphdrop - drag-and-drop mutation resolution for revision graphs."""

__version__ = "0.1.0"
