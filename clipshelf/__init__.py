"""ClipShelf - categorized clipboard of resource references"""

__version__ = "1.0.0"
