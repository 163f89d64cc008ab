"""
Bookmark Cosmos

Browse, search and categorize a browser bookmark collection, optionally
assisted by AI classification.
"""

__version__ = "1.0.0"
