"""
Bookmark archiver: save URLs for future reference.

Each saved URL is fetched once to confirm it is reachable and then
appended to a flat file of normalized URLs.
"""

__version__ = "1.0.0"
