"""
Timetable Catalog

Ingests the club timetable feed, keeps the current generation in a catalog
store and answers filtered class listings.
"""

__version__ = "0.1.0"
