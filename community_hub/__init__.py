"""
Community Hub data layer.

Fetches interview questions and job listings from their remote providers
and turns them into validated in-memory records for the site.
"""

__version__ = "2.0.0"
__version_info__ = (2, 0, 0)
