"""
Reading list API.

Users register, log in and keep a private list of books with notes and ratings.
"""

__version__ = "0.1.0"
