"""
HTTP API for the reading list.
"""
