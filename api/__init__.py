"""
HTTP front end for relstore.
"""
