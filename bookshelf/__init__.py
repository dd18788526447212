"""
Bookshelf package: the in-memory book catalog behind the REST API.

This package contains:
- Book record and inbound payload models
- Error taxonomy for store operations
- BookStore, the owner of the book collection
"""

__version__ = "1.0.0"
__author__ = "Bookshelf API"
