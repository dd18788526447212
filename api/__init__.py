"""
FastAPI RESTful API for the Bookshelf service.

This module provides a REST API for:
- Adding, listing, reading, updating and deleting books
- Health checks
"""
