"""
Cache Domain Module

Value objects, exceptions and the backend contract for the cache layer.
"""
