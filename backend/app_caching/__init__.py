"""
App Caching Backend

User listing service with a cache layer that switches between an
in-process cache and Redis.
"""
