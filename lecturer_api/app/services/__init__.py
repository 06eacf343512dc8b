"""
Service layer abstraction.

Each service encapsulates business logic for a domain.  Services talk
to the key-value store only through :class:`KeyValueStore`, so API
handlers never touch storage directly.
"""
