"""Business logic services used by handlers.

Handlers build services lazily so that importing a handler never opens an
HTTP connection pool or reads secrets.
"""
