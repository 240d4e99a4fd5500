"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to
storage only through an injected repository, so the storage engine can
be swapped (SQLite, in-memory) without changing API handlers.
"""
