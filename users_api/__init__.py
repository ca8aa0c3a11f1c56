"""Users API: CRUD over a JSON-file user list, plus a database-backed listing."""

__version__ = "0.1.0"
