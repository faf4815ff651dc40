"""Database, cache and observability infrastructure."""
