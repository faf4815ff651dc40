"""Admin service: generic soft-delete aware data access behind a FastAPI app."""

__version__ = "0.1.0"
