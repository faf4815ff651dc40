"""Resource services."""
from admin_service.services.resource import FileService, ResourceService, build_service

__all__ = ["ResourceService", "FileService", "build_service"]
