# src/admin_service/api/dependencies.py
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from admin_service.api.schemas.pagination import PaginationParams, pagination_params
from admin_service.config.settings import Settings, get_settings
from admin_service.infrastructure.database.connection import get_session


# Type aliases for clean injection
AppSettings = Annotated[Settings, Depends(get_settings)]
DbSession = Annotated[AsyncSession, Depends(get_session)]
Pagination = Annotated[PaginationParams, Depends(pagination_params)]
