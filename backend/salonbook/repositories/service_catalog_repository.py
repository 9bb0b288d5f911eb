# backend/salonbook/repositories/service_catalog_repository.py
import logging
from typing import Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.service import Service
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ServiceCatalogRepository(BaseRepository[Service]):
    """Read access to the tenant's bookable services."""

    def __init__(self, db: Session):
        super().__init__(db, Service)
        self.logger = logging.getLogger(__name__)

    def get_service(
        self, tenant_id: str, service_id: str, active_only: bool = False
    ) -> Optional[Service]:
        """Resolve a service by id in the tenant, optionally requiring active."""
        try:
            query = self._tenant_query(tenant_id).filter(Service.id == service_id)
            if active_only:
                query = query.filter(Service.active.is_(True))
            return cast(Optional[Service], query.first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting service {service_id}: {str(e)}")
            raise RepositoryException(f"Failed to get service: {str(e)}")
