# backend/salonbook/repositories/customer_ban_repository.py
import logging
from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.customer_ban import CustomerBan
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CustomerBanRepository(BaseRepository[CustomerBan]):
    """
    Repository for the per-tenant customer ban list.

    Emails are compared case-insensitively.
    """

    def __init__(self, db: Session):
        super().__init__(db, CustomerBan)
        self.logger = logging.getLogger(__name__)

    def get_ban(self, tenant_id: str, email: str) -> Optional[CustomerBan]:
        try:
            return cast(
                Optional[CustomerBan],
                self._tenant_query(tenant_id)
                .filter(func.lower(CustomerBan.email) == normalize_email(email))
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking customer ban: {str(e)}")
            raise RepositoryException(f"Failed to check ban: {str(e)}")

    def is_banned(self, tenant_id: str, email: str) -> bool:
        return self.get_ban(tenant_id, email) is not None

    def list_bans(self, tenant_id: str) -> List[CustomerBan]:
        try:
            return cast(
                List[CustomerBan],
                self._tenant_query(tenant_id).order_by(CustomerBan.email).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing customer bans: {str(e)}")
            raise RepositoryException(f"Failed to list bans: {str(e)}")

    def add_ban(self, tenant_id: str, email: str, reason: Optional[str] = None) -> CustomerBan:
        return self.create(tenant_id=tenant_id, email=normalize_email(email), reason=reason)

    def remove_ban(self, tenant_id: str, email: str) -> bool:
        ban = self.get_ban(tenant_id, email)
        if ban is None:
            return False
        try:
            self.db.delete(ban)
            self.db.flush()
            return True
        except SQLAlchemyError as e:
            self.logger.error(f"Error removing customer ban: {str(e)}")
            raise RepositoryException(f"Failed to remove ban: {str(e)}")
