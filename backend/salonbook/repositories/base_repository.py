# backend/salonbook/repositories/base_repository.py
"""
Base Repository Pattern for the SalonBook scheduling core.

Provides the foundation for all repository classes with:
- Tenant-scoped queries and entity creation
- Type safety with generics
- Transaction support (managed by services)

Every lookup takes the tenant id explicitly. There is no query in this
package that can see rows of another tenant.
"""

from contextlib import contextmanager
import logging
from typing import Any, Generic, Iterator, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

# Type variable for generic model support
T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Concrete base repository implementation with common data access patterns.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class (must have ``id`` and ``tenant_id``)
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository with database session and model.

        Args:
            db: SQLAlchemy session (managed by service layer)
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Context manager that commits/rolls back the underlying session."""
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as exc:
            self.logger.error("Repository transaction failed: %s", exc)
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            raise

    def _tenant_query(self, tenant_id: str) -> Query:
        return self.db.query(self.model).filter(self.model.tenant_id == tenant_id)

    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Note: Does NOT commit - transaction management is handled by service layer.
        IntegrityError is re-raised untouched so callers can map constraint
        names to domain conflicts.
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()  # Get ID without committing
            return entity
        except IntegrityError:
            self.logger.warning("Integrity error creating %s", self.model.__name__)
            raise
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating {self.model.__name__}: {str(e)}")
            raise RepositoryException(f"Failed to create {self.model.__name__}: {str(e)}")


    def update(self, entity: Any, **kwargs: Any) -> Any:
        """
        Update an entity already resolved in the tenant.

        Only updates provided fields, preserves others. Does NOT commit.
        """
        try:
            for key, value in kwargs.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)

            self.db.flush()
            return entity
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating {type(entity).__name__}: {str(e)}")
            raise RepositoryException(f"Failed to update {type(entity).__name__}: {str(e)}")
