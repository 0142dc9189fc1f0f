"""
Base use case class with common functionality.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, TypeVar, Generic

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import BackofficeError, ConflictError, StorageUnavailableError

logger = logging.getLogger(__name__)

ResultType = TypeVar("ResultType")


class BaseUseCase(ABC, Generic[ResultType]):
    """
    Abstract base class for use cases.

    A use case encapsulates a single business operation and orchestrates
    the interactions between repositories, services, and other components.
    Mutating use cases run their writes inside ``atomic()``.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize use case with database session.

        Args:
            session: Async SQLAlchemy session for database operations
        """
        self.session = session

    @abstractmethod
    async def execute(self, *args, **kwargs) -> ResultType:
        """
        Execute the use case.

        Subclasses must implement this method with their specific logic.

        Returns:
            Result of the use case execution
        """
        pass

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Rollback failed: {e}")

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[AsyncSession]:
        """
        Run a block as one transaction: commit on success, roll back on any error.

        Raises:
            ConflictError: On integrity constraint violations
            StorageUnavailableError: When the database cannot be reached
        """
        try:
            yield self.session
            await self.session.commit()
        except BackofficeError:
            await self._rollback()
            raise
        except IntegrityError as e:
            await self._rollback()
            raise ConflictError(f"Conflicting data: {e.orig}") from e
        except (DBAPIError, OSError) as e:
            await self._rollback()
            logger.error(f"Storage failure, transaction rolled back: {e}")
            raise StorageUnavailableError() from e
        except Exception:
            await self._rollback()
            raise
