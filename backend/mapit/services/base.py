"""
MapIt Backend: Query Service Base
===================================

What:  Shared statement execution for the query services.
How:   `QueryService._execute()` runs one statement on the request session and
       translates every store failure into a MapIt exception:

           foreign-key violation (when parents are named) → NotFoundError (404)
           any other driver/SQLAlchemy/timeout failure    → DatabaseError (500)

       The underlying driver text becomes the `message` of the 500 envelope.
"""

import logging
from typing import Any, Sequence, Tuple

from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.base import Executable

from mapit.exceptions import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

# SQLSTATE foreign_key_violation
FOREIGN_KEY_VIOLATION = "23503"


def describe_store_error(exc: Exception) -> str:
    """Driver-level message of a failure, without SQLAlchemy's statement dump."""
    orig = getattr(exc, "orig", None)
    return str(orig or exc) or type(exc).__name__


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == FOREIGN_KEY_VIOLATION
    return "foreign key" in str(orig or exc).lower()

Parent = Tuple[str, Any]


def violated_parent(exc: IntegrityError, parents: Sequence[Parent]) -> Parent:
    """
    Pick the parent whose constraint (`fk_<table>_<resource>`) the store
    names in its message; the first parent when it names none (SQLite).
    """
    text = str(getattr(exc, "orig", None) or exc).lower()
    for parent in parents:
        if f"_{parent[0]}" in text:
            return parent
    return parents[0]


class QueryService:
    """Base class for services that run SQL on a request-scoped session."""

    async def _execute(
        self,
        db: AsyncSession,
        statement: Executable,
        operation: str,
        parents: Sequence[Parent] = (),
    ) -> Result:
        """
        Execute `statement` and return its result.

        Args:
            db:        Request session
            statement: Parameterized SQLAlchemy statement
            operation: Short description used in logs ("list maps")
            parents:   (resource, id) pairs referenced by foreign keys in this
                       statement; a violation of one becomes NotFoundError

        Raises:
            NotFoundError: a parent does not exist
            DatabaseError: any other failure
        """
        try:
            return await db.execute(statement)
        except IntegrityError as e:
            if parents and is_foreign_key_violation(e):
                resource, resource_id = violated_parent(e, parents)
                logger.warning("%s: %s %s does not exist", operation, resource, resource_id)
                raise NotFoundError(resource=resource, resource_id=resource_id) from e
            raise self._store_error(e, operation) from e
        except Exception as e:
            raise self._store_error(e, operation) from e

    async def _commit(self, db: AsyncSession, operation: str) -> None:
        """
        Commit the request's writes before the response is built, so a
        failed commit answers 500 instead of a success envelope.
        """
        try:
            await db.commit()
        except Exception as e:
            raise self._store_error(e, operation) from e

    @staticmethod
    def _store_error(exc: Exception, operation: str) -> DatabaseError:
        logger.error("Database error during %s: %s", operation, exc, exc_info=True)
        return DatabaseError(
            message=describe_store_error(exc),
            context={"operation": operation, "error_type": type(exc).__name__},
        )
