"""Commit-or-rollback helper shared by the services."""

from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.errors import InternalError, TodoAppError

logger = structlog.get_logger()


@asynccontextmanager
async def transaction(db: AsyncSession):
    """Commit on success; roll back on any error.

    Typed errors pass through unchanged. Unexpected database errors
    become InternalError carrying the driver message. Anything else is
    re-raised as is after the rollback.
    """
    try:
        yield db
        await db.commit()
    except TodoAppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("db.transaction_failed", error=str(e))
        raise InternalError(str(e)) from e
    except Exception:
        await db.rollback()
        raise
