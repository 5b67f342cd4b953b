"""Session and transaction helpers.

Route handlers receive a session through ``get_db``; services mark their
write workflows with ``db_transaction`` so that a workflow either commits
as a whole or leaves nothing behind. ``SessionManager`` serves code that
runs outside a request, such as the admin CLI.
"""

import inspect
import logging
from contextlib import asynccontextmanager
from functools import wraps
from typing import AsyncGenerator, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.db.base import get_session

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    Anything left uncommitted when the handler fails is rolled back.
    """
    async with get_session() as session:
        try:
            yield session
        except Exception:
            logger.debug("Rolling back request session after an error")
            await session.rollback()
            raise


def _session_locator(func: Callable, db_param_name: Optional[str]):
    """Return (name, position) of the session parameter of ``func``."""
    for position, (name, param) in enumerate(inspect.signature(func).parameters.items()):
        if db_param_name is not None:
            if name == db_param_name:
                return name, position
        elif param.annotation is AsyncSession:
            return name, position
    return None, None


def db_transaction(db_param_name: Optional[str] = None) -> Callable:
    """Run the decorated coroutine as one transaction.

    The session is the argument called ``db_param_name``, or the one
    annotated as ``AsyncSession`` when no name is given. The transaction is
    committed when the coroutine returns and rolled back when it raises.

    Example:
        ```python
        @db_transaction(db_param_name="db")
        async def shorten(self, db: AsyncSession, raw_url: str) -> str:
            ...
        ```

    Raises:
        ValueError: If the call carries no session
    """
    def decorator(func: Callable) -> Callable:
        param_key, param_pos = _session_locator(func, db_param_name)
        if param_key is None:
            logger.warning(f"No session parameter found on '{func.__name__}'")

        @wraps(func)
        async def wrapper(*args, **kwargs):
            if param_key in kwargs:
                db = kwargs[param_key]
            elif param_pos is not None and param_pos < len(args):
                db = args[param_pos]
            else:
                db = next(
                    (value for value in (*args, *kwargs.values()) if isinstance(value, AsyncSession)),
                    None,
                )

            if db is None:
                raise ValueError(f"'{func.__name__}' was called without a database session")

            try:
                result = await func(*args, **kwargs)
            except Exception:
                await db.rollback()
                raise
            await db.commit()
            return result

        return wrapper
    return decorator


class SessionManager:
    """Sessions for code running outside of request handling."""

    @staticmethod
    @asynccontextmanager
    async def transaction_context() -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that is committed on exit, or rolled back on error."""
        async with get_session() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.exception(f"Transaction failed: {e}")
                raise
