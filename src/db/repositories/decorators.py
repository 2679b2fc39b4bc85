import asyncio
from collections.abc import Awaitable, Callable
import functools
import logging
from typing import Any, TypeVar, cast

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from core.exceptions import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")
AsyncFuncT = Callable[..., Awaitable[T]]

RETRY_BASE_DELAY = 0.1


def with_retry(max_retries: int = 3, log_prefix: str = ""):
    """Retry a read operation on OperationalError with exponential backoff.

    Any other SQLAlchemyError, or the last OperationalError, becomes StoreError.

    Args:
        max_retries: Maximum number of attempts
        log_prefix: Operation description for log messages
    """

    def decorator(func: AsyncFuncT) -> AsyncFuncT:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            operation = log_prefix or func.__name__
            entity_info = _extract_entity_info(args, kwargs)

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except OperationalError as e:
                    if attempt < max_retries - 1:
                        logger.warning(
                            "OperationalError while %s %s (attempt %d): %s", operation, entity_info, attempt + 1, e
                        )
                        await asyncio.sleep(RETRY_BASE_DELAY * (2**attempt))
                        continue
                    logger.error("Database error while %s %s: %s", operation, entity_info, e)
                    raise StoreError(message="Database failure") from e
                except SQLAlchemyError as e:
                    logger.error("Database error while %s %s: %s", operation, entity_info, e)
                    raise StoreError(message="Database failure") from e

            raise StoreError(message="Database failure")

        return cast(AsyncFuncT, wrapper)

    return decorator


def handle_db_errors(entity_name: str = ""):
    """Convert SQLAlchemyError into StoreError without retrying.

    Used for write operations, which must not be replayed.

    Args:
        entity_name: Entity name for logging
    """

    def decorator(func: AsyncFuncT) -> AsyncFuncT:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except SQLAlchemyError as e:
                entity_info = _extract_entity_info(args, kwargs)
                prefix = f"{entity_name} " if entity_name else ""
                logger.error("Database error while %s%s %s: %s", prefix, func.__name__, entity_info, e)
                raise StoreError(message="Database failure") from e

        return cast(AsyncFuncT, wrapper)

    return decorator


def _extract_entity_info(args: tuple, kwargs: dict) -> str:
    """Find an entity identifier among the call arguments for log messages."""
    # args[0] is the session
    if len(args) > 1 and isinstance(args[1], int | str):
        return str(args[1])

    for key in ("id", "post_id"):
        if key in kwargs:
            return f"{key}={kwargs[key]}"

    return ""
