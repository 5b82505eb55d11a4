"""Exception taxonomy and step-wrapping decorator for the migration pipeline."""

import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from notion_native.models.domain.migration import MigrationStage

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class MigrationError(Exception):
    """Base error of a failed pipeline step.

    Attributes:
        stage: The pipeline step that failed, if known
    """

    def __init__(self, message: str, stage: MigrationStage | None = None):
        self.message = message
        self.stage = stage
        super().__init__(message)

    def describe(self) -> str:
        """Human-readable ``"<stage>: <message>"`` line."""
        if self.stage is None:
            return self.message
        return f"{self.stage.value}: {self.message}"


class UpstreamFetchError(MigrationError):
    """The block source could not deliver the page or its blocks."""


class PersistenceError(MigrationError):
    """The storage gateway rejected a write."""


class EmbeddingError(MigrationError):
    """The embedding provider failed or returned an unusable result."""


class PageNotFoundError(MigrationError):
    """A page has not been migrated yet."""


def migration_step(
    stage: MigrationStage, error_cls: type[MigrationError]
) -> Callable[[F], F]:
    """Decorator that converts collaborator failures into migration errors.

    ``MigrationError``s raised inside the step propagate unchanged (their
    stage is filled in when missing). Any other exception is logged and
    re-raised as ``error_cls`` chained to the original.

    Usage:
        @migration_step(MigrationStage.SAVE_PAGE, PersistenceError)
        async def _save_page(self, payload):
            return await self.storage.save_page(payload)
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except MigrationError as e:
                if e.stage is None:
                    e.stage = stage
                raise
            except Exception as e:
                logger.error(f"Migration step '{stage.value}' failed: {e}")
                raise error_cls(str(e) or type(e).__name__, stage=stage) from e

        return wrapper

    return decorator


__all__ = [
    "MigrationError",
    "UpstreamFetchError",
    "PersistenceError",
    "EmbeddingError",
    "PageNotFoundError",
    "migration_step",
]
