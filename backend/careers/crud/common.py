# backend/careers/crud/common.py
import functools
import logging
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Iterator, List, Optional, TypeVar

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from careers.core import errors

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# SQLSTATE classes reported by PostgreSQL drivers
_PG_UNIQUE = "23505"
_PG_FOREIGN_KEY = "23503"
_PG_NOT_NULL = "23502"
_PG_CHECK = "23514"


def _sqlstate(err: sa_exc.DBAPIError) -> Optional[str]:
    orig = getattr(err, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate_db_error(err: Exception, *, entity: str, key: Any = None, restrict: bool = False) -> errors.StoreError:
    """
    Map a SQLAlchemy failure to the store taxonomy.

    With `restrict`, a foreign key failure means a dependent row still
    points at the one being deleted, which is a ConflictError.
    """
    if isinstance(err, sa_exc.IntegrityError):
        code = _sqlstate(err)
        text = str(getattr(err, "orig", err)).lower()
        if code == _PG_FOREIGN_KEY or "foreign key" in text:
            if restrict:
                return errors.ConflictError(f"{entity} is still referenced", entity=entity, key=key)
            return errors.ReferenceError(f"{entity} references a missing row", entity=entity, key=key)
        if code in (_PG_NOT_NULL, _PG_CHECK) or "not null" in text or "check constraint" in text:
            return errors.ValidationError(f"{entity} violates a column constraint: {text}", entity=entity, key=key)
        return errors.ConflictError(f"{entity} already exists", entity=entity, key=key)
    if isinstance(err, (sa_exc.OperationalError, sa_exc.TimeoutError, sa_exc.DisconnectionError)):
        return errors.TransientError(f"{entity}: storage temporarily unavailable ({err.__class__.__name__})",
                                     entity=entity, key=key)
    if isinstance(err, sa_exc.DBAPIError) and err.connection_invalidated:
        return errors.TransientError(f"{entity}: connection lost", entity=entity, key=key)
    if isinstance(err, sa_exc.StatementError) and isinstance(getattr(err, "orig", None), LookupError):
        # Enum column rejected a value on bind
        return errors.ValidationError(f"{entity}: {err.orig}", entity=entity, key=key)
    raise err


@contextmanager
def translated(db: Session, *, entity: str, key: Any = None, restrict: bool = False) -> Iterator[None]:
    """Roll back and re-raise database failures as store errors."""
    try:
        yield
    except errors.StoreError:
        db.rollback()
        raise
    except (sa_exc.StatementError, sa_exc.TimeoutError, sa_exc.DisconnectionError) as e:
        db.rollback()
        mapped = translate_db_error(e, entity=entity, key=key, restrict=restrict)
        logger.warning("[store] %s key=%s failed: %s", entity, key, mapped.kind)
        raise mapped from e


@contextmanager
def atomic(db: Session, *, entity: str, key: Any = None, restrict: bool = False) -> Iterator[None]:
    """One store write: commit when the block finishes, roll back on any failure."""
    with translated(db, entity=entity, key=key, restrict=restrict):
        yield
        db.commit()


def retry_lost_insert(fn: F) -> F:
    """
    Run an upsert once more when its insert lost a race with another writer.

    The second run sees the committed row and takes the update path.
    Conflicts the upsert raises itself are passed through.
    """
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except errors.ConflictError as e:
            if not isinstance(e.__cause__, sa_exc.IntegrityError):
                raise
            logger.info("[store] %s key=%s lost an insert race, retrying", e.entity, e.key)
            return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# ---------- input checks ----------

def required_str(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise errors.ValidationError(f"{field} must be a string", entity=field, key=value)
    out = value.strip()
    if not out:
        raise errors.ValidationError(f"{field} is required", entity=field)
    return out


def optional_str(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise errors.ValidationError(f"{field} must be a string", entity=field, key=value)
    return value.strip() or None


def str_list(value: Optional[Iterable[Any]], field: str) -> Optional[List[str]]:
    """Keep order and duplicates; only the element type is checked."""
    if value is None:
        return None
    if isinstance(value, (str, bytes)):
        raise errors.ValidationError(f"{field} must be a list of strings", entity=field)
    out = list(value)
    for v in out:
        if not isinstance(v, str):
            raise errors.ValidationError(f"{field} must be a list of strings", entity=field, key=v)
    return out


def as_timestamp(value: Any, field: str) -> datetime:
    """Dates become midnight; aware datetimes are stored as naive UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise errors.ValidationError(f"{field} must be a date or datetime", entity=field, key=value)
