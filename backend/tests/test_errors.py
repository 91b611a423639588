import pytest
from sqlalchemy import exc as sa_exc

from careers.core import errors
from careers.crud.common import as_timestamp, required_str, str_list, translate_db_error


class _PgError(Exception):
    def __init__(self, pgcode, msg="boom"):
        super().__init__(msg)
        self.pgcode = pgcode


@pytest.mark.parametrize(
    "orig,expected",
    [
        (Exception("UNIQUE constraint failed: outlooks.noc"), errors.ConflictError),
        (Exception("FOREIGN KEY constraint failed"), errors.ReferenceError),
        (Exception("NOT NULL constraint failed: programs.title"), errors.ValidationError),
        (Exception("CHECK constraint failed: ck_programs_credential"), errors.ValidationError),
        (_PgError("23505"), errors.ConflictError),
        (_PgError("23503"), errors.ReferenceError),
        (_PgError("23514"), errors.ValidationError),
    ],
)
def test_integrity_errors_are_classified(orig, expected):
    err = sa_exc.IntegrityError("INSERT ...", {}, orig)
    assert isinstance(translate_db_error(err, entity="outlook"), expected)


def test_restricted_delete_failure_is_a_conflict():
    err = sa_exc.IntegrityError("DELETE ...", {}, Exception("FOREIGN KEY constraint failed"))
    mapped = translate_db_error(err, entity="unit_group", key="1234", restrict=True)
    assert isinstance(mapped, errors.ConflictError)
    assert mapped.key == "1234"
    pg = sa_exc.IntegrityError("DELETE ...", {}, _PgError("23503"))
    assert isinstance(translate_db_error(pg, entity="program", restrict=True), errors.ConflictError)


def test_operational_errors_are_transient():
    err = sa_exc.OperationalError("SELECT 1", {}, Exception("database is locked"))
    mapped = translate_db_error(err, entity="outlook", key=1)
    assert isinstance(mapped, errors.TransientError)
    assert mapped.retryable
    assert mapped.key == 1


def test_pool_timeout_is_transient():
    mapped = translate_db_error(sa_exc.TimeoutError("QueuePool limit reached"), entity="program")
    assert isinstance(mapped, errors.TransientError)


def test_logical_errors_are_not_retryable():
    for cls in (errors.ValidationError, errors.ReferenceError, errors.ConflictError, errors.NotFoundError):
        assert cls("x").retryable is False
        assert issubclass(cls, errors.StoreError)


def test_input_helpers():
    assert required_str("  a ", "f") == "a"
    with pytest.raises(errors.ValidationError):
        required_str(5, "f")
    assert str_list(None, "f") is None
    assert str_list(("a", "b"), "f") == ["a", "b"]
    with pytest.raises(errors.ValidationError):
        as_timestamp("2024-01-01", "f")
