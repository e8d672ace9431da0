import errno

import pytest
from sqlalchemy.exc import IntegrityError, InterfaceError, NoResultFound, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from inventory.exceptions import BadRequestError, FailureKind, KnownFailure
from inventory.exceptions.adapter import (
    db_error_handler,
    extract_conflict,
    translate_exception,
    translate_persistence_error,
)


class _Orig(Exception):
    def __init__(self, message: str, pgcode: str | None = None):
        super().__init__(message)
        self.pgcode = pgcode


class _FakeSession:
    """Records rollbacks; optionally fails them."""

    def __init__(self, fail_rollback: bool = False):
        self.rollbacks = 0
        self.fail_rollback = fail_rollback

    async def rollback(self):
        self.rollbacks += 1
        if self.fail_rollback:
            raise RuntimeError("rollback failed")


class TestExtractConflict:

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("DETAIL:  Key (name)=(Widget) already exists.", (["name"], "Widget")),
            ('null value in column "description" violates not-null constraint', (["description"], None)),
            ("UNIQUE constraint failed: products.name", (["name"], None)),
            ("NOT NULL constraint failed: categories.name", (["name"], None)),
            ('duplicate key value violates unique constraint "uq_categories_name"', (["name"], None)),
            ("something else entirely", (None, None)),
            ("", (None, None)),
        ],
    )
    def test_driver_messages(self, message, expected):
        assert extract_conflict(message) == expected


class TestTranslatePersistenceError:

    def test_unique_violation_by_pgcode(self):
        exc = IntegrityError("INSERT", {}, _Orig("duplicate key", pgcode="23505"))

        failure = translate_persistence_error(exc, values={"value": "x"})

        assert failure.kind is FailureKind.DUPLICATE_KEY

    def test_not_null_is_field_validation(self):
        exc = IntegrityError("INSERT", {}, _Orig("NOT NULL constraint failed: products.description"))

        failure = translate_persistence_error(exc)

        assert failure.kind is FailureKind.FIELD_VALIDATION
        assert failure.messages == ["description is required"]

    def test_check_constraint_is_field_validation(self):
        exc = IntegrityError("INSERT", {}, _Orig("CHECK constraint failed: quantity_non_negative"))

        assert translate_persistence_error(exc).kind is FailureKind.FIELD_VALIDATION

    def test_no_result_is_document_not_found(self):
        assert translate_persistence_error(NoResultFound("none")).kind is FailureKind.DOCUMENT_NOT_FOUND

    def test_pool_timeout(self):
        assert translate_persistence_error(PoolTimeoutError("QueuePool limit")).kind is FailureKind.STORAGE_TIMEOUT

    def test_interface_error_is_unavailable(self):
        exc = InterfaceError("SELECT 1", {}, _Orig("connection is closed"))

        assert translate_persistence_error(exc).kind is FailureKind.STORAGE_UNAVAILABLE

    def test_os_error_inside_boundary_is_unavailable(self):
        exc = ConnectionRefusedError(errno.ECONNREFUSED, "Connect call failed")

        assert translate_persistence_error(exc).kind is FailureKind.STORAGE_UNAVAILABLE

    def test_other_operational_error_is_storage_error(self):
        exc = OperationalError("SELECT", {}, _Orig("disk I/O error"))

        assert translate_persistence_error(exc).kind is FailureKind.STORAGE_ERROR


class TestTranslateException:

    def test_known_failure_passes_through(self):
        failure = KnownFailure(FailureKind.MALFORMED_BODY)

        assert translate_exception(failure) is failure

    def test_application_errors_are_not_translated(self):
        assert translate_exception(BadRequestError("x")) is None

    def test_unknown_exception(self):
        assert translate_exception(KeyError("x")) is None

    def test_unmapped_errno_is_unknown(self):
        assert translate_exception(OSError(errno.EBADF, "Bad file descriptor")) is None


@pytest.mark.asyncio
class TestDbErrorHandler:

    async def test_translates_and_rolls_back(self):
        session = _FakeSession()

        with pytest.raises(KnownFailure) as exc_info:
            async with db_error_handler(session, "Product", values={"name": "Widget"}):
                raise IntegrityError("INSERT", {}, _Orig("UNIQUE constraint failed: products.name"))

        assert session.rollbacks == 1
        assert exc_info.value.kind is FailureKind.DUPLICATE_KEY
        assert exc_info.value.field == "name"
        assert exc_info.value.value == "Widget"
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    async def test_application_errors_pass_untouched(self):
        session = _FakeSession()

        with pytest.raises(BadRequestError):
            async with db_error_handler(session, "Product"):
                raise BadRequestError("nope")

        assert session.rollbacks == 0

    async def test_unrelated_errors_propagate(self):
        session = _FakeSession()

        with pytest.raises(KeyError):
            async with db_error_handler(session, "Product"):
                raise KeyError("x")

    async def test_failed_rollback_keeps_original_failure(self, caplog):
        session = _FakeSession(fail_rollback=True)

        with pytest.raises(KnownFailure) as exc_info:
            async with db_error_handler(session, "Product"):
                raise OperationalError("SELECT 1", {}, _Orig("server closed the connection unexpectedly"))

        assert exc_info.value.kind is FailureKind.STORAGE_UNAVAILABLE
        assert any("rollback" in record.getMessage().lower() for record in caplog.records)
