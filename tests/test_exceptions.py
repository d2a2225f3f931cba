"""Tests for the exception hierarchy."""
from assetdesk.core.exceptions import (
    AssetDeskException,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    OperationUnavailableError,
    ValidationError,
)


def test_all_errors_share_base():
    for exc in (ValidationError(), NotFoundError(), ForbiddenError(), ConflictError(), OperationUnavailableError("x")):
        assert isinstance(exc, AssetDeskException)


def test_status_codes():
    assert ValidationError().status_code == 422
    assert NotFoundError().status_code == 404
    assert ForbiddenError().status_code == 403
    assert ConflictError().status_code == 409
    assert OperationUnavailableError("x").status_code == 501


def test_not_found_message_never_mentions_tenant():
    exc = NotFoundError("Department", 7)

    assert exc.to_dict() == {
        "error": {
            "message": "Department not found",
            "code": "NF001",
            "details": {"entity": "department", "id": 7},
        }
    }


def test_validation_error_details():
    exc = ValidationError("Bad", errors=[{"field": "name", "message": "too short"}])

    assert exc.details == {"errors": [{"field": "name", "message": "too short"}]}


def test_conflict_field():
    assert ConflictError("dup", field="email").details == {"field": "email"}
    assert ConflictError().details == {}
