"""Unit tests for errors module."""

from chargeback_api.core.errors import (
    ERROR_STATUS_MAP,
    ChargebackError,
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
    get_status_code,
)


class TestChargebackError:
    """Test base exception class."""

    def test_base_exception_creation(self):
        """Test creating base exception with message."""
        error = ChargebackError("Test error message")
        assert error.message == "Test error message"
        assert error.details == {}
        assert str(error) == "Test error message"

    def test_base_exception_with_details(self):
        """Test creating base exception with details."""
        error = ChargebackError("Test error", details={"key": "value", "extra": 123})
        assert error.message == "Test error"
        assert error.details == {"key": "value", "extra": 123}

    def test_all_errors_inherit_from_base(self):
        """Test every domain error is a ChargebackError."""
        for error_class in ERROR_STATUS_MAP:
            assert issubclass(error_class, ChargebackError)


class TestValidationError:
    """Test ValidationError exception."""

    def test_validation_error_with_violations(self):
        """Test ValidationError carries the violation list."""
        error = ValidationError(
            "validation errors: merchant ID is required",
            details={"violations": ["merchant ID is required"]},
        )
        assert isinstance(error, ChargebackError)
        assert error.details["violations"] == ["merchant ID is required"]


class TestConflictError:
    """Test ConflictError exception."""

    def test_conflict_error_with_transaction(self):
        """Test ConflictError with transaction details."""
        error = ConflictError(
            "chargeback already exists for transaction tx-1",
            details={"transaction_id": "tx-1"},
        )
        assert error.details["transaction_id"] == "tx-1"
        assert "tx-1" in error.message


class TestGetStatusCode:
    """Test get_status_code function."""

    def test_validation_error_status(self):
        """Test ValidationError maps to 400."""
        assert get_status_code(ValidationError("bad")) == 400

    def test_not_found_error_status(self):
        """Test NotFoundError maps to 404."""
        assert get_status_code(NotFoundError("missing")) == 404

    def test_conflict_error_status(self):
        """Test ConflictError maps to 409."""
        assert get_status_code(ConflictError("duplicate")) == 409

    def test_invalid_transition_status(self):
        """Test InvalidStatusTransitionError maps to 409."""
        assert get_status_code(InvalidStatusTransitionError("not pending")) == 409

    def test_storage_error_status(self):
        """Test StorageError maps to 500."""
        assert get_status_code(StorageError("dynamodb down")) == 500

    def test_unknown_error_defaults_to_500(self):
        """Test unknown exceptions map to 500."""
        assert get_status_code(RuntimeError("boom")) == 500
        assert get_status_code(ChargebackError("generic")) == 500
