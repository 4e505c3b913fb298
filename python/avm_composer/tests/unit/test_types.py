"""Unit tests for composer types and errors."""

import pytest

from avm_composer.constants import ERR_FEE_CONFLICT, ERR_GROUP_TOO_LARGE
from avm_composer.errors import (
    ComposerConfigError,
    ComposerError,
    FeeConfigError,
    GroupCapacityError,
)
from avm_composer.types import (
    AppCreateParams,
    AppUpdateParams,
    BuiltGroup,
    ExecuteParams,
    MethodCallParams,
    PaymentParams,
)


class TestIntents:
    """Tests for intent dataclasses."""

    def test_keyword_only(self, alice, bob):
        """Test intents are keyword-only."""
        with pytest.raises(TypeError):
            PaymentParams(alice.address, bob.address, 1)  # type: ignore

    def test_defaults(self, alice, bob):
        """Test common field defaults."""
        params = PaymentParams(sender=alice.address, receiver=bob.address, amount=1)
        assert params.signer is None
        assert params.static_fee is None
        assert params.validity_window is None

    def test_app_defaults(self, alice):
        """Test create and update defaults."""
        assert AppCreateParams(sender=alice.address).app_id == 0
        update = AppUpdateParams(sender=alice.address, app_id=5)
        assert update.on_complete.name == "UpdateApplicationOC"

    def test_method_call_without_args(self, alice, add_method):
        """Test a method call with no args has no arguments."""
        params = MethodCallParams(sender=alice.address, app_id=1, method=add_method)
        assert params.arguments == ()


class TestResults:
    """Tests for result types."""

    def test_empty_built_group(self):
        """Test an empty snapshot has no group ID."""
        built = BuiltGroup(atc=None, transactions=[])  # type: ignore
        assert built.group_id is None
        assert built.tx_ids == []

    def test_execute_defaults(self):
        """Test execute params defaults."""
        params = ExecuteParams()
        assert params.max_rounds_to_wait is None
        assert params.suppress_log is False


class TestErrors:
    """Tests for the error hierarchy."""

    def test_codes(self):
        """Test errors carry their codes."""
        assert FeeConfigError().code == ERR_FEE_CONFLICT
        assert GroupCapacityError(17).code == ERR_GROUP_TOO_LARGE

    def test_code_override(self):
        """Test a code can be set per instance."""
        assert ComposerConfigError("bad", code="custom").code == "custom"

    def test_hierarchy(self):
        """Test configuration errors are also ValueErrors."""
        error = FeeConfigError()
        assert isinstance(error, ComposerError)
        assert isinstance(error, ValueError)
        assert "static_fee" in str(error)
