"""Unit tests for TransactionComposer."""

from unittest.mock import MagicMock

import pytest
from algosdk import abi, transaction
from algosdk.atomic_transaction_composer import (
    AtomicTransactionComposer,
    EmptySigner,
    TransactionWithSigner,
)

from avm_composer.composer import TransactionComposer
from avm_composer.errors import (
    ComposerConfigError,
    ComposerStateError,
    FeeCeilingError,
    FeeConfigError,
    GroupCapacityError,
    MissingFieldError,
    SignerNotFoundError,
)
from avm_composer.types import (
    AppCreateParams,
    AssetCreateParams,
    AssetOptInParams,
    AssetOptOutParams,
    CompiledProgram,
    GroupState,
    MethodCallParams,
    PaymentParams,
)

from conftest import CLEAR_BYTES, ParamsSource, make_suggested_params


def _pay(sender, receiver, amount=1, **kwargs):
    return PaymentParams(sender=sender.address, receiver=receiver.address, amount=amount, **kwargs)


class TestBuild:
    """Tests for building simple groups."""

    def test_order_and_count(self, composer, alice, bob):
        """Test the group keeps declaration order."""
        composer.add_payment(_pay(alice, bob, 1))
        composer.add_asset_opt_in(AssetOptInParams(sender=bob.address, asset_id=5))
        composer.add_payment(_pay(bob, alice, 3))

        built = composer.build()

        assert [ts.txn.type for ts in built.transactions] == ["pay", "axfer", "pay"]
        assert built.transactions[0].txn.amt == 1
        assert built.transactions[2].txn.amt == 3
        assert composer.count() == 3
        assert composer.state is GroupState.BUILT

    def test_group_id_assigned(self, composer, alice, bob):
        """Test every member shares the group ID."""
        composer.add_payment(_pay(alice, bob)).add_payment(_pay(bob, alice))
        built = composer.build()

        assert built.group_id is not None
        assert all(ts.txn.group == built.group_id for ts in built.transactions)
        assert built.tx_ids == [ts.txn.get_txid() for ts in built.transactions]

    def test_signers_looked_up_by_sender(self, composer, alice, bob):
        """Test signers come from the registry."""
        built = composer.add_payment(_pay(alice, bob)).add_payment(_pay(bob, alice)).build()
        assert built.transactions[0].signer is alice.signer
        assert built.transactions[1].signer is bob.signer

    def test_explicit_signer(self, composer, alice, bob):
        """Test an intent's explicit signer wins over lookup."""
        built = composer.add_payment(_pay(alice, bob, signer=bob.signer)).build()
        assert built.transactions[0].signer is bob.signer

    def test_missing_signer(self, params_source, alice, bob):
        """Test a sender with no signer fails the build."""
        composer = TransactionComposer(get_suggested_params=params_source)
        composer.add_payment(_pay(alice, bob))
        with pytest.raises(SignerNotFoundError):
            composer.build()

    def test_sixteen_allowed(self, composer, alice, bob):
        """Test a full group of 16 builds."""
        for i in range(16):
            composer.add_payment(_pay(alice, bob, i))
        assert len(composer.build().transactions) == 16

    def test_seventeen_rejected(self, composer, alice, bob):
        """Test the 17th transaction fails and nothing is built."""
        for i in range(17):
            composer.add_payment(_pay(alice, bob, i))

        with pytest.raises(GroupCapacityError):
            composer.build()
        assert composer.state is GroupState.BUILDING

    def test_nested_capacity(self, composer, alice, bob, deposit_method):
        """Test nested transactions count against the limit."""
        for i in range(15):
            composer.add_payment(_pay(alice, bob, i))
        composer.add_method_call(
            MethodCallParams(
                sender=alice.address,
                app_id=42,
                method=deposit_method,
                args=[_pay(alice, bob)],
            )
        )
        with pytest.raises(GroupCapacityError) as exc_info:
            composer.build()
        assert exc_info.value.size == 17

    def test_empty_group(self, composer):
        """Test building with no intents."""
        with pytest.raises(ComposerConfigError):
            composer.build()

    def test_no_params_source(self, alice, bob, registry):
        """Test a composer needs a suggested params source."""
        composer = TransactionComposer(get_signer=registry.get_signer)
        composer.add_payment(_pay(alice, bob))
        with pytest.raises(ComposerConfigError):
            composer.build()


class TestFeePolicy:
    """Tests for fee validation during build."""

    def test_conflict_before_network(self, composer, params_source, alice, bob):
        """Test static plus extra fee fails without fetching params."""
        composer.add_payment(_pay(alice, bob, static_fee=1000, extra_fee=1000))

        with pytest.raises(FeeConfigError):
            composer.build()
        assert params_source.calls == 0

    def test_nested_conflict_before_network(
        self, composer, params_source, alice, bob, deposit_method
    ):
        """Test a bad fee policy on a method argument is also caught early."""
        composer.add_method_call(
            MethodCallParams(
                sender=alice.address,
                app_id=42,
                method=deposit_method,
                args=[_pay(alice, bob, static_fee=1000, extra_fee=1)],
            )
        )
        with pytest.raises(FeeConfigError):
            composer.build()
        assert params_source.calls == 0

    def test_ceiling_message(self, composer, alice, bob):
        """Test fee ceiling error names both values."""
        composer.add_payment(_pay(alice, bob, max_fee=999))
        with pytest.raises(FeeCeilingError) as exc_info:
            composer.build()
        assert "1000" in str(exc_info.value)
        assert "999" in str(exc_info.value)


class TestLifecycle:
    """Tests for build idempotence and rebuild."""

    def test_build_idempotent(self, composer, params_source, alice, bob):
        """Test a second build returns the same group without new lookups."""
        composer.add_payment(_pay(alice, bob))
        first = composer.build()
        second = composer.build()

        assert second is first
        assert second.tx_ids == first.tx_ids
        assert params_source.calls == 1

    def test_add_after_build(self, composer, alice, bob):
        """Test adding to a built group fails."""
        composer.add_payment(_pay(alice, bob)).build()
        with pytest.raises(ComposerStateError):
            composer.add_payment(_pay(bob, alice))

    def test_rebuild_uses_fresh_params(self, registry, alice, bob):
        """Test rebuild runs the parameter lookup again."""
        source = ParamsSource(make_suggested_params(first=1000))
        composer = TransactionComposer(get_signer=registry.get_signer, get_suggested_params=source)
        composer.add_payment(_pay(alice, bob)).add_payment(_pay(bob, alice))

        first = composer.build()
        first_ids = list(first.tx_ids)
        source.sp = make_suggested_params(first=2000)
        second = composer.rebuild()

        assert source.calls == 2
        assert second is not first
        assert second.tx_ids != first_ids
        assert second.transactions[0].txn.first_valid_round == 2000

    def test_rebuild_reuses_signed_transactions(self, composer, alice, bob, suggested_params):
        """Test a transaction added with its signer can be regrouped."""
        txn = transaction.PaymentTxn(alice.address, suggested_params, bob.address, 1)
        composer.add_transaction(TransactionWithSigner(txn, alice.signer))
        composer.add_payment(_pay(bob, alice))

        first_group = composer.build().group_id
        second = composer.rebuild()

        assert second.transactions[0].txn is not txn
        assert second.transactions[0].signer is alice.signer
        assert second.group_id == first_group

    def test_rebuild_leaves_previous_group_intact(
        self, composer, params_source, alice, bob, suggested_params
    ):
        """Test a rebuild with new params does not regroup an earlier snapshot."""
        txn = transaction.PaymentTxn(alice.address, suggested_params, bob.address, 1)
        composer.add_transaction(TransactionWithSigner(txn, alice.signer))
        composer.add_payment(_pay(bob, alice))

        first = composer.build()
        first_group = first.group_id
        params_source.sp = make_suggested_params(first=5000)
        second = composer.rebuild()

        assert second.group_id != first_group
        assert all(ts.txn.group == first_group for ts in first.transactions)
        assert txn.group is None


class TestMethodCalls:
    """Tests for method calls in a group."""

    def test_nested_three_transactions(self, composer, alice, bob, deposit_method, wrap_method):
        """Test outer(inner(payment)) gives exactly three ordered transactions."""
        inner = MethodCallParams(
            sender=alice.address,
            app_id=42,
            method=deposit_method,
            args=[_pay(alice, bob)],
        )
        composer.add_method_call(
            MethodCallParams(sender=alice.address, app_id=42, method=wrap_method, args=[inner])
        )
        built = composer.build()

        assert [ts.txn.type for ts in built.transactions] == ["pay", "appl", "appl"]
        assert built.method_calls == {1: deposit_method, 2: wrap_method}
        assert built.atc.method_dict == built.method_calls
        assert len({ts.txn.group for ts in built.transactions}) == 1

    def test_payment_then_nested_call(self, composer, alice, bob, deposit_method):
        """Test outer(payment, inner(payment)) keeps the payments in argument order."""
        inner = MethodCallParams(
            sender=alice.address,
            app_id=42,
            method=deposit_method,
            args=[_pay(alice, bob, 2)],
        )
        outer = MethodCallParams(
            sender=alice.address,
            app_id=42,
            method=abi.Method.from_signature("pair(pay,appl)void"),
            args=[_pay(alice, bob, 1), inner],
        )
        built = composer.add_method_call(outer).build()

        assert [ts.txn.type for ts in built.transactions] == ["pay", "pay", "appl", "appl"]
        assert [ts.txn.amt for ts in built.transactions[:2]] == [1, 2]
        assert built.method_calls == {2: deposit_method, 3: outer.method}

    def test_method_call_create_without_programs(self, composer, alice, add_method):
        """Test a creating method call with no programs is a configuration error."""
        composer.add_method_call(
            MethodCallParams(sender=alice.address, method=add_method, args=[1, 2])
        )
        with pytest.raises(MissingFieldError):
            composer.build()
        assert composer.state is GroupState.BUILDING

    def test_method_call_after_payment(self, composer, alice, bob, add_method):
        """Test method indexes account for earlier transactions."""
        composer.add_payment(_pay(alice, bob))
        composer.add_method_call(
            MethodCallParams(sender=alice.address, app_id=42, method=add_method, args=[1, 2])
        )
        assert composer.build().method_calls == {1: add_method}

    def test_add_atc(self, composer, alice, bob, suggested_params, add_method):
        """Test a pre-built group is flattened with its method annotations."""
        atc = AtomicTransactionComposer()
        atc.add_method_call(
            app_id=42,
            method=add_method,
            sender=alice.address,
            sp=suggested_params,
            signer=alice.signer,
            method_args=[1, 2],
        )
        atc.build_group()

        composer.add_payment(_pay(bob, alice))
        composer.add_atc(atc)
        built = composer.build()

        assert len(built.transactions) == 2
        assert built.method_calls == {1: add_method}
        assert built.transactions[1].txn.group == built.group_id


class TestTransactions:
    """Tests for adding built transactions and unsigned builds."""

    def test_add_transaction_looks_up_signer(self, composer, alice, bob, suggested_params):
        """Test a bare transaction gets the sender's signer."""
        txn = transaction.PaymentTxn(bob.address, suggested_params, alice.address, 1)
        built = composer.add_transaction(txn).build()
        assert built.transactions[0].signer is bob.signer

    def test_add_transaction_without_lookup(self, params_source, alice, bob, suggested_params):
        """Test a bare transaction with no signer source fails immediately."""
        composer = TransactionComposer(get_suggested_params=params_source)
        txn = transaction.PaymentTxn(bob.address, suggested_params, alice.address, 1)
        with pytest.raises(SignerNotFoundError):
            composer.add_transaction(txn)

    def test_build_transactions_unsigned(self, composer, alice, bob):
        """Test build_transactions leaves the composer building."""
        composer.add_payment(_pay(alice, bob)).add_payment(_pay(bob, alice))
        txns = composer.build_transactions()

        assert len(txns) == 2
        assert all(txn.group is None for txn in txns)
        assert composer.state is GroupState.BUILDING

    def test_build_transactions_does_not_touch_built_group(
        self, composer, alice, bob, suggested_params
    ):
        """Test unsigned builds copy caller-owned transactions."""
        txn = transaction.PaymentTxn(alice.address, suggested_params, bob.address, 1)
        composer.add_transaction(TransactionWithSigner(txn, EmptySigner()))
        composer.add_payment(_pay(bob, alice))
        built = composer.build()

        txns = composer.build_transactions()

        assert txns[0] is not txn
        assert txns[0].group is None
        assert built.transactions[0].txn.group == built.group_id
        assert txn.group is None

    def test_asset_create(self, composer, alice):
        """Test an asset create intent builds into the group."""
        built = composer.add_asset_create(
            AssetCreateParams(sender=alice.address, total=10, unit_name="TST")
        ).build()

        txn = built.transactions[0].txn
        assert isinstance(txn, transaction.AssetCreateTxn)
        assert txn.total == 10
        assert txn.group == built.group_id

    def test_opt_in_and_opt_out(self, composer, alice, bob):
        """Test asset opt-in and opt-out shapes in a group."""
        composer.add_asset_opt_in(AssetOptInParams(sender=alice.address, asset_id=9))
        composer.add_asset_opt_out(
            AssetOptOutParams(sender=alice.address, asset_id=9, creator=bob.address)
        )
        opt_in, opt_out = [ts.txn for ts in composer.build().transactions]

        assert (opt_in.receiver, opt_in.amount, opt_in.close_assets_to) == (alice.address, 0, None)
        assert (opt_out.receiver, opt_out.amount, opt_out.close_assets_to) == (
            alice.address,
            0,
            bob.address,
        )


class TestPrograms:
    """Tests for TEAL compilation through the composer."""

    def test_compiled_once(self, registry, params_source, alice):
        """Test identical source is compiled once per composer."""
        source = "#pragma version 10\nint 1\nreturn"
        compiler = MagicMock()
        compiler.compile.return_value = CompiledProgram(
            teal=source,
            compiled=b"\x0a\x81\x01\x43",
            compiled_hash="HASH",
            compiled_base64="CoEBQw==",
        )
        composer = TransactionComposer(
            get_signer=registry.get_signer,
            get_suggested_params=params_source,
            compiler=compiler,
        )
        for i in range(2):
            composer.add_app_create(
                AppCreateParams(
                    sender=alice.address,
                    approval_program=source,
                    clear_program=CLEAR_BYTES,
                    note=f"app {i}",
                )
            )
        built = composer.build()

        compiler.compile.assert_called_once_with(source)
        assert composer.get_compiled_program(source).compiled_hash == "HASH"
        assert built.transactions[1].txn.approval_program == b"\x0a\x81\x01\x43"

    def test_no_compiler(self, composer):
        """Test compiling without a compiler."""
        assert composer.get_compiled_program("int 1") is None
        with pytest.raises(ComposerConfigError):
            composer.compile_program("int 1")
