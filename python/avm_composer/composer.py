"""Atomic group composer.

Collects transaction intents, resolves them against one suggested-params
fetch, and assembles them into a single atomic group.
"""

from __future__ import annotations

import logging

from algosdk import abi, transaction
from algosdk.atomic_transaction_composer import (
    AtomicTransactionComposer,
    TransactionWithSigner,
)
from algosdk.v2client import algod

from .constants import ERR_EMPTY_GROUP, ERR_NO_GROUP_SENDER, ERR_NO_PARAMS_SOURCE, MAX_GROUP_SIZE
from .errors import (
    ComposerConfigError,
    ComposerStateError,
    GroupCapacityError,
    SignerNotFoundError,
)
from .execute import execute_group
from .signer import GroupSender, ProgramCompiler, SignerLookup, SuggestedParamsSource
from .signers import AlgodGroupSender, AlgodProgramCompiler
from .transactions import (
    BuildContext,
    MethodCallResolver,
    ValidityDefaults,
    build_intent,
    check_fee_policy,
)
from .transactions.builders import unwrap_signer
from .types import (
    AppCallParams,
    AppCreateParams,
    AppUpdateParams,
    AssetConfigParams,
    AssetCreateParams,
    AssetDestroyParams,
    AssetFreezeParams,
    AssetOptInParams,
    AssetOptOutParams,
    AssetTransferParams,
    BuiltGroup,
    CommonParams,
    CompiledProgram,
    ExecuteParams,
    GroupState,
    IntentArg,
    MethodCallArg,
    MethodCallParams,
    OfflineKeyRegistrationParams,
    OnlineKeyRegistrationParams,
    PaymentParams,
    PreBuiltGroup,
    SendGroupResult,
    TransactionIntent,
)

logger = logging.getLogger(__name__)


class TransactionComposer:
    """Composes transaction intents into one atomic group.

    Example:
        ```python
        client = get_algod_client("localnet")
        registry = SignerRegistry().add_account(private_key)
        composer = TransactionComposer(algod=client, get_signer=registry.get_signer)
        result = (
            composer.add_payment(PaymentParams(sender=alice, receiver=bob, amount=1_000))
            .add_method_call(MethodCallParams(sender=alice, app_id=app_id, method=method, args=[1]))
            .execute()
        )
        ```
    """

    def __init__(
        self,
        algod: algod.AlgodClient | None = None,
        get_signer: SignerLookup | None = None,
        get_suggested_params: SuggestedParamsSource | None = None,
        default_validity_window: int | None = None,
        compiler: ProgramCompiler | None = None,
        group_sender: GroupSender | None = None,
    ):
        """Create composer.

        Collaborators not given explicitly are derived from ``algod``.

        Args:
            algod: Algod client.
            get_signer: Signer lookup for intents with no explicit signer.
            get_suggested_params: Network parameter source.
            default_validity_window: Default validity window in rounds. When
                unset, 10 rounds (1000 on LocalNet).
            compiler: TEAL compiler for programs given as source text.
            group_sender: Submits built groups in execute().
        """
        self._get_signer = get_signer
        self._get_suggested_params = get_suggested_params or (
            algod.suggested_params if algod is not None else None
        )
        self._validity = ValidityDefaults.from_setting(default_validity_window)
        self._compiler = compiler or (AlgodProgramCompiler(algod) if algod is not None else None)
        self._group_sender = group_sender or (AlgodGroupSender(algod) if algod is not None else None)

        self._intents: list[TransactionIntent] = []
        self._state = GroupState.BUILDING
        self._built: BuiltGroup | None = None
        self._compiled_programs: dict[str, CompiledProgram] = {}

    @property
    def state(self) -> GroupState:
        return self._state

    # ------------------------------------------------------------------
    # Adding intents
    # ------------------------------------------------------------------

    def _push(self, intent: TransactionIntent) -> "TransactionComposer":
        if self._state is GroupState.BUILT:
            raise ComposerStateError(
                "Cannot add transactions to a group that is already built"
            )
        self._intents.append(intent)
        return self

    def add_payment(self, params: PaymentParams) -> "TransactionComposer":
        return self._push(params)

    def add_asset_create(self, params: AssetCreateParams) -> "TransactionComposer":
        return self._push(params)

    def add_asset_config(self, params: AssetConfigParams) -> "TransactionComposer":
        return self._push(params)

    def add_asset_freeze(self, params: AssetFreezeParams) -> "TransactionComposer":
        return self._push(params)

    def add_asset_destroy(self, params: AssetDestroyParams) -> "TransactionComposer":
        return self._push(params)

    def add_asset_transfer(self, params: AssetTransferParams) -> "TransactionComposer":
        return self._push(params)

    def add_asset_opt_in(self, params: AssetOptInParams) -> "TransactionComposer":
        return self._push(params)

    def add_asset_opt_out(self, params: AssetOptOutParams) -> "TransactionComposer":
        return self._push(params)

    def add_online_key_registration(
        self, params: OnlineKeyRegistrationParams
    ) -> "TransactionComposer":
        return self._push(params)

    def add_offline_key_registration(
        self, params: OfflineKeyRegistrationParams
    ) -> "TransactionComposer":
        return self._push(params)

    def add_app_call(self, params: AppCallParams) -> "TransactionComposer":
        return self._push(params)

    def add_app_create(self, params: AppCreateParams) -> "TransactionComposer":
        return self._push(params)

    def add_app_update(self, params: AppUpdateParams) -> "TransactionComposer":
        return self._push(params)

    def add_method_call(self, params: MethodCallParams) -> "TransactionComposer":
        return self._push(params)

    def add_atc(self, atc: AtomicTransactionComposer) -> "TransactionComposer":
        """Add every transaction of another composer, keeping method annotations."""
        return self._push(PreBuiltGroup(atc))

    def add_transaction(
        self,
        txn: transaction.Transaction | TransactionWithSigner,
        signer=None,
    ) -> "TransactionComposer":
        """Add an already-built transaction.

        Args:
            txn: Transaction, or transaction already bound to a signer.
            signer: Signer for a bare transaction; looked up by sender if omitted.

        Raises:
            SignerNotFoundError: If a bare transaction's signer cannot be found.
        """
        if isinstance(txn, TransactionWithSigner):
            return self._push(txn)

        if signer is None:
            if self._get_signer is None:
                raise SignerNotFoundError(txn.sender)
            signer = self._get_signer(txn.sender)
        return self._push(TransactionWithSigner(txn, unwrap_signer(signer)))

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    def get_compiled_program(self, source: str) -> CompiledProgram | None:
        """Get a previous compilation result for TEAL source, if any."""
        return self._compiled_programs.get(source)

    def compile_program(self, source: str) -> CompiledProgram:
        """Compile TEAL source, once per distinct source text.

        Raises:
            ComposerConfigError: If no compiler is configured.
        """
        compiled = self._compiled_programs.get(source)
        if compiled is not None:
            return compiled
        if self._compiler is None:
            raise ComposerConfigError("TEAL source given but no program compiler is configured")

        compiled = self._compiler.compile(source)
        self._compiled_programs[source] = compiled
        logger.debug("Compiled program %s (%d bytes)", compiled.compiled_hash, len(compiled.compiled))
        return compiled

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def count(self) -> int:
        """Number of transactions the pending intents resolve to."""
        if self._built is not None:
            return len(self._built.transactions)
        return len(self.build_transactions())

    def build_transactions(self) -> list[transaction.Transaction]:
        """Resolve the pending intents without signers or a group ID.

        Returns:
            Unsigned, ungrouped transactions in group order.
        """
        resolved, _ = self._resolve_all(include_signer=False)
        return [ts.txn for ts in resolved]

    def build(self) -> BuiltGroup:
        """Build the atomic group.

        Returns the existing group while already built; use rebuild() to
        resolve the intents again.

        Raises:
            FeeConfigError: Before any network call, if an intent sets both
                static_fee and extra_fee.
            GroupCapacityError: If more than 16 transactions are resolved.
        """
        if self._state is GroupState.BUILT and self._built is not None:
            return self._built

        resolved, method_map = self._resolve_all(include_signer=True)
        if not resolved:
            raise ComposerConfigError("Cannot build an empty transaction group", code=ERR_EMPTY_GROUP)

        atc = AtomicTransactionComposer()
        method_calls: dict[int, abi.Method] = {}
        for index, ts in enumerate(resolved):
            method = method_map.get(ts.txn.get_txid())
            if method is not None:
                method_calls[index] = method
            atc.add_transaction(ts)
        atc.method_dict = dict(method_calls)
        atc.build_group()

        self._built = BuiltGroup(atc=atc, transactions=list(atc.txn_list), method_calls=method_calls)
        self._state = GroupState.BUILT

        logger.debug(
            "Built group of %d transaction(s) with %d method call(s)",
            len(resolved),
            len(method_calls),
        )
        return self._built

    def rebuild(self) -> BuiltGroup:
        """Discard the built group and build again from the same intents."""
        self._built = None
        self._state = GroupState.BUILDING
        return self.build()

    def execute(self, params: ExecuteParams | None = None) -> SendGroupResult:
        """Build, sign, submit and wait for the group.

        Raises:
            ComposerConfigError: If no group sender is configured.
        """
        if self._group_sender is None:
            raise ComposerConfigError("No group sender is configured", code=ERR_NO_GROUP_SENDER)
        built = self.build()
        return execute_group(built, self._group_sender, self._suggested_params, params)

    def _suggested_params(self) -> transaction.SuggestedParams:
        if self._get_suggested_params is None:
            raise ComposerConfigError(
                "No suggested params source is configured", code=ERR_NO_PARAMS_SOURCE
            )
        return self._get_suggested_params()

    def _compile_bytes(self, source: str) -> bytes:
        return self.compile_program(source).compiled

    def _resolve_all(
        self, include_signer: bool
    ) -> tuple[list[TransactionWithSigner], dict[str, abi.Method]]:
        for intent in self._intents:
            _check_fees(intent)

        ctx = BuildContext(
            sp=self._suggested_params(),
            validity=self._validity,
            get_signer=self._get_signer,
            compile_program=self._compile_bytes,
            include_signer=include_signer,
        )
        resolver = MethodCallResolver(ctx)

        resolved: list[TransactionWithSigner] = []
        for intent in self._intents:
            resolved.extend(self._resolve_intent(intent, ctx, resolver))

        if len(resolved) > MAX_GROUP_SIZE:
            raise GroupCapacityError(len(resolved))
        return resolved, resolver.method_map

    def _resolve_intent(
        self,
        intent: TransactionIntent,
        ctx: BuildContext,
        resolver: MethodCallResolver,
    ) -> list[TransactionWithSigner]:
        if isinstance(intent, TransactionWithSigner):
            return [ctx.reuse(intent)]

        if isinstance(intent, PreBuiltGroup):
            resolved = []
            for index, ts in enumerate(intent.atc.txn_list):
                ts = ctx.reuse(ts)
                method = intent.atc.method_dict.get(index)
                if method is not None:
                    resolver.method_map[ts.txn.get_txid()] = method
                resolved.append(ts)
            return resolved

        if isinstance(intent, MethodCallParams):
            return resolver.resolve(intent)

        txn = build_intent(intent, ctx)
        return [TransactionWithSigner(txn, ctx.signer_for(intent.sender, intent.signer))]


def _check_fees(intent: TransactionIntent) -> None:
    # Nested intents included
    if isinstance(intent, CommonParams):
        check_fee_policy(intent)
    if isinstance(intent, MethodCallParams):
        for arg in intent.arguments:
            if isinstance(arg, MethodCallArg):
                _check_fees(arg.params)
            elif isinstance(arg, IntentArg):
                _check_fees(arg.intent)
