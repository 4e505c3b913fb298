"""Composer types - transaction intents, method arguments, and build results."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from algosdk import abi, transaction
from algosdk.atomic_transaction_composer import (
    ABIResult,
    AtomicTransactionComposer,
    TransactionSigner,
    TransactionWithSigner,
)

from .constants import ERR_UNSUPPORTED_METHOD_ARG
from .errors import UnsupportedIntentError
from .utils import is_abi_value

if TYPE_CHECKING:
    from algosdk.source_map import SourceMap

    from .signer import HasAddress, SignerAccount


class GroupState(Enum):
    """Lifecycle of a composer's atomic group."""

    BUILDING = "building"
    BUILT = "built"


# ============================================================================
# Intents
# ============================================================================


@dataclass(kw_only=True)
class CommonParams:
    """Fields shared by every transaction intent.

    Attributes:
        sender: Address of the account sending the transaction.
        signer: Signer to use; if omitted the composer looks one up by sender.
        rekey_to: Change the signing key of the sender to this address.
        note: Note bytes, text (UTF-8), or dict (JSON). Max 1024 bytes.
        lease: Mutually exclusive lease, 1..32 bytes or text (zero-padded).
        static_fee: Flat fee in microalgos. Exclusive with extra_fee.
        extra_fee: Fee in microalgos paid on top of the estimated fee.
        max_fee: Fail the build if the fee is higher than this.
        validity_window: Rounds the transaction is valid for.
        first_valid_round: Explicit first valid round (default: from algod).
        last_valid_round: Explicit last valid round (prefer validity_window).
    """

    sender: str
    signer: TransactionSigner | SignerAccount | None = None
    rekey_to: str | None = None
    note: bytes | str | dict[str, Any] | None = None
    lease: bytes | str | None = None
    static_fee: int | None = None
    extra_fee: int | None = None
    max_fee: int | None = None
    validity_window: int | None = None
    first_valid_round: int | None = None
    last_valid_round: int | None = None


@dataclass(kw_only=True)
class PaymentParams(CommonParams):
    """Payment of microalgos to a receiver."""

    receiver: str
    amount: int
    close_remainder_to: str | None = None


@dataclass(kw_only=True)
class AssetCreateParams(CommonParams):
    """Create an Algorand Standard Asset.

    The sender is opted in automatically and holds all units after creation.
    """

    total: int
    decimals: int = 0
    default_frozen: bool = False
    asset_name: str | None = None
    unit_name: str | None = None
    url: str | None = None
    metadata_hash: bytes | None = None
    manager: str | None = None
    reserve: str | None = None
    freeze: str | None = None
    clawback: str | None = None


@dataclass(kw_only=True)
class AssetConfigParams(CommonParams):
    """Reconfigure an asset.

    Unset manager/reserve/freeze/clawback addresses become permanently empty.
    """

    asset_id: int
    manager: str | None = None
    reserve: str | None = None
    freeze: str | None = None
    clawback: str | None = None


@dataclass(kw_only=True)
class AssetFreezeParams(CommonParams):
    """Freeze or unfreeze an account's holding of an asset."""

    asset_id: int
    account: str
    frozen: bool


@dataclass(kw_only=True)
class AssetDestroyParams(CommonParams):
    """Destroy an asset (all units must be back with the creator)."""

    asset_id: int


@dataclass(kw_only=True)
class AssetTransferParams(CommonParams):
    """Transfer asset units."""

    asset_id: int
    amount: int
    receiver: str
    clawback_target: str | None = None
    close_asset_to: str | None = None


@dataclass(kw_only=True)
class AssetOptInParams(CommonParams):
    """Opt the sender in to an asset."""

    asset_id: int


@dataclass(kw_only=True)
class AssetOptOutParams(CommonParams):
    """Opt the sender out of an asset, closing any balance to the creator."""

    asset_id: int
    creator: str


@dataclass(kw_only=True)
class OnlineKeyRegistrationParams(CommonParams):
    """Register participation keys and go online."""

    vote_key: bytes | None = None
    selection_key: bytes | None = None
    vote_first: int | None = None
    vote_last: int | None = None
    vote_key_dilution: int | None = None
    state_proof_key: bytes | None = None


@dataclass(kw_only=True)
class OfflineKeyRegistrationParams(CommonParams):
    """Take an account offline.

    With ``prevent_account_from_ever_participating_again`` the account is
    marked non-participating permanently.
    """

    prevent_account_from_ever_participating_again: bool = False


@dataclass
class AppSchema:
    """Application state schema (immutable after creation)."""

    global_uints: int = 0
    global_byte_slices: int = 0
    local_uints: int = 0
    local_byte_slices: int = 0


@dataclass(frozen=True)
class BoxReference:
    """Box identifier owned by an application.

    Attributes:
        app_id: Owning application; 0 means the application being called.
        name: Raw bytes, text, or an account whose public key is the name.
    """

    app_id: int
    name: bytes | str | HasAddress


BoxIdentifier = Union[bytes, str, "HasAddress"]


@dataclass(kw_only=True)
class AppCallParams(CommonParams):
    """Application call.

    An ``app_id`` of 0 (or None) creates the application. Programs may be
    compiled bytes or TEAL source text.
    """

    app_id: int | None = None
    on_complete: transaction.OnComplete = transaction.OnComplete.NoOpOC
    approval_program: bytes | str | None = None
    clear_program: bytes | str | None = None
    schema: AppSchema | None = None
    args: list[bytes] | None = None
    account_references: list[str] | None = None
    app_references: list[int] | None = None
    asset_references: list[int] | None = None
    box_references: list[BoxReference | BoxIdentifier | tuple[int, Any]] | None = None
    extra_pages: int = 0


@dataclass(kw_only=True)
class AppCreateParams(AppCallParams):
    """Create an application; both programs are required."""

    app_id: int | None = 0


@dataclass(kw_only=True)
class AppUpdateParams(AppCallParams):
    """Update an existing application's programs."""

    app_id: int
    on_complete: transaction.OnComplete = transaction.OnComplete.UpdateApplicationOC


@dataclass(kw_only=True)
class MethodCallParams(AppCallParams):
    """ABI method call.

    ``args`` may mix ABI values, transactions (bare, with signer, or as a
    zero-argument callable producing one), other intents, and nested method
    calls. They are classified into ``arguments`` on construction.
    """

    app_id: int = 0
    method: abi.Method
    args: list[Any] | None = None
    arguments: tuple[MethodArgument, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.arguments = tuple(classify_method_arg(arg) for arg in self.args or [])


@dataclass
class PreBuiltGroup:
    """An already-built AtomicTransactionComposer to fold into the group."""

    atc: AtomicTransactionComposer


TransactionIntent = Union[
    PaymentParams,
    AssetCreateParams,
    AssetConfigParams,
    AssetFreezeParams,
    AssetDestroyParams,
    AssetTransferParams,
    AssetOptInParams,
    AssetOptOutParams,
    OnlineKeyRegistrationParams,
    OfflineKeyRegistrationParams,
    AppCallParams,
    MethodCallParams,
    PreBuiltGroup,
    TransactionWithSigner,
]


# ============================================================================
# Method arguments
# ============================================================================


@dataclass(frozen=True)
class AbiValueArg:
    """A plain ABI value passed through to the method encoder."""

    value: Any


@dataclass(frozen=True)
class SignedTransactionArg:
    """A transaction already bound to its signer; used unchanged."""

    txn_with_signer: TransactionWithSigner


@dataclass(frozen=True)
class TransactionArg:
    """A bare transaction, or a zero-argument callable that produces one."""

    txn: transaction.Transaction | Callable[[], transaction.Transaction]


@dataclass(frozen=True)
class IntentArg:
    """An unresolved intent, built by the typed builders at resolution time."""

    intent: CommonParams


@dataclass(frozen=True)
class MethodCallArg:
    """A nested method call, resolved recursively."""

    params: MethodCallParams


MethodArgument = Union[
    AbiValueArg, SignedTransactionArg, TransactionArg, IntentArg, MethodCallArg
]


def classify_method_arg(arg: Any) -> MethodArgument:
    """Classify a raw method argument by its structure.

    Args:
        arg: Raw argument as passed in ``MethodCallParams.args``.

    Returns:
        The tagged MethodArgument variant.

    Raises:
        UnsupportedIntentError: If the argument matches no variant.
    """
    if isinstance(arg, MethodCallParams):
        return MethodCallArg(arg)
    if isinstance(arg, TransactionWithSigner):
        return SignedTransactionArg(arg)
    if is_abi_value(arg):
        return AbiValueArg(arg)
    if isinstance(arg, transaction.Transaction):
        return TransactionArg(arg)
    if isinstance(arg, CommonParams):
        return IntentArg(arg)
    if callable(arg):
        return TransactionArg(arg)

    raise UnsupportedIntentError(
        f"Unsupported method argument of type {type(arg).__name__}",
        code=ERR_UNSUPPORTED_METHOD_ARG,
    )


# ============================================================================
# Results
# ============================================================================


@dataclass
class CompiledProgram:
    """Result of compiling TEAL source.

    Attributes:
        teal: Original source text.
        compiled: Program bytes.
        compiled_hash: Program hash (address of the logic account).
        compiled_base64: Base64-encoded program bytes as returned by algod.
        source_map: Source map, when algod returned one.
    """

    teal: str
    compiled: bytes
    compiled_hash: str
    compiled_base64: str
    source_map: SourceMap | None = None


@dataclass
class BuiltGroup:
    """Immutable snapshot of a built group.

    Attributes:
        atc: The AtomicTransactionComposer holding the group.
        transactions: Grouped transactions with their signers, in order.
        method_calls: Group index -> ABI method for each method call.
    """

    atc: AtomicTransactionComposer
    transactions: list[TransactionWithSigner]
    method_calls: dict[int, abi.Method] = field(default_factory=dict)

    @property
    def group_id(self) -> bytes | None:
        """Group ID shared by every member (None for a single transaction)."""
        if not self.transactions:
            return None
        return self.transactions[0].txn.group

    @property
    def tx_ids(self) -> list[str]:
        """Transaction IDs in group order."""
        return [ts.txn.get_txid() for ts in self.transactions]


@dataclass
class ExecuteParams:
    """Parameters to control execution.

    Attributes:
        max_rounds_to_wait: Rounds to wait for confirmation. By default until
            the latest last valid round in the group has passed.
        suppress_log: Whether to suppress the send log line.
    """

    max_rounds_to_wait: int | None = None
    suppress_log: bool = False


@dataclass
class SendGroupResult:
    """Result of sending a group and waiting for confirmation.

    Attributes:
        group_id: Base64 group ID ("" for a single transaction).
        tx_ids: Transaction IDs in group order.
        transactions: The submitted transactions.
        confirmations: Pending-transaction info records in group order.
        confirmed_round: Round the group was confirmed in.
        returns: Decoded ABI return values for each method call.
    """

    group_id: str
    tx_ids: list[str]
    transactions: list[transaction.Transaction] = field(default_factory=list)
    confirmations: list[dict[str, Any]] = field(default_factory=list)
    confirmed_round: int | None = None
    returns: list[ABIResult] = field(default_factory=list)
