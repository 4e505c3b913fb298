"""Typed transaction builders.

Each builder maps one intent kind onto its algosdk transaction constructor
and then runs the common build step. ``build_intent`` dispatches by intent
class.
"""

from __future__ import annotations

import base64
import copy
from collections.abc import Callable
from dataclasses import dataclass, fields

from algosdk import transaction
from algosdk.atomic_transaction_composer import (
    EmptySigner,
    TransactionSigner,
    TransactionWithSigner,
)

from ..boxes import resolve_box_references
from ..errors import ComposerConfigError, MissingFieldError, SignerNotFoundError, UnsupportedIntentError
from ..signer import SignerLookup
from ..types import (
    AppCallParams,
    AppCreateParams,
    AppSchema,
    AppUpdateParams,
    AssetConfigParams,
    AssetCreateParams,
    AssetDestroyParams,
    AssetFreezeParams,
    AssetOptInParams,
    AssetOptOutParams,
    AssetTransferParams,
    CommonParams,
    MethodCallParams,
    OfflineKeyRegistrationParams,
    OnlineKeyRegistrationParams,
    PaymentParams,
)
from .common import ValidityDefaults, apply_common_params


@dataclass
class BuildContext:
    """Everything a builder needs that is shared across one build.

    Attributes:
        sp: Suggested params fetched once for the whole build.
        validity: Composer validity window defaults.
        get_signer: Signer lookup by address.
        compile_program: Compiles TEAL source to program bytes.
        include_signer: Bind real signers (False binds EmptySigner).
    """

    sp: transaction.SuggestedParams
    validity: ValidityDefaults
    get_signer: SignerLookup | None = None
    compile_program: Callable[[str], bytes] | None = None
    include_signer: bool = True

    def finish(self, params: CommonParams, txn: transaction.Transaction) -> transaction.Transaction:
        """Run the common build step on a freshly built skeleton."""
        return apply_common_params(params, txn, self.sp, self.validity)

    def program_bytes(self, program: bytes | str | None) -> bytes | None:
        """Get program bytes, compiling TEAL source text if needed.

        Raises:
            ComposerConfigError: If source text is given and no compiler is set.
        """
        if program is None or isinstance(program, (bytes, bytearray)):
            return program
        if self.compile_program is None:
            raise ComposerConfigError("TEAL source given but no program compiler is configured")
        return self.compile_program(program)

    def signer_for(
        self,
        sender: str,
        explicit: object | None = None,
        fallback: object | None = None,
    ) -> TransactionSigner:
        """Resolve the signer for a transaction.

        Order: explicit signer, then fallback (e.g. the outer method call's
        signer), then lookup by sender.

        Raises:
            SignerNotFoundError: If no signer can be found.
        """
        if not self.include_signer:
            return EmptySigner()

        signer = explicit if explicit is not None else fallback
        if signer is not None:
            return unwrap_signer(signer)
        if self.get_signer is None:
            raise SignerNotFoundError(sender)
        return self.get_signer(sender)

    def reuse(self, ts: TransactionWithSigner) -> TransactionWithSigner:
        """Prepare a caller-owned, signer-bound transaction for a new group.

        The transaction is copied with its group ID cleared, so the caller's
        object and any group built from it earlier stay unchanged. Without
        signers the copy is bound to EmptySigner.
        """
        txn = copy.copy(ts.txn)
        txn.group = None
        if not self.include_signer:
            return TransactionWithSigner(txn, EmptySigner())
        return TransactionWithSigner(txn, ts.signer)


def unwrap_signer(signer: object) -> TransactionSigner:
    """Get the TransactionSigner from a signer or a signer-carrying account."""
    if isinstance(signer, TransactionSigner):
        return signer
    inner = getattr(signer, "signer", None)
    if isinstance(inner, TransactionSigner):
        return inner
    raise ComposerConfigError(f"Unsupported signer of type {type(signer).__name__}")


def common_fields(params: CommonParams) -> dict:
    """Copy the shared intent fields into a dict."""
    return {f.name: getattr(params, f.name) for f in fields(CommonParams)}


def _b64(value: bytes | str | None) -> str | None:
    # algosdk expects keyreg keys as base64 strings
    if value is None or isinstance(value, str):
        return value
    return base64.b64encode(value).decode("utf-8")


def build_payment(params: PaymentParams, ctx: BuildContext) -> transaction.Transaction:
    txn = transaction.PaymentTxn(
        sender=params.sender,
        sp=ctx.sp,
        receiver=params.receiver,
        amt=params.amount,
        close_remainder_to=params.close_remainder_to,
    )
    return ctx.finish(params, txn)


def build_asset_create(params: AssetCreateParams, ctx: BuildContext) -> transaction.Transaction:
    txn = transaction.AssetCreateTxn(
        sender=params.sender,
        sp=ctx.sp,
        total=params.total,
        decimals=params.decimals,
        default_frozen=params.default_frozen,
        manager=params.manager,
        reserve=params.reserve,
        freeze=params.freeze,
        clawback=params.clawback,
        unit_name=params.unit_name or "",
        asset_name=params.asset_name or "",
        url=params.url or "",
        metadata_hash=params.metadata_hash,
    )
    return ctx.finish(params, txn)


def build_asset_config(params: AssetConfigParams, ctx: BuildContext) -> transaction.Transaction:
    txn = transaction.AssetConfigTxn(
        sender=params.sender,
        sp=ctx.sp,
        index=params.asset_id,
        manager=params.manager,
        reserve=params.reserve,
        freeze=params.freeze,
        clawback=params.clawback,
        strict_empty_address_check=False,
    )
    return ctx.finish(params, txn)


def build_asset_freeze(params: AssetFreezeParams, ctx: BuildContext) -> transaction.Transaction:
    txn = transaction.AssetFreezeTxn(
        sender=params.sender,
        sp=ctx.sp,
        index=params.asset_id,
        target=params.account,
        new_freeze_state=params.frozen,
    )
    return ctx.finish(params, txn)


def build_asset_destroy(params: AssetDestroyParams, ctx: BuildContext) -> transaction.Transaction:
    txn = transaction.AssetDestroyTxn(
        sender=params.sender,
        sp=ctx.sp,
        index=params.asset_id,
    )
    return ctx.finish(params, txn)


def build_asset_transfer(params: AssetTransferParams, ctx: BuildContext) -> transaction.Transaction:
    txn = transaction.AssetTransferTxn(
        sender=params.sender,
        sp=ctx.sp,
        receiver=params.receiver,
        amt=params.amount,
        index=params.asset_id,
        close_assets_to=params.close_asset_to,
        revocation_target=params.clawback_target,
    )
    return ctx.finish(params, txn)


def build_asset_opt_in(params: AssetOptInParams, ctx: BuildContext) -> transaction.Transaction:
    """Opt-in is a zero-unit transfer to self."""
    transfer = AssetTransferParams(
        **common_fields(params),
        asset_id=params.asset_id,
        amount=0,
        receiver=params.sender,
    )
    return build_asset_transfer(transfer, ctx)


def build_asset_opt_out(params: AssetOptOutParams, ctx: BuildContext) -> transaction.Transaction:
    """Opt-out is a zero-unit transfer to self that closes to the creator."""
    transfer = AssetTransferParams(
        **common_fields(params),
        asset_id=params.asset_id,
        amount=0,
        receiver=params.sender,
        close_asset_to=params.creator,
    )
    return build_asset_transfer(transfer, ctx)


def build_online_key_registration(
    params: OnlineKeyRegistrationParams, ctx: BuildContext
) -> transaction.Transaction:
    required = ("vote_key", "selection_key", "vote_first", "vote_last", "vote_key_dilution")
    missing = [name for name in required if getattr(params, name) is None]
    if missing:
        raise MissingFieldError(
            f"Online key registration is missing: {', '.join(missing)}"
        )

    txn = transaction.KeyregOnlineTxn(
        sender=params.sender,
        sp=ctx.sp,
        votekey=_b64(params.vote_key),
        selkey=_b64(params.selection_key),
        votefst=params.vote_first,
        votelst=params.vote_last,
        votekd=params.vote_key_dilution,
        sprfkey=_b64(params.state_proof_key),
    )
    return ctx.finish(params, txn)


def build_offline_key_registration(
    params: OfflineKeyRegistrationParams, ctx: BuildContext
) -> transaction.Transaction:
    if params.prevent_account_from_ever_participating_again:
        txn = transaction.KeyregNonparticipatingTxn(sender=params.sender, sp=ctx.sp)
    else:
        txn = transaction.KeyregOfflineTxn(sender=params.sender, sp=ctx.sp)
    return ctx.finish(params, txn)


def build_app_call(params: AppCallParams, ctx: BuildContext) -> transaction.Transaction:
    """Build an application call.

    An app_id of 0/None always builds a creation transaction.
    """
    approval_program = ctx.program_bytes(params.approval_program)
    clear_program = ctx.program_bytes(params.clear_program)

    shared = dict(
        sender=params.sender,
        sp=ctx.sp,
        on_complete=params.on_complete,
        app_args=params.args,
        accounts=params.account_references,
        foreign_apps=params.app_references,
        foreign_assets=params.asset_references,
        boxes=resolve_box_references(params.box_references),
        extra_pages=params.extra_pages,
    )

    if not params.app_id:
        if approval_program is None or clear_program is None:
            raise MissingFieldError(
                "approval_program and clear_program are required for application creation"
            )
        schema = params.schema or AppSchema()
        txn = transaction.ApplicationCreateTxn(
            approval_program=approval_program,
            clear_program=clear_program,
            global_schema=transaction.StateSchema(schema.global_uints, schema.global_byte_slices),
            local_schema=transaction.StateSchema(schema.local_uints, schema.local_byte_slices),
            **shared,
        )
    else:
        if params.on_complete == transaction.OnComplete.UpdateApplicationOC and (
            approval_program is None or clear_program is None
        ):
            raise MissingFieldError(
                "approval_program and clear_program are required for application update"
            )
        txn = transaction.ApplicationCallTxn(
            index=params.app_id,
            approval_program=approval_program,
            clear_program=clear_program,
            **shared,
        )

    return ctx.finish(params, txn)


_BUILDERS: dict[type, Callable[..., transaction.Transaction]] = {
    PaymentParams: build_payment,
    AssetCreateParams: build_asset_create,
    AssetConfigParams: build_asset_config,
    AssetFreezeParams: build_asset_freeze,
    AssetDestroyParams: build_asset_destroy,
    AssetTransferParams: build_asset_transfer,
    AssetOptInParams: build_asset_opt_in,
    AssetOptOutParams: build_asset_opt_out,
    OnlineKeyRegistrationParams: build_online_key_registration,
    OfflineKeyRegistrationParams: build_offline_key_registration,
    AppCallParams: build_app_call,
    AppCreateParams: build_app_call,
    AppUpdateParams: build_app_call,
}


def build_intent(intent: CommonParams, ctx: BuildContext) -> transaction.Transaction:
    """Build a single-transaction intent.

    Args:
        intent: Any non-method-call intent.
        ctx: Shared build context.

    Returns:
        The built transaction (no signer, no group).

    Raises:
        UnsupportedIntentError: If the intent kind has no builder.
    """
    if not isinstance(intent, MethodCallParams):
        for cls in type(intent).__mro__:
            builder = _BUILDERS.get(cls)
            if builder is not None:
                return builder(intent, ctx)

    raise UnsupportedIntentError(f"Unsupported intent type: {type(intent).__name__}")
