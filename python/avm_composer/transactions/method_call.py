"""ABI method-call argument resolution.

Flattens a method call and everything its arguments produce (nested method
calls, transactions, intents) into the ordered list of transactions that go
into the atomic group, ending with the method call itself.
"""

from __future__ import annotations

import logging
from typing import Any

from algosdk import abi, transaction
from algosdk.atomic_transaction_composer import (
    AtomicTransactionComposer,
    TransactionWithSigner,
)

from ..boxes import resolve_box_references
from ..constants import ERR_UNSUPPORTED_METHOD_ARG, MAX_GROUP_SIZE
from ..errors import GroupCapacityError, MissingFieldError, UnsupportedIntentError
from ..types import (
    AbiValueArg,
    AppSchema,
    IntentArg,
    MethodArgument,
    MethodCallArg,
    MethodCallParams,
    SignedTransactionArg,
    TransactionArg,
)
from .builders import BuildContext, build_intent

logger = logging.getLogger(__name__)


class MethodCallResolver:
    """Resolves method-call intents into ordered, signer-bound transactions.

    Signers are resolved eagerly so every transaction produced by a nested
    argument can be signed on its own.

    Attributes:
        method_map: Transaction ID -> ABI method for every call resolved.
    """

    def __init__(self, ctx: BuildContext, method_map: dict[str, abi.Method] | None = None):
        """Create resolver.

        Args:
            ctx: Shared build context.
            method_map: Map to record resolved method calls in.
        """
        self._ctx = ctx
        self.method_map: dict[str, abi.Method] = method_map if method_map is not None else {}

    def resolve(self, params: MethodCallParams) -> list[TransactionWithSigner]:
        """Resolve a method call and its arguments.

        Argument handling, in order:
        - ABI values pass through to the method encoder.
        - Transactions with a signer are queued as given.
        - Nested method calls are resolved recursively. Everything they
          produce is queued; their call transaction becomes this argument.
        - Bare transactions, transaction factories, and intents are built,
          bound to the intent's signer, else this call's signer, else the
          signer looked up for the transaction sender, and queued.

        Args:
            params: Method call intent.

        Returns:
            Queued transactions in the order their arguments were discovered,
            then the method call, each with its signer.

        Raises:
            GroupCapacityError: If the result would exceed 16 transactions.
            MissingFieldError: If a create or update call lacks a program.
            SignerNotFoundError: If a signer cannot be found.
        """
        method_args: list[Any] = []
        queued: list[TransactionWithSigner] = []

        for arg in params.arguments:
            method_args.append(self._resolve_arg(arg, params, queued))

        size = len(queued) + 1
        if size > MAX_GROUP_SIZE:
            raise GroupCapacityError(size)

        app_id = params.app_id or 0
        is_create = app_id == 0
        schema = params.schema or AppSchema()
        approval_program = self._ctx.program_bytes(params.approval_program)
        clear_program = self._ctx.program_bytes(params.clear_program)
        if (
            is_create or params.on_complete == transaction.OnComplete.UpdateApplicationOC
        ) and (approval_program is None or clear_program is None):
            raise MissingFieldError(
                "approval_program and clear_program are required to "
                f"{'create' if is_create else 'update'} an application"
            )

        # transaction arguments are already queued, only the call is taken from atc;
        # note, lease and rekey_to are applied by the common build step
        atc = AtomicTransactionComposer()
        atc.add_method_call(
            app_id=app_id,
            method=params.method,
            sender=params.sender,
            sp=self._ctx.sp,
            signer=self._ctx.signer_for(params.sender, params.signer),
            method_args=method_args,
            on_complete=params.on_complete,
            local_schema=(
                transaction.StateSchema(schema.local_uints, schema.local_byte_slices)
                if is_create
                else None
            ),
            global_schema=(
                transaction.StateSchema(schema.global_uints, schema.global_byte_slices)
                if is_create
                else None
            ),
            approval_program=approval_program,
            clear_program=clear_program,
            extra_pages=params.extra_pages,
            accounts=params.account_references,
            foreign_apps=params.app_references,
            foreign_assets=params.asset_references,
            boxes=resolve_box_references(params.box_references),
        )

        call = atc.txn_list[-1]
        self._ctx.finish(params, call.txn)
        self.method_map[call.txn.get_txid()] = params.method

        resolved = queued + [call]
        logger.debug(
            "Resolved method call %s into %d transaction(s)",
            params.method.get_signature(),
            len(resolved),
        )
        return resolved

    def _resolve_arg(
        self,
        arg: MethodArgument,
        params: MethodCallParams,
        queued: list[TransactionWithSigner],
    ) -> Any:
        if isinstance(arg, AbiValueArg):
            return arg.value

        if isinstance(arg, MethodCallArg):
            nested = self.resolve(arg.params)
            queued.extend(nested)
            return nested[-1]

        if isinstance(arg, SignedTransactionArg):
            ts = self._ctx.reuse(arg.txn_with_signer)
        elif isinstance(arg, TransactionArg):
            txn = arg.txn if isinstance(arg.txn, transaction.Transaction) else arg.txn()
            signer = self._ctx.signer_for(txn.sender, fallback=params.signer)
            ts = self._ctx.reuse(TransactionWithSigner(txn, signer))
        elif isinstance(arg, IntentArg):
            txn = build_intent(arg.intent, self._ctx)
            signer = self._ctx.signer_for(
                arg.intent.sender, explicit=arg.intent.signer, fallback=params.signer
            )
            ts = TransactionWithSigner(txn, signer)
        else:
            raise UnsupportedIntentError(
                f"Unsupported method argument: {arg!r}", code=ERR_UNSUPPORTED_METHOD_ARG
            )

        queued.append(ts)
        return ts
