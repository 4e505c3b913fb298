"""avm-composer LocalNet Example.

Creates an application from TEAL source, then sends one atomic group holding
a payment and an ABI method call whose argument is itself a method call that
takes a payment:

    [payment, payment (deposit arg), deposit(pay), wrap(appl)]

Requires a running LocalNet (e.g. `algokit localnet start`) and a funded
dispenser account.

Run with: python main.py
"""

import os
import sys

from algosdk import abi, account, logic
from dotenv import load_dotenv

from avm_composer import (
    AppCreateParams,
    ExecuteParams,
    MethodCallParams,
    PaymentParams,
    SignerRegistry,
    TransactionComposer,
    get_algod_client,
)

# Load environment variables
load_dotenv()

dispenser_mnemonic = os.environ.get("LOCALNET_DISPENSER_MNEMONIC")

if not dispenser_mnemonic:
    print("Error: LOCALNET_DISPENSER_MNEMONIC environment variable is required")
    sys.exit(1)

APPROVAL_PROGRAM = """#pragma version 10
txn ApplicationID
bz approve
txn NumAppArgs
int 2
==
bz constant
byte 0x151f7c75
txna ApplicationArgs 1
concat
log
b approve
constant:
byte 0x151f7c75
int 42
itob
concat
log
approve:
int 1
return
"""

CLEAR_PROGRAM = """#pragma version 10
int 1
return
"""

ECHO = abi.Method.from_signature("echo(uint64)uint64")
DEPOSIT = abi.Method.from_signature("deposit(pay)uint64")
WRAP = abi.Method.from_signature("wrap(appl)uint64")


def main() -> None:
    client = get_algod_client("localnet")
    registry = SignerRegistry().add_account_from_mnemonic(dispenser_mnemonic)
    dispenser = registry.get_addresses()[0]

    _, receiver = account.generate_account()

    def new_composer() -> TransactionComposer:
        return TransactionComposer(algod=client, get_signer=registry.get_signer)

    # Create the application; TEAL source is compiled through algod
    create = new_composer().add_app_create(
        AppCreateParams(
            sender=dispenser,
            approval_program=APPROVAL_PROGRAM,
            clear_program=CLEAR_PROGRAM,
        )
    )
    created = create.execute()
    app_id = created.confirmations[0]["application-index"]
    print(f"Created application {app_id} in round {created.confirmed_round}")

    app_address = logic.get_application_address(app_id)

    composer = (
        new_composer()
        .add_payment(
            PaymentParams(
                sender=dispenser,
                receiver=receiver,
                amount=1_000_000,
                validity_window=5,
                note="avm-composer example",
            )
        )
        .add_method_call(
            MethodCallParams(
                sender=dispenser,
                app_id=app_id,
                method=WRAP,
                args=[
                    MethodCallParams(
                        sender=dispenser,
                        app_id=app_id,
                        method=DEPOSIT,
                        args=[
                            PaymentParams(sender=dispenser, receiver=app_address, amount=100_000)
                        ],
                    )
                ],
                extra_fee=1_000,
            )
        )
    )

    built = composer.build()
    print(f"Built group of {len(built.transactions)} transactions:")
    for ts in built.transactions:
        print(f"  {ts.txn.get_txid()} {ts.txn.type} fee={ts.txn.fee}")

    result = composer.execute(ExecuteParams(suppress_log=True))
    print(f"Confirmed in round {result.confirmed_round}")
    for abi_result in result.returns:
        print(f"  {abi_result.method.name} returned {abi_result.return_value}")

    echo = new_composer().add_method_call(
        MethodCallParams(sender=dispenser, app_id=app_id, method=ECHO, args=[7])
    )
    print(f"echo(7) returned {echo.execute().returns[0].return_value}")


if __name__ == "__main__":
    main()
