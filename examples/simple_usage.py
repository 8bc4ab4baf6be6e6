#!/usr/bin/env python3
"""
Simple example of using the chainsigner SDK.
"""
import json
import os

from chainsigner_sdk import SeedAccountProvider, SigningError, TransactionSigner


def main():
    """
    Demonstrate basic usage of the TransactionSigner.

    This example shows how to:
    1. Load an account provider from a mnemonic
    2. Print the default Sui and Starknet addresses
    3. Sign a Sui transfer and a Starknet transfer
    """
    # Read configuration from environment
    MNEMONIC = os.environ.get("MNEMONIC")
    PASSPHRASE = os.environ.get("MNEMONIC_PASSPHRASE", "")

    if not MNEMONIC:
        print("ERROR: MNEMONIC environment variable is required")
        return

    accounts = SeedAccountProvider.from_mnemonic(MNEMONIC, PASSPHRASE)
    signer = TransactionSigner()

    sui_sender = signer.address("SUI", accounts)
    print(f"Sui address: {sui_sender}")
    print(f"Starknet address: {signer.address('STARKNET', accounts)}")

    requests = [
        {
            "chain": "SUI",
            "sui": {
                "transfer": {
                    "sui": {"amount": 60000000},
                    "recipient": "0xdcbb0bb8eaf162bbab91a9b8436b43bad3cbe3a256851f4c47d9732b78996e88",
                    "sender": sui_sender,
                    "gas_payment": {
                        "object_id": "0x079ba634e53c8242cba33f917de10ea1279a70a57b3346d78c2f63115c6da01c",
                        "seq_num": 2641230,
                        "object_digest": "HBLfbA1EqRUAWWMeVZa5bgKyXv3VS1GnCZcKCZYLtGLu",
                    },
                    "gas_budget": 10000000,
                    "gas_price": 1000,
                }
            },
        },
        {
            "chain": "STARKNET",
            "starknet": {
                "transfer": {
                    "sender": os.environ.get("STARKNET_ACCOUNT", "0x1"),
                    "nonce": 0,
                    "to": "0x2",
                    "amount": "1000",
                    "max_fee": "100000000000000",
                    "chain_id": "SN_SEPOLIA",
                }
            },
        },
    ]

    try:
        for signed in signer.sign_many(requests, accounts):
            print(json.dumps(signed.model_dump(exclude_none=True), indent=2))
    except SigningError as e:
        print(f"Error signing transaction ({e.code.value}): {str(e)}")


if __name__ == "__main__":
    main()
