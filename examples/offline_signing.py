#!/usr/bin/env python3
"""
Example: Build, sign and verify a payment without touching the network.

The signed blob printed at the end can be submitted later from any machine
with ``Xrpl.submit_signed_transaction`` or any XRPL node's ``submit`` method.

Environment:
    XRPL_SECRET: secret of the sending account (at least 32 characters)
"""

import json
import logging
import os
import sys

from xrpl_client import Xrpl, XrplError, validate_address, validate_amount, validate_currency_code

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DESTINATION = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"
ISSUER = "rvYAfWj5gh67oV6fW32ZzP3Aw4Eubs59B"
CURRENCY = "USD"
AMOUNT = "50.00"


def main() -> int:
    secret = os.environ.get("XRPL_SECRET", "offline-example-secret-0123456789abcdef")
    xrpl = Xrpl.testnet()

    try:
        validate_address(DESTINATION, field="destination")
        validate_address(ISSUER, field="issuer")
        validate_currency_code(CURRENCY)
        validate_amount(AMOUNT)
        logger.info("All transaction components validated")

        transaction = xrpl.create_payment_transaction(
            secret, DESTINATION, ISSUER, CURRENCY, AMOUNT,
            sequence=1,
            last_ledger_sequence=1000,
        )
        logger.info("Built payment transaction")
        print(json.dumps(transaction.to_json(), indent=2))

        signed = xrpl.sign_transaction_offline(secret, transaction)
        logger.info(f"Signed transaction {signed.hash}")

        if not xrpl.verify_signed_transaction(signed):
            logger.error("Signed transaction failed verification")
            return 1
        logger.info("Signature verified")
    except XrplError as e:
        logger.error(f"Offline signing failed: {e}")
        return 1

    print(f"tx_blob: {signed.tx_blob}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
