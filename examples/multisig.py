#!/usr/bin/env python3
"""
Example: Multi-signed payment.

Three signers each produce a detached signature over the same payment. Any
two of them are assembled into a multi-signed blob; the signers are ordered
by public key regardless of the order the signatures were collected in.
Whether the signers are authorized for the account, and whether the quorum
is met, is decided by the ledger at submission time.
"""

import logging
import sys

from xrpl_client import KeyPair, Xrpl, XrplError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ACCOUNT_SECRET = "multisig-example-account-secret-000000"
SIGNER_SECRETS = {
    "alice": "multisig-example-alice-secret-0000000000",
    "bob": "multisig-example-bob-secret-00000000000000",
    "charlie": "multisig-example-charlie-secret-0000000000",
}
DESTINATION = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"
ISSUER = "rvYAfWj5gh67oV6fW32ZzP3Aw4Eubs59B"


def main() -> int:
    xrpl = Xrpl.testnet()

    try:
        transaction = xrpl.create_payment_transaction(
            ACCOUNT_SECRET, DESTINATION, ISSUER, "EUR", "1000.00",
            sequence=5,
            last_ledger_sequence=2000,
            fee="15",
        )
        logger.info(f"Built payment from {transaction.account}")

        signatures = {}
        for name, secret in SIGNER_SECRETS.items():
            signatures[name] = xrpl.sign_for_multisig(secret, transaction)
            logger.info(f"{name} signed with {KeyPair.from_secret(secret).public_key.to_hex()}")

        # 2-of-3: collected in reverse order on purpose
        signed = xrpl.create_multisig_transaction(transaction, [signatures["charlie"], signatures["alice"]])
        logger.info(f"Assembled multisig transaction {signed.hash}")

        for entry in signed.signatures:
            logger.info(f"  signer {entry.public_key}")

        if not xrpl.verify_signed_transaction(signed):
            logger.error("Multi-signed transaction failed verification")
            return 1
        logger.info("All signatures verified")
    except XrplError as e:
        logger.error(f"Multisig assembly failed: {e}")
        return 1

    print(f"tx_blob: {signed.tx_blob}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
