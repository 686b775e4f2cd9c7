#!/usr/bin/env python3
"""
Example: Send an issued token on testnet and verify the transfer.

Requirements:
- A funded testnet account (https://xrpl.org/xrp-testnet-faucet.html)
- A trust line from the recipient to the issuer for the currency

Environment:
    XRPL_SECRET: secret of the sending account
    XRPL_RECIPIENT: recipient address
    XRPL_ISSUER: issuer address
"""

import asyncio
import logging
import os
import sys

from xrpl_client import ErrorHandler, KeyPair, Xrpl, XrplError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

CURRENCY = "USD"
AMOUNT = "100.50"


async def main() -> int:
    try:
        secret = os.environ["XRPL_SECRET"]
        recipient = os.environ["XRPL_RECIPIENT"]
        issuer = os.environ["XRPL_ISSUER"]
    except KeyError as e:
        logger.error(f"Missing environment variable {e}")
        return 2

    async with Xrpl.testnet() as xrpl:
        try:
            sender = KeyPair.from_secret(secret).address
            logger.info(f"Sending {AMOUNT} {CURRENCY} from {sender} to {recipient}")

            result = await xrpl.send_token(secret, recipient, issuer, CURRENCY, AMOUNT)
            logger.info(f"Submitted {result.hash}: {result.engine_result}")

            # Give the network a few ledgers to validate the payment
            await asyncio.sleep(8)

            verification = await xrpl.inspect_token_transfer(sender, recipient, issuer, CURRENCY, AMOUNT,
                                                             result.hash)
            logger.info(f"Status: {verification.status.value}, verified: {verification.verified}")
            if verification.mismatched_fields:
                logger.warning(f"Mismatched fields: {', '.join(verification.mismatched_fields)}")
        except XrplError as e:
            hint = " (safe to retry)" if ErrorHandler.is_retryable(e) else ""
            logger.error(f"Transfer failed{hint}: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
