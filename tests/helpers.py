"""
Shared constants and factories for the test suite.

The sender key is derived from SENDER_SECRET; its public key and address
are fixed here so vectors can be checked byte for byte.
"""

from xrpl_client.enums import TransactionType
from xrpl_client.tx.builders import build_transaction

SENDER_SECRET = "test-secret-0123456789abcdefghijklmnop"
SENDER_PUBLIC_KEY = "252ADDF4E138A0F6DE388E8B33ED1E9DA1DF5422CAB8207C1AD55E96C3604471"
SENDER_ADDRESS = "rc3a1fc117850dc3a36d20d4ce4058425215ecc15"

SECOND_SECRET = "second-secret-abcdefghijklmnopqrstuvwxyz"
THIRD_SECRET = "third-secret-abcdefghijklmnopqrstuvwxyz01"

DESTINATION = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"
ISSUER = "rvYAfWj5gh67oV6fW32ZzP3Aw4Eubs59B"
OTHER_ACCOUNT = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"

TX_HASH = "B98130912866C378AFECCB8F8B598A0BBAEC1AF5A2D53FAC0E3C3434358B9C85"


def payment_fields(**overrides):
    """Fields of the reference issued-currency payment."""
    fields = {
        "account": SENDER_ADDRESS,
        "destination": DESTINATION,
        "amount": "100.50",
        "currency_code": "USD",
        "issuer": ISSUER,
        "fee": "12",
        "sequence": 1,
        "last_ledger_sequence": 100,
    }
    fields.update(overrides)
    return {k: v for k, v in fields.items() if v is not None}


def trust_set_fields(**overrides):
    fields = {
        "account": SENDER_ADDRESS,
        "currency_code": "USD",
        "issuer": ISSUER,
        "limit": "1000000",
        "fee": "12",
        "sequence": 2,
    }
    fields.update(overrides)
    return {k: v for k, v in fields.items() if v is not None}


def mk_payment(**overrides):
    return build_transaction(TransactionType.PAYMENT, payment_fields(**overrides))


def mk_trust_set(**overrides):
    return build_transaction(TransactionType.TRUST_SET, trust_set_fields(**overrides))
