"""
Test bootstrap:
- Make tests/helpers.py importable from every test package
- Provide the shared signer and reference transactions as fixtures
"""
import pathlib
import sys

import pytest

TESTS_DIR = pathlib.Path(__file__).parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from helpers import mk_payment, mk_trust_set  # noqa: E402

from xrpl_client.signers import TransactionSigner  # noqa: E402


@pytest.fixture
def signer():
    """Stateless transaction signer."""
    return TransactionSigner()


@pytest.fixture
def payment():
    """Reference issued-currency payment (100.5 USD, sequence 1)."""
    return mk_payment()


@pytest.fixture
def native_payment():
    """Payment of 1 XRP (1,000,000 drops)."""
    return mk_payment(amount="1000000", currency_code=None, issuer=None)


@pytest.fixture
def trust_set():
    return mk_trust_set()
