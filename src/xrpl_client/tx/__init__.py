"""
Transaction fields and validation.

Builders live in :mod:`xrpl_client.tx.builders`.
"""

from .fields import Address, AmountValue, CurrencyCode, Hash256

__all__ = [
    "Address",
    "AmountValue",
    "CurrencyCode",
    "Hash256",
]
