"""
Transaction builders.
"""

from .base import BaseTxBuilder
from .payments import PaymentBuilder, TrustSetBuilder
from .registry import BUILDER_REGISTRY, build_transaction, get_builder_for, list_transaction_types

__all__ = [
    "BaseTxBuilder",
    "PaymentBuilder",
    "TrustSetBuilder",
    "BUILDER_REGISTRY",
    "build_transaction",
    "get_builder_for",
    "list_transaction_types",
]
