"""
Transaction builder registry.

Provides factory functions and registry for transaction builders.
"""

from typing import Any, Dict, Mapping, Type, Union

from ...enums import TransactionType
from ...runtime.errors import InvalidFieldError
from .base import BaseTxBuilder
from .payments import PaymentBuilder, TrustSetBuilder

# Builder registry - maps transaction types to builder classes
BUILDER_REGISTRY: Dict[TransactionType, Type[BaseTxBuilder]] = {
    TransactionType.PAYMENT: PaymentBuilder,
    TransactionType.TRUST_SET: TrustSetBuilder,
}


def get_builder_for(tx_type: Union[str, TransactionType]) -> BaseTxBuilder:
    """
    Get a fresh builder instance for a transaction type.

    Args:
        tx_type: Transaction type or its name ("Payment", "TrustSet")

    Returns:
        Builder instance

    Raises:
        InvalidFieldError: If the transaction type is not supported
    """
    try:
        tx_type = TransactionType.parse(tx_type)
    except ValueError as e:
        raise InvalidFieldError("transaction_type", str(e)) from e
    return BUILDER_REGISTRY[tx_type]()


def build_transaction(tx_type: Union[str, TransactionType], fields: Mapping[str, Any]):
    """
    Build a transaction from a field mapping.

    The result does not depend on the iteration order of ``fields``.

    Raises:
        InvalidFieldError: For an unsupported type or the first invalid field
    """
    builder = get_builder_for(tx_type)
    for name, value in fields.items():
        builder.with_field(name, value)
    return builder.build()


def list_transaction_types():
    """Get the transaction types that have builders."""
    return sorted(t.value for t in BUILDER_REGISTRY)


__all__ = [
    "BUILDER_REGISTRY",
    "build_transaction",
    "get_builder_for",
    "list_transaction_types",
]
