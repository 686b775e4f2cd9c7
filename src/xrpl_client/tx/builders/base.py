"""
Base transaction builder.

Builders collect loosely typed caller input with :meth:`with_field`, then
:meth:`build` validates every field in a fixed declared order and returns an
immutable transaction model. The first failing field short-circuits, so the
error never depends on the order the caller supplied the fields in.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, Generic, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ...enums import TransactionType
from ...runtime.errors import ErrorCode, InvalidFieldError
from ...transactions import UINT32_MAX
from ..validation import validate_address, validate_amount, validate_currency_code, validate_transaction_hash

TxT = TypeVar('TxT', bound=BaseModel)

# Largest native amount, in drops
MAX_NATIVE_DROPS = 10 ** 17

Validator = Callable[[Any, str], Any]


def _uint32(value: Any, field: str, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldError(field, f"{field} must be an integer, got {type(value).__name__}")
    if value < minimum or value > UINT32_MAX:
        raise InvalidFieldError(field, f"{field} must be between {minimum} and {UINT32_MAX}, got {value}")
    return value


def uint32(value: Any, field: str) -> int:
    return _uint32(value, field)


def sequence_number(value: Any, field: str) -> int:
    return _uint32(value, field, minimum=1)


def address(value: Any, field: str):
    return validate_address(value, field=field)


def currency_code(value: Any, field: str):
    return validate_currency_code(value, field=field)


def transaction_hash(value: Any, field: str):
    return validate_transaction_hash(value, field=field)


def amount(value: Any, field: str):
    """Decimal amount; non-negative integers are accepted and stringified."""
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise InvalidFieldError(field, "Amount cannot be negative", ErrorCode.INVALID_AMOUNT)
        value = str(value)
    return validate_amount(value, field=field)


def drops(value: Any, field: str):
    """Native amount: a whole number of drops."""
    validated = amount(value, field)
    if not validated.is_integral:
        raise InvalidFieldError(field, f"{field} must be a whole number of drops, got {validated}",
                                ErrorCode.INVALID_AMOUNT)
    if int(validated) > MAX_NATIVE_DROPS:
        raise InvalidFieldError(field, f"{field} exceeds the maximum of {MAX_NATIVE_DROPS} drops",
                                ErrorCode.INVALID_AMOUNT)
    return validated


class BaseTxBuilder(Generic[TxT], ABC):
    """
    Base class for all transaction builders.

    Subclasses declare ``FIELDS``: ``(name, validator, required)`` triples in
    validation order.
    """

    FIELDS: ClassVar[Tuple[Tuple[str, Validator, bool], ...]] = ()

    def __init__(self):
        """Initialize the builder."""
        self._fields: Dict[str, Any] = {}

    @property
    @abstractmethod
    def tx_type(self) -> TransactionType:
        """Get the transaction type."""
        pass

    @property
    @abstractmethod
    def model_cls(self) -> Type[TxT]:
        """Get the transaction model class."""
        pass

    def with_field(self, name: str, value: Any) -> BaseTxBuilder[TxT]:
        """
        Set a field value (chainable).

        Args:
            name: Field name
            value: Field value

        Returns:
            Self for chaining
        """
        self._fields[name] = value
        return self

    def get_field(self, name: str, default: Any = None) -> Any:
        """
        Get a field value.

        Args:
            name: Field name
            default: Default value if not set

        Returns:
            Field value
        """
        return self._fields.get(name, default)

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(name for name, _, _ in cls.FIELDS)

    def validate(self) -> Dict[str, Any]:
        """
        Validate every field in declared order.

        Returns:
            Validated values keyed by input name (absent optionals omitted)

        Raises:
            InvalidFieldError: For the first unknown, missing or invalid field
        """
        known = set(self.field_names())
        unknown = sorted(name for name in self._fields if name not in known)
        if unknown:
            raise InvalidFieldError(unknown[0], f"Unknown field for {self.tx_type.value}: {unknown[0]}")

        values: Dict[str, Any] = {}
        for name, validator, required in self.FIELDS:
            value = self._fields.get(name)
            if value is None:
                if required:
                    raise InvalidFieldError(name, f"Missing required field: {name}")
                continue
            values[name] = validator(value, name)

        self._check(values)
        return values

    def _check(self, values: Dict[str, Any]) -> None:
        """Cross-field checks, run after every field validated on its own."""
        pass

    @abstractmethod
    def _model_fields(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Map validated input values to model constructor arguments."""
        pass

    def build(self) -> TxT:
        """
        Build the immutable transaction.

        Raises:
            InvalidFieldError: If any field is invalid
        """
        values = self.validate()
        kwargs = {k: v for k, v in self._model_fields(values).items() if v is not None}
        try:
            return self.model_cls(transaction_type=self.tx_type, **kwargs)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else "transaction"
            raise InvalidFieldError(field, error["msg"], cause=e) from e


__all__ = [
    "BaseTxBuilder",
    "MAX_NATIVE_DROPS",
    "address",
    "amount",
    "currency_code",
    "drops",
    "sequence_number",
    "transaction_hash",
    "uint32",
]
