"""
Binary Writer for the canonical transaction format.

Big-endian fixed-width integers, raw bytes, variable-length prefixes and
field headers. Every method appends to an internal buffer; ``to_bytes``
returns the immutable result.
"""

import struct
from typing import List

from ..runtime.errors import MarshalError

# Variable-length prefix limits
VL_ONE_BYTE_MAX = 192
VL_TWO_BYTE_MAX = 12480
VL_MAX = 918744


class BinaryWriter:
    """
    Binary writer for canonical encoding.

    Writes are append-only; no method reorders previously written bytes.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def u8(self, v: int) -> None:
        """
        Write unsigned 8-bit integer.

        Raises:
            MarshalError: If the value does not fit
        """
        if v < 0 or v > 0xFF:
            raise MarshalError(f"Value out of range for uint8: {v}")
        self._bb.append(v)

    def u16(self, v: int) -> None:
        """Write unsigned 16-bit integer in big-endian format."""
        if v < 0 or v > 0xFFFF:
            raise MarshalError(f"Value out of range for uint16: {v}")
        self._bb.extend(struct.pack('>H', v))

    def u32(self, v: int) -> None:
        """Write unsigned 32-bit integer in big-endian format."""
        if v < 0 or v > 0xFFFFFFFF:
            raise MarshalError(f"Value out of range for uint32: {v}")
        self._bb.extend(struct.pack('>I', v))

    def u64(self, v: int) -> None:
        """Write unsigned 64-bit integer in big-endian format."""
        if v < 0 or v > 0xFFFFFFFFFFFFFFFF:
            raise MarshalError(f"Value out of range for uint64: {v}")
        self._bb.extend(struct.pack('>Q', v))

    def bytes(self, v: bytes) -> None:
        """
        Write raw bytes without length prefix.

        Args:
            v: Bytes to write directly
        """
        self._bb.extend(v)

    def vl_length(self, length: int) -> None:
        """
        Write a variable-length prefix.

        1 byte up to 192, 2 bytes up to 12480, 3 bytes up to 918744.

        Raises:
            MarshalError: If the length exceeds 918744
        """
        if length < 0:
            raise MarshalError(f"Negative length: {length}")
        if length <= VL_ONE_BYTE_MAX:
            self.u8(length)
        elif length <= VL_TWO_BYTE_MAX:
            length -= 193
            self.u8(193 + (length >> 8))
            self.u8(length & 0xFF)
        elif length <= VL_MAX:
            length -= 12481
            self.u8(241 + (length >> 16))
            self.u8((length >> 8) & 0xFF)
            self.u8(length & 0xFF)
        else:
            raise MarshalError(f"Variable length {length} exceeds maximum {VL_MAX}")

    def vl_bytes(self, v: bytes) -> None:
        """Write bytes with a variable-length prefix."""
        self.vl_length(len(v))
        self.bytes(v)

    def field_header(self, type_code: int, nth: int) -> None:
        """
        Write a field header.

        Type and field codes below 16 share one byte (type in the high
        nibble); larger codes spill into a following byte.
        """
        if not (1 <= type_code <= 0xFF and 1 <= nth <= 0xFF):
            raise MarshalError(f"Invalid field id ({type_code}, {nth})")
        if type_code < 16:
            if nth < 16:
                self.u8((type_code << 4) | nth)
            else:
                self.u8(type_code << 4)
                self.u8(nth)
        else:
            if nth < 16:
                self.u8(nth)
                self.u8(type_code)
            else:
                self.u8(0)
                self.u8(type_code)
                self.u8(nth)

    def __len__(self) -> int:
        return len(self._bb)

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            Bytes containing all written data
        """
        return bytes(self._bb)
