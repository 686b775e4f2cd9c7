"""
Binary Reader for the canonical transaction format.

Mirror of :class:`BinaryWriter`. Every read that would run past the end of
the buffer raises :class:`UnmarshalError`.
"""

import builtins
import struct
from typing import Tuple

from ..runtime.errors import UnmarshalError
from .writer import VL_MAX


class BinaryReader:
    """
    Binary reader over an immutable buffer.
    """

    def __init__(self, buf: builtins.bytes):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
        """
        self._buf = buf
        self._off = 0

    @property
    def eof(self) -> bool:
        """True if at end of buffer."""
        return self._off >= len(self._buf)

    @property
    def offset(self) -> int:
        """Current read position."""
        return self._off

    def peek(self) -> int:
        """Return the next byte without consuming it."""
        if self.eof:
            raise UnmarshalError("Buffer overflow: attempting to peek beyond end")
        return self._buf[self._off]

    def bytes(self, n: int) -> builtins.bytes:
        """
        Read n bytes from buffer.

        Args:
            n: Number of bytes to read

        Returns:
            Bytes of specified length
        """
        if n < 0 or self._off + n > len(self._buf):
            raise UnmarshalError(f"Buffer overflow: attempting to read {n} bytes beyond end")
        out = self._buf[self._off : self._off + n]
        self._off += n
        return out

    def u8(self) -> int:
        """Read unsigned 8-bit integer."""
        return self.bytes(1)[0]

    def u16(self) -> int:
        """Read unsigned 16-bit big-endian integer."""
        return struct.unpack(">H", self.bytes(2))[0]

    def u32(self) -> int:
        """Read unsigned 32-bit big-endian integer."""
        return struct.unpack(">I", self.bytes(4))[0]

    def u64(self) -> int:
        """Read unsigned 64-bit big-endian integer."""
        return struct.unpack(">Q", self.bytes(8))[0]

    def vl_length(self) -> int:
        """
        Read a variable-length prefix.

        Lengths above ``VL_MAX`` are rejected, matching what
        :class:`BinaryWriter` can produce.
        """
        b1 = self.u8()
        if b1 <= 192:
            return b1
        if b1 <= 240:
            b2 = self.u8()
            return 193 + ((b1 - 193) << 8) + b2
        if b1 <= 254:
            b2 = self.u8()
            b3 = self.u8()
            length = 12481 + ((b1 - 241) << 16) + (b2 << 8) + b3
            if length > VL_MAX:
                raise UnmarshalError(f"Variable length {length} exceeds maximum {VL_MAX}")
            return length
        raise UnmarshalError(f"Invalid variable length prefix byte: {b1}")

    def vl_bytes(self) -> builtins.bytes:
        """Read bytes with a variable-length prefix."""
        return self.bytes(self.vl_length())

    def field_header(self) -> Tuple[int, int]:
        """
        Read a field header.

        Returns:
            (type_code, nth) pair

        Raises:
            UnmarshalError: If the header is not in its shortest form
        """
        b1 = self.u8()
        type_code = b1 >> 4
        nth = b1 & 0x0F

        if type_code == 0:
            type_code = self.u8()
            if type_code < 16:
                raise UnmarshalError(f"Non-canonical field header: type code {type_code} in extended form")
        if nth == 0:
            nth = self.u8()
            if nth < 16:
                raise UnmarshalError(f"Non-canonical field header: field code {nth} in extended form")

        return type_code, nth
