"""
Minimal Binary Canonical Serialization (BCS) reader and writer.

Integers are fixed-width little-endian, sequence lengths and enum variant
tags are ULEB128, and fixed-size byte arrays carry no length prefix.
"""
import struct
from typing import Callable, List, TypeVar

from ...exceptions import MalformedIntent, NumericOverflow

T = TypeVar("T")


class BcsWriter:
    """Append-only BCS encoder."""

    def __init__(self):
        self._buf = bytearray()

    def uleb128(self, value: int) -> "BcsWriter":
        if value < 0 or value > 0xFFFFFFFF:
            raise NumericOverflow(f"ULEB128 value out of range: {value}")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buf.append(byte | 0x80)
            else:
                self._buf.append(byte)
                return self

    def variant(self, tag: int) -> "BcsWriter":
        return self.uleb128(tag)

    def boolean(self, value: bool) -> "BcsWriter":
        self._buf.append(1 if value else 0)
        return self

    def u8(self, value: int) -> "BcsWriter":
        return self._uint(value, 1, "u8")

    def u16(self, value: int) -> "BcsWriter":
        return self._uint(value, 2, "u16")

    def u32(self, value: int) -> "BcsWriter":
        return self._uint(value, 4, "u32")

    def u64(self, value: int) -> "BcsWriter":
        return self._uint(value, 8, "u64")

    def u128(self, value: int) -> "BcsWriter":
        return self._uint(value, 16, "u128")

    def u256(self, value: int) -> "BcsWriter":
        return self._uint(value, 32, "u256")

    def fixed_bytes(self, value: bytes) -> "BcsWriter":
        self._buf.extend(value)
        return self

    def byte_vec(self, value: bytes) -> "BcsWriter":
        self.uleb128(len(value))
        self._buf.extend(value)
        return self

    def string(self, value: str) -> "BcsWriter":
        return self.byte_vec(value.encode("utf-8"))

    def seq(self, items, write_item: Callable[["BcsWriter", T], None]) -> "BcsWriter":
        self.uleb128(len(items))
        for item in items:
            write_item(self, item)
        return self

    def _uint(self, value: int, width: int, name: str) -> "BcsWriter":
        if value < 0:
            raise MalformedIntent(f"{name} cannot be negative: {value}")
        if value >= 1 << (8 * width):
            raise NumericOverflow(f"{value} does not fit in {name}")
        self._buf.extend(value.to_bytes(width, "little"))
        return self

    def getvalue(self) -> bytes:
        return bytes(self._buf)


class BcsReader:
    """Sequential BCS decoder. Every read raises MalformedIntent on truncation."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _take(self, n: int) -> bytes:
        if n < 0 or self._pos + n > len(self._data):
            raise MalformedIntent(
                f"Unexpected end of BCS data at offset {self._pos} (wanted {n} bytes)", field="tx_data"
            )
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def uleb128(self) -> int:
        value = 0
        shift = 0
        while True:
            byte = self._take(1)[0]
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                if byte == 0 and shift:
                    raise MalformedIntent("ULEB128 value is not minimally encoded", field="tx_data")
                break
            shift += 7
            if shift > 28:
                raise MalformedIntent("ULEB128 value is too long", field="tx_data")
        if value > 0xFFFFFFFF:
            raise MalformedIntent("ULEB128 value out of range", field="tx_data")
        return value

    def variant(self) -> int:
        return self.uleb128()

    def boolean(self) -> bool:
        value = self._take(1)[0]
        if value > 1:
            raise MalformedIntent(f"Invalid BCS bool: {value}", field="tx_data")
        return value == 1

    def u8(self) -> int:
        return self._take(1)[0]

    def u16(self) -> int:
        return struct.unpack("<H", self._take(2))[0]

    def u32(self) -> int:
        return struct.unpack("<I", self._take(4))[0]

    def u64(self) -> int:
        return struct.unpack("<Q", self._take(8))[0]

    def u128(self) -> int:
        return int.from_bytes(self._take(16), "little")

    def u256(self) -> int:
        return int.from_bytes(self._take(32), "little")

    def fixed_bytes(self, n: int) -> bytes:
        return self._take(n)

    def byte_vec(self) -> bytes:
        return self._take(self.uleb128())

    def string(self) -> str:
        raw = self.byte_vec()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedIntent(f"Invalid UTF-8 string in BCS data: {e}", field="tx_data") from e

    def seq(self, read_item: Callable[["BcsReader"], T]) -> List[T]:
        return [read_item(self) for _ in range(self.uleb128())]

    def finish(self) -> None:
        """Assert that the whole input was consumed."""
        if self.remaining:
            raise MalformedIntent(f"{self.remaining} trailing bytes after BCS data", field="tx_data")
