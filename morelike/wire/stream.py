from __future__ import annotations

import struct

from ..errors import CodecError


# A vint holds a 32-bit int; negative values travel as their unsigned two's complement.
_INT32_MASK = 0xFFFFFFFF
_MAX_VINT_BYTES = 5
_MAX_VLONG_BYTES = 10


def _to_signed32(v: int) -> int:
    v &= _INT32_MASK
    return v - (1 << 32) if v & 0x80000000 else v


class StreamOutput:
    """Append-only binary writer used by every wire form in this package."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def write_byte(self, b: int) -> None:
        self._buf.append(b & 0xFF)

    def write_raw(self, data: bytes) -> None:
        self._buf.extend(data)

    def write_vint(self, v: int) -> None:
        if not -(1 << 31) <= v < (1 << 31):
            raise CodecError(f"vint out of range: {v}")
        u = v & _INT32_MASK
        while u & ~0x7F:
            self._buf.append((u & 0x7F) | 0x80)
            u >>= 7
        self._buf.append(u)

    def write_vlong(self, v: int) -> None:
        if v < 0:
            raise CodecError(f"negative vlong: {v}")
        while v & ~0x7F:
            self._buf.append((v & 0x7F) | 0x80)
            v >>= 7
        self._buf.append(v)

    def write_long(self, v: int) -> None:
        self._buf.extend(struct.pack(">q", v))

    def write_double(self, v: float) -> None:
        self._buf.extend(struct.pack(">d", v))

    def write_bool(self, v: bool) -> None:
        self._buf.append(1 if v else 0)

    def write_optional_bool(self, v: bool | None) -> None:
        self._buf.append(2 if v is None else (1 if v else 0))

    def write_bytes(self, data: bytes) -> None:
        self.write_vint(len(data))
        self._buf.extend(data)

    def write_string(self, s: str) -> None:
        self.write_bytes(s.encode("utf-8"))

    def write_optional_string(self, s: str | None) -> None:
        self.write_bool(s is not None)
        if s is not None:
            self.write_string(s)

    def write_optional_bytes(self, data: bytes | None) -> None:
        self.write_bool(data is not None)
        if data is not None:
            self.write_bytes(data)

    def write_string_array(self, values: list[str] | tuple[str, ...]) -> None:
        self.write_vint(len(values))
        for s in values:
            self.write_string(s)

    def write_optional_string_array(self, values: list[str] | tuple[str, ...] | None) -> None:
        self.write_bool(values is not None)
        if values is not None:
            self.write_string_array(values)


class StreamInput:
    """Cursor over an immutable byte buffer; `reset()` rewinds to the start."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def reset(self) -> None:
        self._pos = 0

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_byte(self) -> int:
        if self._pos >= len(self._data):
            raise CodecError(f"unexpected end of stream at offset {self._pos}")
        b = self._data[self._pos]
        self._pos += 1
        return b

    def read_raw(self, n: int) -> bytes:
        if n < 0 or self._pos + n > len(self._data):
            raise CodecError(f"truncated stream: wanted {n} bytes at offset {self._pos}")
        out = self._data[self._pos : self._pos + n]
        self._pos += n
        return out

    def read_vint(self) -> int:
        result = 0
        for i in range(_MAX_VINT_BYTES):
            try:
                b = self.read_byte()
            except CodecError as e:
                raise CodecError(f"truncated varint at offset {self._pos}") from e
            result |= (b & 0x7F) << (7 * i)
            if not b & 0x80:
                return _to_signed32(result)
        raise CodecError(f"varint too long at offset {self._pos}")

    def read_vlong(self) -> int:
        result = 0
        for i in range(_MAX_VLONG_BYTES):
            try:
                b = self.read_byte()
            except CodecError as e:
                raise CodecError(f"truncated varint at offset {self._pos}") from e
            result |= (b & 0x7F) << (7 * i)
            if not b & 0x80:
                return result
        raise CodecError(f"vlong too long at offset {self._pos}")

    def read_long(self) -> int:
        return struct.unpack(">q", self.read_raw(8))[0]

    def read_double(self) -> float:
        return struct.unpack(">d", self.read_raw(8))[0]

    def read_bool(self) -> bool:
        b = self.read_byte()
        if b not in (0, 1):
            raise CodecError(f"invalid boolean byte {b} at offset {self._pos - 1}")
        return b == 1

    def read_optional_bool(self) -> bool | None:
        b = self.read_byte()
        if b == 2:
            return None
        if b not in (0, 1):
            raise CodecError(f"invalid optional boolean byte {b} at offset {self._pos - 1}")
        return b == 1

    def read_bytes(self) -> bytes:
        n = self.read_vint()
        if n < 0:
            raise CodecError(f"negative length {n} at offset {self._pos}")
        return self.read_raw(n)

    def read_string(self) -> str:
        raw = self.read_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError(f"invalid utf-8 string: {e}") from e

    def read_optional_string(self) -> str | None:
        return self.read_string() if self.read_bool() else None

    def read_optional_bytes(self) -> bytes | None:
        return self.read_bytes() if self.read_bool() else None

    def read_string_array(self) -> list[str]:
        n = self.read_vint()
        if n < 0:
            raise CodecError(f"negative array size {n}")
        return [self.read_string() for _ in range(n)]

    def read_optional_string_array(self) -> list[str] | None:
        return self.read_string_array() if self.read_bool() else None
