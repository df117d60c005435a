from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Iterator

import numpy as np
from scipy.sparse import csr_matrix

from ..errors import CodecError
from ..wire.stream import StreamInput, StreamOutput

if TYPE_CHECKING:
    from numpy.typing import NDArray


Entry = tuple[int, int]


def encode_sparse_vector(shape: int, entries: Iterable[Entry]) -> bytes:
    """Encode `(column, value)` pairs as: vint shape, vint count, count x (vint column, vint value).

    Entries must already be sorted ascending by column; nothing is sorted or merged here.
    """
    pairs = list(entries)
    prev = -1
    for col, _ in pairs:
        if col < prev:
            raise CodecError(f"columns must be sorted ascending: {col} after {prev}")
        if not 0 <= col < shape:
            raise CodecError(f"column {col} outside shape {shape}")
        prev = col

    out = StreamOutput()
    out.write_vint(shape)
    out.write_vint(len(pairs))
    for col, val in pairs:
        out.write_vint(col)
        out.write_vint(val)
    return out.to_bytes()


class SparseVector:
    """Lazy, restartable reader over an encoded sparse vector.

    Iterating consumes the cursor; `rewind()` re-reads the header and starts over.
    Each instance owns its cursor, so independent readers over the same bytes need
    independent instances.
    """

    def __init__(self, data: bytes | None = None) -> None:
        self._data = bytes(data) if data is not None else None
        self._in = StreamInput(self._data) if self._data is not None else None
        self.shape = 0
        self.size = 0
        self._read = 0
        if self._in is not None:
            self.rewind()

    @property
    def data(self) -> bytes:
        return self._data if self._data is not None else encode_sparse_vector(0, [])

    def rewind(self) -> None:
        self._read = 0
        if self._in is None:
            return
        self._in.reset()
        self.shape = self._in.read_vint()
        self.size = self._in.read_vint()
        if self.shape < 0 or self.size < 0:
            raise CodecError(f"invalid sparse vector header: shape={self.shape} count={self.size}")

    def __iter__(self) -> Iterator[Entry]:
        return self

    def __next__(self) -> Entry:
        if self._in is None or self._read >= self.size:
            if self._in is not None and self._in.remaining():
                raise CodecError(f"column count mismatch: {self._in.remaining()} trailing bytes after {self.size} entries")
            raise StopIteration
        try:
            col = self._in.read_vint()
            val = self._in.read_vint()
        except CodecError as e:
            raise CodecError(f"column count mismatch: expected {self.size} entries, read {self._read}") from e
        if not 0 <= col < self.shape:
            raise CodecError(f"column {col} outside shape {self.shape}")
        self._read += 1
        return col, val

    def entries(self) -> list[Entry]:
        self.rewind()
        return list(self)

    def indices_and_values(self) -> tuple[NDArray[np.int64], NDArray[np.float64]]:
        pairs = self.entries()
        indices = np.fromiter((c for c, _ in pairs), dtype=np.int64, count=len(pairs))
        values = np.fromiter((v for _, v in pairs), dtype=np.float64, count=len(pairs))
        return indices, values

    def to_csr(self) -> csr_matrix:
        indices, values = self.indices_and_values()
        indptr = np.array([0, len(indices)], dtype=np.int64)
        return csr_matrix((values, indices, indptr), shape=(1, self.shape))

    def to_dense(self) -> NDArray[np.float64]:
        dense = np.zeros(self.shape, dtype=np.float64)
        indices, values = self.indices_and_values()
        dense[indices] = values
        return dense

    def to_dict(self) -> dict[str, Any]:
        return {"shape": self.shape, "vector": [{str(c): v} for c, v in self.entries()]}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return self.shape == other.shape and self.entries() == other.entries()

    def __repr__(self) -> str:
        return f"SparseVector(shape={self.shape}, size={self.size})"


EMPTY_SPARSE_VECTOR = SparseVector()


def read_vector(data: bytes) -> SparseVector:
    return SparseVector(data)
