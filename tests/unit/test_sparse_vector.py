from __future__ import annotations

import numpy as np
import pytest

from morelike.errors import CodecError
from morelike.vectorize import EMPTY_SPARSE_VECTOR, SparseVector, encode_sparse_vector


def test_encode_layout() -> None:
    assert encode_sparse_vector(5, [(0, 1), (3, 7)]) == b"\x05\x02\x00\x01\x03\x07"


def test_decode_yields_pairs_in_order() -> None:
    sv = SparseVector(encode_sparse_vector(10, [(1, 4), (2, 9), (8, 1)]))
    assert sv.shape == 10
    assert sv.size == 3
    assert list(sv) == [(1, 4), (2, 9), (8, 1)]


def test_iteration_consumes_and_rewind_restarts() -> None:
    sv = SparseVector(encode_sparse_vector(4, [(0, 2), (3, 5)]))
    first = list(sv)
    assert list(sv) == []
    sv.rewind()
    assert list(sv) == first
    assert sv.entries() == first
    assert sv.entries() == first


def test_independent_readers_over_same_bytes() -> None:
    data = encode_sparse_vector(4, [(0, 2), (3, 5)])
    a, b = SparseVector(data), SparseVector(data)
    assert next(a) == (0, 2)
    assert list(b) == [(0, 2), (3, 5)]
    assert list(a) == [(3, 5)]


def test_not_requested_value_round_trips() -> None:
    sv = SparseVector(encode_sparse_vector(3, [(1, -1)]))
    assert sv.entries() == [(1, -1)]


def test_encode_rejects_unsorted_and_out_of_range() -> None:
    with pytest.raises(CodecError, match="sorted"):
        encode_sparse_vector(5, [(3, 1), (1, 1)])
    with pytest.raises(CodecError):
        encode_sparse_vector(5, [(5, 1)])


def test_truncated_buffer_raises() -> None:
    data = encode_sparse_vector(5, [(0, 1), (3, 7)])
    with pytest.raises(CodecError):
        list(SparseVector(data[:-1]))


def test_count_larger_than_pairs_raises() -> None:
    with pytest.raises(CodecError, match="column count mismatch"):
        list(SparseVector(b"\x05\x03\x00\x01\x03\x07"))


def test_trailing_bytes_raise() -> None:
    data = encode_sparse_vector(5, [(0, 1)]) + b"\x00"
    with pytest.raises(CodecError):
        list(SparseVector(data))


def test_column_outside_shape_raises_on_decode() -> None:
    with pytest.raises(CodecError):
        list(SparseVector(b"\x02\x01\x04\x01"))


def test_numeric_views() -> None:
    sv = SparseVector(encode_sparse_vector(5, [(0, 1), (3, 7)]))
    indices, values = sv.indices_and_values()
    assert indices.tolist() == [0, 3]
    assert values.tolist() == [1.0, 7.0]
    assert np.array_equal(sv.to_dense(), np.array([1.0, 0.0, 0.0, 7.0, 0.0]))

    m = sv.to_csr()
    assert m.shape == (1, 5)
    assert m.nnz == 2
    assert m.toarray().tolist() == [[1.0, 0.0, 0.0, 7.0, 0.0]]


def test_to_dict() -> None:
    sv = SparseVector(encode_sparse_vector(5, [(0, 1), (3, 7)]))
    assert sv.to_dict() == {"shape": 5, "vector": [{"0": 1}, {"3": 7}]}


def test_empty_vector() -> None:
    assert EMPTY_SPARSE_VECTOR.shape == 0
    assert EMPTY_SPARSE_VECTOR.entries() == []
    assert EMPTY_SPARSE_VECTOR.data == b"\x00\x00"
    assert EMPTY_SPARSE_VECTOR == SparseVector(b"\x00\x00")


def test_equality_ignores_cursor_position() -> None:
    data = encode_sparse_vector(4, [(0, 2), (3, 5)])
    a, b = SparseVector(data), SparseVector(data)
    next(a)
    assert a == b
    assert a != SparseVector(encode_sparse_vector(4, [(0, 2)]))
