from __future__ import annotations

import pytest

from morelike.core.termvectors import TermVectorsResponse
from morelike.core.termvectors.models import (
    EMPTY_FIELDS,
    FieldStatistics,
    FieldTerms,
    TermEntry,
    TermStatistics,
    TermVectorFields,
    Token,
)
from morelike.vectorize.codec import EMPTY_SPARSE_VECTOR, encode_sparse_vector


def _response() -> TermVectorsResponse:
    quote = FieldTerms(
        field="quote",
        terms=(
            TermEntry(
                term="six",
                term_freq=1,
                statistics=TermStatistics(doc_freq=1, total_term_freq=1),
                tokens=(Token(position=6, start_offset=31, end_offset=34, payload=b"\x01"),),
            ),
        ),
        statistics=FieldStatistics(sum_doc_freq=28, doc_count=3, sum_total_term_freq=33),
        has_positions=True,
        has_offsets=True,
        has_payloads=True,
    )
    return TermVectorsResponse(
        index="heroes",
        type="hero",
        id="3",
        version=2,
        found=True,
        took_ms=4,
        fields=TermVectorFields({"quote": quote}),
        vector=encode_sparse_vector(12, [(6, 1)]),
    )


def test_to_dict() -> None:
    d = _response().to_dict()
    assert d["_id"] == "3"
    assert d["_version"] == 2
    assert d["took"] == 4
    quote = d["term_vectors"]["quote"]
    assert quote["field_statistics"] == {"sum_doc_freq": 28, "doc_count": 3, "sum_ttf": 33}
    assert quote["terms"]["six"] == {
        "doc_freq": 1,
        "ttf": 1,
        "term_freq": 1,
        "tokens": [{"position": 6, "start_offset": 31, "end_offset": 34, "payload": "AQ=="}],
    }
    assert d["vector"] == _response().get_vector().to_dict()


def test_binary_round_trip() -> None:
    resp = _response()
    assert TermVectorsResponse.from_bytes(resp.to_bytes()) == resp

    missing = TermVectorsResponse(index="heroes", type="hero", id="9")
    back = TermVectorsResponse.from_bytes(missing.to_bytes())
    assert back == missing
    assert back.fields is EMPTY_FIELDS


def test_vector_access() -> None:
    assert list(_response().get_vector()) == [(6, 1)]
    assert TermVectorsResponse(index="i", type="t", id="1").get_vector() is EMPTY_SPARSE_VECTOR


def test_fields_hidden_when_not_found() -> None:
    resp = _response()
    resp.found = False
    assert resp.get_fields() is EMPTY_FIELDS


def test_statistics_must_be_requested_together() -> None:
    with pytest.raises(AssertionError):
        TermStatistics(doc_freq=-1, total_term_freq=3)
    with pytest.raises(AssertionError):
        FieldStatistics(sum_doc_freq=0, doc_count=2, sum_total_term_freq=1)
    assert not FieldStatistics(-1, -1, -1).requested
