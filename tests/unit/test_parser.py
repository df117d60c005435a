from __future__ import annotations

import json

import pytest

from morelike.core.items import DocumentItem, TextItem
from morelike.core.mlt import parse_more_like_this, parse_query
from morelike.core.mlt.parser import Shape, classify
from morelike.errors import UnsupportedParameterError, ValidationError
from morelike.observability.trace.context import TraceContext


def test_classify() -> None:
    assert classify(True) is Shape.BOOLEAN
    assert classify(1) is Shape.NUMBER
    assert classify(1.5) is Shape.NUMBER
    assert classify("x") is Shape.STRING
    assert classify({}) is Shape.OBJECT
    assert classify([]) is Shape.ARRAY
    assert classify(None) is Shape.NULL


def test_every_key() -> None:
    b = parse_more_like_this(
        {
            "fields": ["name", "quote"],
            "like": ["a", {"_id": "1"}],
            "ignore_like": {"_id": "2"},
            "min_term_freq": 1,
            "max_query_terms": "12",
            "min_doc_freq": 3,
            "max_doc_freq": 50,
            "min_word_length": 2,
            "max_word_length": 10,
            "boost_terms": 2,
            "minimum_should_match": 1,
            "stop_words": ["the"],
            "analyzer": "whitespace",
            "boost": "1.5",
            "fail_on_unsupported_field": "true",
            "_name": "q",
            "include": False,
        }
    )
    assert b.fields == ("name", "quote")
    assert b.like_items == [TextItem("a"), DocumentItem(id="1")]
    assert b.ignore_items == [DocumentItem(id="2")]
    assert (b.min_term_freq, b.max_query_terms, b.min_doc_freq, b.max_doc_freq) == (1, 12, 3, 50)
    assert (b.min_word_length, b.max_word_length) == (2, 10)
    assert b.boost_terms == 2.0
    assert b.minimum_should_match == "1"
    assert b.stop_words == ("the",)
    assert b.analyzer == "whitespace"
    assert b.boost == 1.5
    assert b.fail_on_unsupported_field is True
    assert b.query_name == "q"
    assert b.include is False


def test_scalar_like_is_text() -> None:
    assert parse_more_like_this({"like": 5}).like_items == [TextItem("5")]
    assert parse_more_like_this({"like": "x"}).like_items == [TextItem("x")]


def test_deprecated_keys_still_work_and_are_reported() -> None:
    ctx = TraceContext.new("t-deprecated")
    with TraceContext.activate(ctx):
        b = parse_more_like_this(
            {
                "like_text": "hello",
                "ids": ["1", 2],
                "docs": [{"doc": {"quote": "hi"}}],
                "min_word_len": 3,
                "max_word_len": 8,
            }
        )
        env = ctx.finish()

    assert b.like_items == [
        TextItem("hello"),
        DocumentItem(id="1"),
        DocumentItem(id="2"),
        DocumentItem(doc={"quote": "hi"}),
    ]
    assert (b.min_word_length, b.max_word_length) == (3, 8)
    reported = [e.attrs["key"] for e in env.events_of("parse.deprecated")]
    assert reported == ["like_text", "ids", "docs", "min_word_len", "max_word_len"]


@pytest.mark.parametrize("value", [0, -1, "0"])
def test_non_positive_boost_terms_ignored(value) -> None:
    assert parse_more_like_this({"like": "x", "boost_terms": value}).boost_terms == 0.0


def test_unknown_key() -> None:
    with pytest.raises(UnsupportedParameterError) as ei:
        parse_more_like_this({"like": "x", "foo": 1})
    assert str(ei.value) == "[mlt] query does not support [foo]"


@pytest.mark.parametrize(
    "body",
    [
        {"like": [["nested"]]},
        {"like": None},
        {"like": "x", "fields": "quote"},
        {"like": "x", "fields": [{"a": 1}]},
        {"like": "x", "min_term_freq": True},
        {"like": "x", "min_term_freq": "lots"},
        {"like": "x", "boost": [1]},
        {"like": "x", "include": "yes"},
        {"like": "x", "analyzer": {"name": "standard"}},
        {"ids": "1"},
        {"ids": [{"_id": "1"}]},
        {"docs": ["1"]},
        {"fields": ["quote"]},
        {"like": []},
    ],
)
def test_bad_bodies(body) -> None:
    with pytest.raises(ValidationError):
        parse_more_like_this(body)


@pytest.mark.parametrize(
    "body",
    [
        {"like": "x", "min_term_freq": float("nan")},
        {"like": "x", "max_query_terms": float("inf")},
        {"like": "x", "boost": float("inf")},
        {"like": "x", "boost_terms": float("nan")},
        {"like": "x", "boost": "Infinity"},
        {"like": "x", "boost": 10**400},
    ],
)
def test_non_finite_numbers_rejected(body) -> None:
    with pytest.raises(ValidationError, match="finite"):
        parse_more_like_this(body)


def test_non_finite_json_literal_rejected() -> None:
    with pytest.raises(ValidationError, match="finite"):
        parse_query('{"mlt": {"like": "x", "min_term_freq": NaN}}')


@pytest.mark.parametrize("name", ["mlt", "more_like_this", "moreLikeThis"])
def test_query_names(name) -> None:
    assert parse_query({name: {"like": "x"}}).like_items == [TextItem("x")]


def test_json_text_input() -> None:
    b = parse_query(json.dumps({"mlt": {"fields": ["quote"], "like": [{"_id": "1"}]}}))
    assert b.fields == ("quote",)
    assert b.like_items == [DocumentItem(id="1")]


def test_other_query_name_rejected() -> None:
    with pytest.raises(UnsupportedParameterError) as ei:
        parse_query({"match": {"like": "x"}})
    assert str(ei.value) == "[query] query does not support [match]"


@pytest.mark.parametrize("body", ["{not json", {"mlt": {}, "match": {}}, {}, ["mlt"]])
def test_malformed_query_envelope(body) -> None:
    with pytest.raises(ValidationError):
        parse_query(body)
