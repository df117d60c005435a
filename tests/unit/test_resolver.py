from __future__ import annotations

import pytest

from morelike.core.items import DocumentItem, TextItem
from morelike.core.mlt.resolver import resolve_items
from morelike.errors import AmbiguousTypeError, ValidationError


def _resolve(items, *, types=("hero",), fields=("quote",), use_default_field=False):
    return resolve_items(
        items, default_index="heroes", query_types=types, fields=fields, use_default_field=use_default_field
    )


def test_fills_index_type_and_fields() -> None:
    r = _resolve([DocumentItem(id="1")])
    (req,) = r.requests
    assert (req.index, req.type, req.id) == ("heroes", "hero", "1")
    assert req.selected_fields == ("quote",)
    assert r.like_texts == ()


def test_wildcard_fields_in_default_field_mode() -> None:
    (req,) = _resolve([DocumentItem(id="1")], use_default_field=True).requests
    assert req.selected_fields == ("*",)


def test_explicit_values_are_kept() -> None:
    item = DocumentItem(index="other", type="villain", id="9", selected_fields=("name",))
    (req,) = _resolve([item]).requests
    assert req == item


def test_artificial_documents_get_no_implicit_fields() -> None:
    (req,) = _resolve([DocumentItem(doc={"quote": "hi"})], use_default_field=True).requests
    assert req.selected_fields is None
    assert req.type == "hero"


def test_texts_go_to_like_texts_in_order() -> None:
    r = _resolve([TextItem("a"), DocumentItem(id="1"), TextItem("b")])
    assert r.like_texts == ("a", "b")
    assert [q.id for q in r.requests] == ["1"]


def test_input_items_are_not_modified() -> None:
    item = DocumentItem(id="1")
    _resolve([item])
    assert item.index is None and item.type is None and item.selected_fields is None


def test_two_candidate_types_is_ambiguous() -> None:
    with pytest.raises(AmbiguousTypeError) as ei:
        _resolve([DocumentItem(id="7")], types=("hero", "villain"))
    assert "id: 7" in str(ei.value)
    assert "index: heroes" in str(ei.value)


def test_no_candidate_type_is_ambiguous() -> None:
    with pytest.raises(AmbiguousTypeError):
        _resolve([DocumentItem(id="7")], types=())


def test_typed_item_needs_no_candidates() -> None:
    (req,) = _resolve([DocumentItem(type="hero", id="7")], types=("a", "b")).requests
    assert req.type == "hero"


def test_item_without_id_or_doc_rejected() -> None:
    with pytest.raises(ValidationError):
        _resolve([DocumentItem(index="heroes")])
