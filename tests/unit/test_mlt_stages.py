from __future__ import annotations

import pytest

from morelike.core.items import DocumentItem
from morelike.core.mlt.models import create_uid
from morelike.core.mlt.stages import (
    compute_exclusion,
    distribute_responses,
    fetch_term_vectors,
    remove_unsupported_fields,
    resolve_analyzer,
    resolve_fields,
)
from morelike.core.termvectors import TermVectorsResponse
from morelike.errors import MoreLikeThisError, UnsupportedFieldError, ValidationError


def test_unsupported_fields_removed_silently(analysis) -> None:
    an = analysis.search_analyzer()
    assert remove_unsupported_fields(["quote", "avatar", "power_level", "name"], an, analysis) == ("quote", "name")
    assert remove_unsupported_fields(["quote", "avatar"], an, analysis, False) == ("quote",)


def test_unsupported_field_fails_when_asked(analysis) -> None:
    with pytest.raises(UnsupportedFieldError) as ei:
        remove_unsupported_fields(["quote", "avatar"], analysis.search_analyzer(), analysis, True)
    assert ei.value.field == "avatar"
    assert "[avatar]" in str(ei.value)


def test_exclusion_skips_artificial_documents() -> None:
    requests = [
        DocumentItem(index="heroes", type="hero", id="1"),
        DocumentItem(index="heroes", type="hero", doc={"quote": "x"}),
        DocumentItem(index="heroes", type="villain", id="2"),
    ]
    assert compute_exclusion(requests, create_uid) == (b"hero#1", b"villain#2")
    assert compute_exclusion(requests[1:2], create_uid) == ()


def test_exclusion_uses_given_encoder() -> None:
    enc = lambda t, i: f"{t}/{i}".encode()  # noqa: E731
    assert compute_exclusion([DocumentItem(type="hero", id="1")], enc) == (b"hero/1",)


def _resp(id_: str, found: bool = True) -> TermVectorsResponse:
    return TermVectorsResponse(index="heroes", type="hero", id=id_, found=found)


def test_distribute_is_positional_and_skips_missing() -> None:
    responses = [_resp("1"), _resp("2", found=False), _resp("3"), _resp("4")]
    like, ignore = distribute_responses(responses, 2)
    assert len(like) == 1
    assert len(ignore) == 2


class _ShortFetcher:
    def fetch(self, requests):
        return []


def test_fetch_rejects_misaligned_responses() -> None:
    with pytest.raises(MoreLikeThisError):
        fetch_term_vectors(_ShortFetcher(), [DocumentItem(id="1")], [])


def test_resolve_analyzer(analysis) -> None:
    assert resolve_analyzer(analysis, None).name == "standard"
    assert resolve_analyzer(analysis, "whitespace").name == "whitespace"
    with pytest.raises(ValidationError):
        resolve_analyzer(analysis, "klingon")


def test_resolve_fields() -> None:
    assert resolve_fields(None, "_all") == (("_all",), True)
    assert resolve_fields(["a", "b"], "_all") == (("a", "b"), False)
