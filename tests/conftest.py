from __future__ import annotations

from pathlib import Path

import pytest

from morelike.core.mlt.models import QueryContext
from morelike.core.termvectors.models import FieldTerms, TermEntry, TermVectorFields
from morelike.core.termvectors.response import TermVectorsResponse
from morelike.libs.providers.analysis import MappingAnalysisService
from morelike.libs.providers.termvectors import InMemoryTermVectorsService


HEROES = {
    "1": {
        "name": "spiderman",
        "quote": "That’s what I love about this city. Every time I need to hit someone really, "
        "really hard, some jerk steps up and volunteers.",
    },
    "2": {"name": "thor", "quote": "I have taken thy measure, villain, and found it lacking."},
    "3": {"name": "wolverine", "quote": "Only two knives, Elektra? I got six."},
}

MAPPINGS = {"name": "text", "quote": "text", "power_level": "long", "avatar": "binary"}


@pytest.fixture
def tmp_workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Provide an isolated working directory for tests that write to disk using
    relative paths.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def mock_clock(monkeypatch: pytest.MonkeyPatch) -> float:
    """Freeze time.time() to a deterministic value."""
    import time

    fixed = 1_700_000_000.0
    monkeypatch.setattr(time, "time", lambda: fixed)
    return fixed


@pytest.fixture
def analysis() -> MappingAnalysisService:
    return MappingAnalysisService(mappings=dict(MAPPINGS))


@pytest.fixture
def heroes(analysis: MappingAnalysisService) -> InMemoryTermVectorsService:
    """Term-vectors service holding the three hero documents in index `heroes`, type `hero`."""
    svc = InMemoryTermVectorsService(analysis)
    for id_, source in HEROES.items():
        svc.index("heroes", "hero", id_, source)
    return svc


class RecordingFetcher:
    """Returns one canned response per request and records every batch it was given."""

    def __init__(self, found: bool = True) -> None:
        self.found = found
        self.batches: list[list] = []

    def fetch(self, requests: list) -> list[TermVectorsResponse]:
        self.batches.append(list(requests))
        out = []
        for r in requests:
            fields = TermVectorFields(
                {"quote": FieldTerms(field="quote", terms=(TermEntry(term=f"t{r.id}", term_freq=1),))}
            )
            out.append(
                TermVectorsResponse(index=r.index, type=r.type, id=r.id, found=self.found, fields=fields)
            )
        return out


@pytest.fixture
def fetcher() -> RecordingFetcher:
    return RecordingFetcher()


@pytest.fixture
def make_context(analysis: MappingAnalysisService, fetcher: RecordingFetcher):
    def _make(**overrides) -> QueryContext:
        kwargs = dict(
            index_name="heroes",
            query_types=("hero",),
            analysis=analysis,
            probe=analysis,
            fetcher=fetcher,
        )
        kwargs.update(overrides)
        return QueryContext(**kwargs)

    return _make
