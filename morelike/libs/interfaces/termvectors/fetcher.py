from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ....core.items import DocumentItem
    from ....core.termvectors.response import TermVectorsResponse


class TermVectorsFetcher(Protocol):
    """Batched term-statistics fetch; responses are positionally aligned with `requests`."""

    def fetch(self, requests: list["DocumentItem"]) -> list["TermVectorsResponse"]:
        ...
