from __future__ import annotations

from typing import Sequence

from ....errors import MoreLikeThisError
from ....libs.interfaces.termvectors import TermVectorsFetcher
from ...items import DocumentItem
from ...termvectors.models import TermVectorFields
from ...termvectors.response import TermVectorsResponse


def fetch_term_vectors(
    fetcher: TermVectorsFetcher,
    like: Sequence[DocumentItem],
    ignore: Sequence[DocumentItem],
) -> list[TermVectorsResponse]:
    """One round trip for both batches: like requests first, then ignore requests."""
    batch = [*like, *ignore]
    responses = list(fetcher.fetch(batch))
    if len(responses) != len(batch):
        raise MoreLikeThisError(
            f"term vectors fetch returned {len(responses)} responses for {len(batch)} requests",
            data={"requests": len(batch), "responses": len(responses)},
        )
    return responses


def distribute_responses(
    responses: Sequence[TermVectorsResponse], n_like: int
) -> tuple[tuple[TermVectorFields, ...], tuple[TermVectorFields, ...]]:
    """Split aligned responses back into (like fields, ignore fields); missing docs contribute nothing."""
    like = tuple(r.get_fields() for r in responses[:n_like] if r.found)
    ignore = tuple(r.get_fields() for r in responses[n_like:] if r.found)
    return like, ignore
