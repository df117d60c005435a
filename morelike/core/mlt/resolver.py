from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from ...errors import AmbiguousTypeError
from ..items import WILDCARD_FIELDS, DocumentItem, Item, TextItem
from .models import ResolvedRequest


def resolve_items(
    items: Iterable[Item],
    *,
    default_index: str,
    query_types: Sequence[str],
    fields: Sequence[str],
    use_default_field: bool,
) -> ResolvedRequest:
    """Split items into fetch requests (defaults filled in) and raw like-texts.

    Never calls the fetch service; items are not modified, resolved copies are returned.
    """
    requests: list[DocumentItem] = []
    texts: list[str] = []
    for item in items:
        if isinstance(item, TextItem):
            texts.append(item.text)
            continue
        requests.append(_resolve_document(item, default_index, query_types, fields, use_default_field))
    return ResolvedRequest(requests=tuple(requests), like_texts=tuple(texts))


def _resolve_document(
    item: DocumentItem,
    default_index: str,
    query_types: Sequence[str],
    fields: Sequence[str],
    use_default_field: bool,
) -> DocumentItem:
    item.check_identity()
    index = item.index if item.index is not None else default_index
    type_ = item.type
    if type_ is None:
        if len(query_types) != 1:
            raise AmbiguousTypeError(item.id, index)
        type_ = query_types[0]

    selected = item.selected_fields
    # Artificial documents never get an implicit field list.
    if selected is None and item.doc is None:
        selected = WILDCARD_FIELDS if use_default_field else tuple(fields)

    return replace(item, index=index, type=type_, selected_fields=selected)
