from __future__ import annotations

from typing import Sequence

from ....libs.interfaces.analysis import UidEncoder
from ...items import DocumentItem


def compute_exclusion(requests: Sequence[DocumentItem], uid_encoder: UidEncoder) -> tuple[bytes, ...]:
    # Artificial documents have no stable identity to exclude.
    return tuple(uid_encoder(r.type, r.id) for r in requests if r.doc is None)
