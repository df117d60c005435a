from __future__ import annotations

from typing import Sequence

from ....errors import UnsupportedFieldError
from ....libs.interfaces.analysis import Analyzer, TokenStreamProbe


def remove_unsupported_fields(
    fields: Sequence[str],
    analyzer: Analyzer,
    probe: TokenStreamProbe,
    fail_on_unsupported_field: bool | None = None,
) -> tuple[str, ...]:
    """Drop fields that cannot produce character tokens (binary, numeric, ...).

    With `fail_on_unsupported_field` set, the first such field is an error instead.
    """
    kept: list[str] = []
    for name in fields:
        if probe.supports_character_token_stream(analyzer, name):
            kept.append(name)
        elif fail_on_unsupported_field:
            raise UnsupportedFieldError(name)
    return tuple(kept)
