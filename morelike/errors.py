from __future__ import annotations

from typing import Any


class MoreLikeThisError(ValueError):
    """Base class for errors raised while parsing or building a similarity query.

    Every error carries a short machine-readable `code` and a `data` mapping with
    the context needed to act on it (offending field, item id, ...).
    """

    code = "mlt_error"

    def __init__(self, message: str, *, data: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            d["data"] = self.data
        return d


class ValidationError(MoreLikeThisError):
    code = "validation"

    def __init__(self, errors: list[str] | str) -> None:
        errs = [errors] if isinstance(errors, str) else list(errors)
        msg = "; ".join(f"{i + 1}: {e}" for i, e in enumerate(errs))
        super().__init__(f"validation failed: {msg}", data={"errors": errs})
        self.errors = errs


class AmbiguousTypeError(MoreLikeThisError):
    code = "ambiguous_type"

    def __init__(self, item_id: str | None, index: str | None) -> None:
        super().__init__(
            f"ambiguous type for item with id: {item_id} and index: {index}",
            data={"id": item_id, "index": index},
        )
        self.item_id = item_id
        self.index = index


class UnsupportedFieldError(MoreLikeThisError):
    code = "unsupported_field"

    def __init__(self, field: str) -> None:
        super().__init__(f"more_like_this doesn't support binary/numeric fields: [{field}]", data={"field": field})
        self.field = field


class UnsupportedParameterError(MoreLikeThisError):
    code = "unsupported_parameter"

    def __init__(self, parameter: str, context: str = "mlt") -> None:
        super().__init__(f"[{context}] query does not support [{parameter}]", data={"parameter": parameter})
        self.parameter = parameter
        self.context = context


class ConfigError(MoreLikeThisError):
    code = "config"


class CodecError(MoreLikeThisError):
    code = "codec"
