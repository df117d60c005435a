from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...errors import ValidationError
from ...wire.stream import StreamInput, StreamOutput
from ..items import DocumentItem, Item, TextItem, item_to_json, read_item, write_item
from .models import QueryContext
from .pipeline import BuildResult, SimilarityPipeline

NAME = "mlt"

# Integer tunables share -1 as "unset".
UNSET = -1

_TUNABLES = (
    "min_term_freq",
    "max_query_terms",
    "min_doc_freq",
    "max_doc_freq",
    "min_word_length",
    "max_word_length",
    "boost_terms",
    "minimum_should_match",
    "stop_words",
    "analyzer",
    "boost",
    "fail_on_unsupported_field",
    "include",
    "query_name",
)


def _as_item(value: Item | str) -> Item:
    if isinstance(value, (TextItem, DocumentItem)):
        return value
    if isinstance(value, str):
        return TextItem(value)
    raise TypeError(f"expected str or item, got {type(value).__name__}")


@dataclass
class MoreLikeThisQueryBuilder:
    """Definition of a more-like-this query.

    Holds what the caller asked for, nothing resolved. `to_query` runs the
    similarity pipeline against a `QueryContext`. Integer tunables use -1 and
    `boost_terms` uses 0 for "unset"; `None` means unset everywhere else.
    """

    fields: tuple[str, ...] | None = None
    like_items: list[Item] = field(default_factory=list)
    ignore_items: list[Item] = field(default_factory=list)
    include: bool | None = None
    minimum_should_match: str | None = None
    min_term_freq: int = UNSET
    max_query_terms: int = UNSET
    stop_words: tuple[str, ...] | None = None
    min_doc_freq: int = UNSET
    max_doc_freq: int = UNSET
    min_word_length: int = UNSET
    max_word_length: int = UNSET
    boost_terms: float = 0.0
    analyzer: str | None = None
    fail_on_unsupported_field: bool | None = None
    boost: float | None = None
    query_name: str | None = None

    def __post_init__(self) -> None:
        if self.fields is not None:
            self.fields = tuple(self.fields)
        if self.stop_words is not None:
            self.stop_words = tuple(self.stop_words)
        self.like_items = [_as_item(i) for i in self.like_items]
        self.ignore_items = [_as_item(i) for i in self.ignore_items]

    # --- fluent setters ---

    def with_fields(self, *names: str) -> "MoreLikeThisQueryBuilder":
        self.fields = tuple(names)
        return self

    def like(self, *items: Item | str) -> "MoreLikeThisQueryBuilder":
        self.like_items = [_as_item(i) for i in items]
        return self

    def ignore_like(self, *items: Item | str) -> "MoreLikeThisQueryBuilder":
        self.ignore_items = [_as_item(i) for i in items]
        return self

    def add_item(self, item: Item) -> "MoreLikeThisQueryBuilder":
        self.like_items.append(_as_item(item))
        return self

    def add_like_text(self, text: str) -> "MoreLikeThisQueryBuilder":
        self.like_items.append(TextItem(text))
        return self

    def like_text(self, text: str) -> "MoreLikeThisQueryBuilder":
        """Deprecated: use `like`."""
        return self.like(text)

    def ids(self, *ids: str) -> "MoreLikeThisQueryBuilder":
        """Deprecated: use `like` with document items."""
        return self.like(*(DocumentItem(id=i) for i in ids))

    def docs(self, *items: DocumentItem) -> "MoreLikeThisQueryBuilder":
        """Deprecated: use `like`."""
        return self.like(*items)

    def set(self, **tunables: Any) -> "MoreLikeThisQueryBuilder":
        for name, value in tunables.items():
            if name not in _TUNABLES:
                raise TypeError(f"unknown tunable: {name}")
            if name == "stop_words" and value is not None:
                value = tuple(value)
            setattr(self, name, value)
        return self

    # --- validation ---

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.like_items:
            errors.append("more_like_this requires 'like' to be specified")
        if self.fields is not None and len(self.fields) == 0:
            errors.append("more_like_this requires 'fields' to be non-empty")
        return errors

    def ensure_valid(self) -> None:
        errors = self.validate()
        if errors:
            raise ValidationError(errors)

    # --- building ---

    def to_query(self, context: QueryContext) -> BuildResult:
        return SimilarityPipeline().run(self, context)

    # --- JSON form ---

    def to_dict(self) -> dict[str, Any]:
        if not self.like_items:
            raise ValidationError("more_like_this requires 'like' to be provided")

        body: dict[str, Any] = {}
        if self.fields is not None:
            body["fields"] = list(self.fields)
        body["like"] = [item_to_json(i) for i in self.like_items]
        if self.ignore_items:
            body["ignore_like"] = [item_to_json(i) for i in self.ignore_items]
        if self.minimum_should_match is not None:
            body["minimum_should_match"] = self.minimum_should_match
        for key in ("min_term_freq", "max_query_terms"):
            if getattr(self, key) != UNSET:
                body[key] = getattr(self, key)
        if self.stop_words:
            body["stop_words"] = list(self.stop_words)
        for key in ("min_doc_freq", "max_doc_freq", "min_word_length", "max_word_length"):
            if getattr(self, key) != UNSET:
                body[key] = getattr(self, key)
        if self.boost_terms > 0:
            body["boost_terms"] = self.boost_terms
        if self.boost is not None:
            body["boost"] = self.boost
        if self.analyzer is not None:
            body["analyzer"] = self.analyzer
        if self.fail_on_unsupported_field is not None:
            body["fail_on_unsupported_field"] = self.fail_on_unsupported_field
        if self.query_name is not None:
            body["_name"] = self.query_name
        if self.include is not None:
            body["include"] = self.include
        return {NAME: body}

    # --- binary form ---

    def write_to(self, out: StreamOutput) -> None:
        out.write_optional_string_array(self.fields)
        out.write_vint(len(self.like_items))
        for item in self.like_items:
            write_item(out, item)
        out.write_vint(len(self.ignore_items))
        for item in self.ignore_items:
            write_item(out, item)
        out.write_optional_bool(self.include)
        out.write_optional_string(self.minimum_should_match)
        out.write_vint(self.min_term_freq)
        out.write_vint(self.max_query_terms)
        out.write_optional_string_array(self.stop_words)
        out.write_vint(self.min_doc_freq)
        out.write_vint(self.max_doc_freq)
        out.write_vint(self.min_word_length)
        out.write_vint(self.max_word_length)
        out.write_double(self.boost_terms)
        out.write_optional_string(self.analyzer)
        out.write_optional_bool(self.fail_on_unsupported_field)
        out.write_bool(self.boost is not None)
        if self.boost is not None:
            out.write_double(self.boost)
        out.write_optional_string(self.query_name)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "MoreLikeThisQueryBuilder":
        fields = inp.read_optional_string_array()
        like = [read_item(inp) for _ in range(inp.read_vint())]
        ignore = [read_item(inp) for _ in range(inp.read_vint())]
        b = cls(
            fields=tuple(fields) if fields is not None else None,
            like_items=like,
            ignore_items=ignore,
        )
        b.include = inp.read_optional_bool()
        b.minimum_should_match = inp.read_optional_string()
        b.min_term_freq = inp.read_vint()
        b.max_query_terms = inp.read_vint()
        stop_words = inp.read_optional_string_array()
        b.stop_words = tuple(stop_words) if stop_words is not None else None
        b.min_doc_freq = inp.read_vint()
        b.max_doc_freq = inp.read_vint()
        b.min_word_length = inp.read_vint()
        b.max_word_length = inp.read_vint()
        b.boost_terms = inp.read_double()
        b.analyzer = inp.read_optional_string()
        b.fail_on_unsupported_field = inp.read_optional_bool()
        b.boost = inp.read_double() if inp.read_bool() else None
        b.query_name = inp.read_optional_string()
        return b

    def to_bytes(self) -> bytes:
        out = StreamOutput()
        self.write_to(out)
        return out.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> "MoreLikeThisQueryBuilder":
        return cls.read_from(StreamInput(data))

