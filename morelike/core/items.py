from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from ..errors import UnsupportedParameterError, ValidationError
from ..wire.stream import StreamInput, StreamOutput

# Version sentinel: match whatever version is stored.
MATCH_ANY = -3

WILDCARD_FIELDS = ("*",)


class VersionType(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    EXTERNAL_GTE = "external_gte"
    FORCE = "force"


def _canonical_doc(doc: Any) -> str:
    if isinstance(doc, str):
        try:
            doc = json.loads(doc)
        except json.JSONDecodeError as e:
            raise ValidationError(f"artificial document [doc] is not valid JSON: {e}") from e
    if not isinstance(doc, Mapping):
        raise ValidationError("artificial document [doc] must be an object")
    return json.dumps(doc, ensure_ascii=False, separators=(",", ":"))


@dataclass(frozen=True)
class TextItem:
    """Raw text to find similar documents for."""

    text: str


@dataclass(frozen=True)
class DocumentItem:
    """A stored document (by id) or an artificial one (by `doc`) plus term-vector options.

    `doc` is kept as compact JSON text so items stay hashable; `source` parses it.
    """

    index: str | None = None
    type: str | None = None
    id: str | None = None
    doc: str | None = None
    selected_fields: tuple[str, ...] | None = None
    routing: str | None = None
    version: int = MATCH_ANY
    version_type: VersionType = VersionType.INTERNAL
    positions: bool = False
    offsets: bool = False
    payloads: bool = False
    field_statistics: bool = False
    term_statistics: bool = False

    def __post_init__(self) -> None:
        if self.selected_fields is not None and not isinstance(self.selected_fields, tuple):
            object.__setattr__(self, "selected_fields", tuple(self.selected_fields))
        if self.doc is not None:
            object.__setattr__(self, "doc", _canonical_doc(self.doc))
        if not isinstance(self.version_type, VersionType):
            object.__setattr__(self, "version_type", _version_type(self.version_type))

    @property
    def artificial(self) -> bool:
        return self.doc is not None

    @property
    def source(self) -> dict[str, Any] | None:
        return json.loads(self.doc) if self.doc is not None else None

    def check_identity(self) -> None:
        if (self.id is None) == (self.doc is None):
            raise ValidationError(
                f"item must set exactly one of [_id] or [doc] (index: {self.index}, id: {self.id})"
            )


Item = Union[TextItem, DocumentItem]


def _version_type(v: Any) -> VersionType:
    try:
        return VersionType(str(v).lower())
    except ValueError as e:
        raise ValidationError(f"unknown version type [{v}]") from e


# --- JSON form ---

_STR_KEYS = {"_index": "index", "_type": "type", "_id": "id", "_routing": "routing"}
_FLAG_KEYS = ("positions", "offsets", "payloads", "field_statistics", "term_statistics")


def item_from_json(value: Any) -> Item:
    """A bare string is a text item; an object is a document item."""
    if isinstance(value, str):
        return TextItem(value)
    if not isinstance(value, Mapping):
        raise ValidationError("content of 'like' should either be a string or an object")

    kwargs: dict[str, Any] = {}
    for key, v in value.items():
        if key in _STR_KEYS:
            if v is not None and not isinstance(v, (str, int)):
                raise ValidationError(f"[{key}] must be a string")
            kwargs[_STR_KEYS[key]] = None if v is None else str(v)
        elif key == "doc":
            kwargs["doc"] = _canonical_doc(v)
        elif key == "fields":
            if isinstance(v, str):
                v = [v]
            if not isinstance(v, list) or not all(isinstance(f, str) for f in v):
                raise ValidationError("[fields] must be an array of strings")
            kwargs["selected_fields"] = tuple(v)
        elif key == "_version":
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValidationError("[_version] must be an integer")
            kwargs["version"] = v
        elif key == "_version_type":
            kwargs["version_type"] = _version_type(v)
        elif key in _FLAG_KEYS:
            if not isinstance(v, bool):
                raise ValidationError(f"[{key}] must be a boolean")
            kwargs[key] = v
        else:
            raise UnsupportedParameterError(key, context="item")
    return DocumentItem(**kwargs)


def item_to_json(item: Item) -> Any:
    """Inverse of `item_from_json`; only non-default keys are written."""
    if isinstance(item, TextItem):
        return item.text

    out: dict[str, Any] = {}
    if item.index is not None:
        out["_index"] = item.index
    if item.type is not None:
        out["_type"] = item.type
    if item.id is not None:
        out["_id"] = item.id
    if item.doc is not None:
        out["doc"] = item.source
    if item.selected_fields is not None:
        out["fields"] = list(item.selected_fields)
    if item.routing is not None:
        out["_routing"] = item.routing
    if item.version != MATCH_ANY:
        out["_version"] = item.version
    if item.version_type is not VersionType.INTERNAL:
        out["_version_type"] = item.version_type.value
    for flag in _FLAG_KEYS:
        if getattr(item, flag):
            out[flag] = True
    return out


# --- binary form ---


def write_item(out: StreamOutput, item: Item) -> None:
    out.write_bool(isinstance(item, TextItem))
    if isinstance(item, TextItem):
        out.write_string(item.text)
        return
    out.write_optional_string(item.index)
    out.write_optional_string(item.type)
    out.write_optional_string(item.id)
    out.write_optional_bytes(item.doc.encode("utf-8") if item.doc is not None else None)
    out.write_optional_string_array(item.selected_fields)
    out.write_optional_string(item.routing)
    out.write_long(item.version)
    out.write_string(item.version_type.value)
    for flag in _FLAG_KEYS:
        out.write_bool(getattr(item, flag))


def read_item(inp: StreamInput) -> Item:
    if inp.read_bool():
        return TextItem(inp.read_string())
    index = inp.read_optional_string()
    type_ = inp.read_optional_string()
    id_ = inp.read_optional_string()
    doc = inp.read_optional_bytes()
    selected = inp.read_optional_string_array()
    routing = inp.read_optional_string()
    version = inp.read_long()
    version_type = _version_type(inp.read_string())
    flags = {flag: inp.read_bool() for flag in _FLAG_KEYS}
    return DocumentItem(
        index=index,
        type=type_,
        id=id_,
        doc=doc.decode("utf-8") if doc is not None else None,
        selected_fields=tuple(selected) if selected is not None else None,
        routing=routing,
        version=version,
        version_type=version_type,
        **flags,
    )
