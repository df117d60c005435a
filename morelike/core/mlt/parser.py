from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any, Callable, Mapping

from ...errors import UnsupportedParameterError, ValidationError
from ...observability.obs import api as obs
from ..items import DocumentItem, Item, TextItem, item_from_json
from .builder import NAME, MoreLikeThisQueryBuilder

# Names the query may be registered under in a query body.
QUERY_NAMES = (NAME, "more_like_this", "moreLikeThis")


class Shape(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


def classify(value: Any) -> Shape:
    if value is None:
        return Shape.NULL
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return Shape.BOOLEAN
    if isinstance(value, (int, float)):
        return Shape.NUMBER
    if isinstance(value, str):
        return Shape.STRING
    if isinstance(value, Mapping):
        return Shape.OBJECT
    if isinstance(value, (list, tuple)):
        return Shape.ARRAY
    raise ValidationError(f"unsupported JSON value of type {type(value).__name__}")


_SCALARS = frozenset({Shape.STRING, Shape.NUMBER, Shape.BOOLEAN})


class _State:
    def __init__(self) -> None:
        self.builder = MoreLikeThisQueryBuilder()
        self.like: list[Item] = []
        self.ignore: list[Item] = []


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_int(key: str, value: Any) -> int:
    shape = classify(value)
    if shape is Shape.NUMBER:
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError(f"[{key}] must be a finite number, got {value}")
        return int(value)
    if shape is Shape.STRING:
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"[{key}] must be an integer, got {shape.value}")


def _to_float(key: str, value: Any) -> float:
    shape = classify(value)
    number: float | None = None
    if shape is Shape.NUMBER:
        try:
            number = float(value)
        except OverflowError:
            number = math.inf
    elif shape is Shape.STRING:
        try:
            number = float(value.strip())
        except ValueError:
            pass
    if number is not None:
        if not math.isfinite(number):
            raise ValidationError(f"[{key}] must be a finite number, got {value}")
        return number
    raise ValidationError(f"[{key}] must be a number, got {shape.value}")


def _to_bool(key: str, value: Any) -> bool:
    shape = classify(value)
    if shape is Shape.BOOLEAN:
        return value
    if shape is Shape.STRING and value in ("true", "false"):
        return value == "true"
    raise ValidationError(f"[{key}] must be a boolean, got {shape.value}")


def _to_text(key: str, value: Any) -> str:
    shape = classify(value)
    if shape not in _SCALARS:
        raise ValidationError(f"[{key}] must be a string, got {shape.value}")
    return _scalar_text(value)


def _to_strings(key: str, value: Any) -> list[str]:
    shape = classify(value)
    if shape is not Shape.ARRAY:
        raise ValidationError(f"[{key}] must be an array, got {shape.value}")
    out = []
    for v in value:
        if classify(v) not in _SCALARS:
            raise ValidationError(f"[{key}] must only contain strings")
        out.append(_scalar_text(v))
    return out


def _like_entry(key: str, value: Any) -> Item:
    shape = classify(value)
    if shape in _SCALARS:
        return TextItem(_scalar_text(value))
    if shape is Shape.OBJECT:
        return item_from_json(value)
    raise ValidationError(f"content of [{key}] should either be a string or an object")


def _like_entries(key: str, value: Any) -> list[Item]:
    if classify(value) is Shape.ARRAY:
        return [_like_entry(key, v) for v in value]
    return [_like_entry(key, value)]


# --- per-key handlers ---

Handler = Callable[[_State, str, Any], None]


def _h_like(state: _State, key: str, value: Any) -> None:
    state.like.extend(_like_entries(key, value))


def _h_ignore_like(state: _State, key: str, value: Any) -> None:
    state.ignore.extend(_like_entries(key, value))


def _h_ids(state: _State, key: str, value: Any) -> None:
    if classify(value) is not Shape.ARRAY:
        raise ValidationError(f"[{key}] must be an array of ids")
    for v in value:
        if classify(v) not in _SCALARS:
            raise ValidationError("ids array element should only contain ids")
        state.like.append(DocumentItem(id=_scalar_text(v)))


def _h_docs(state: _State, key: str, value: Any) -> None:
    if classify(value) is not Shape.ARRAY:
        raise ValidationError(f"[{key}] must be an array of objects")
    for v in value:
        if classify(v) is not Shape.OBJECT:
            raise ValidationError("docs array element should include an object")
        state.like.append(item_from_json(v))


def _h_fields(state: _State, key: str, value: Any) -> None:
    state.builder.fields = tuple(_to_strings(key, value))


def _h_stop_words(state: _State, key: str, value: Any) -> None:
    state.builder.stop_words = tuple(_to_strings(key, value))


def _int_setter(attr: str) -> Handler:
    def handler(state: _State, key: str, value: Any) -> None:
        setattr(state.builder, attr, _to_int(key, value))

    return handler


def _h_boost_terms(state: _State, key: str, value: Any) -> None:
    factor = _to_float(key, value)
    if factor > 0:
        state.builder.boost_terms = factor


def _h_boost(state: _State, key: str, value: Any) -> None:
    state.builder.boost = _to_float(key, value)


def _text_setter(attr: str) -> Handler:
    def handler(state: _State, key: str, value: Any) -> None:
        setattr(state.builder, attr, _to_text(key, value))

    return handler


def _bool_setter(attr: str) -> Handler:
    def handler(state: _State, key: str, value: Any) -> None:
        setattr(state.builder, attr, _to_bool(key, value))

    return handler


_HANDLERS: dict[str, Handler] = {
    "fields": _h_fields,
    "like": _h_like,
    "like_text": _h_like,
    "ignore_like": _h_ignore_like,
    "ids": _h_ids,
    "docs": _h_docs,
    "min_term_freq": _int_setter("min_term_freq"),
    "max_query_terms": _int_setter("max_query_terms"),
    "min_doc_freq": _int_setter("min_doc_freq"),
    "max_doc_freq": _int_setter("max_doc_freq"),
    "min_word_length": _int_setter("min_word_length"),
    "min_word_len": _int_setter("min_word_length"),
    "max_word_length": _int_setter("max_word_length"),
    "max_word_len": _int_setter("max_word_length"),
    "boost_terms": _h_boost_terms,
    "minimum_should_match": _text_setter("minimum_should_match"),
    "stop_words": _h_stop_words,
    "analyzer": _text_setter("analyzer"),
    "boost": _h_boost,
    "fail_on_unsupported_field": _bool_setter("fail_on_unsupported_field"),
    "_name": _text_setter("query_name"),
    "include": _bool_setter("include"),
}

# deprecated key -> replacement
DEPRECATED_KEYS = {
    "like_text": "like",
    "ids": "like",
    "docs": "like",
    "min_word_len": "min_word_length",
    "max_word_len": "max_word_length",
}


def parse_more_like_this(body: Mapping[str, Any]) -> MoreLikeThisQueryBuilder:
    """Parse the object under the query name into a validated builder."""
    if classify(body) is not Shape.OBJECT:
        raise ValidationError(f"[{NAME}] query body must be an object")

    state = _State()
    for key, value in body.items():
        handler = _HANDLERS.get(key)
        if handler is None:
            raise UnsupportedParameterError(key)
        if key in DEPRECATED_KEYS:
            obs.event("parse.deprecated", {"key": key, "replacement": DEPRECATED_KEYS[key]})
        handler(state, key, value)

    b = state.builder
    if state.like:
        b.like_items = state.like
    if state.ignore:
        b.ignore_items = state.ignore
    b.ensure_valid()
    return b


def parse_query(body: Mapping[str, Any] | str) -> MoreLikeThisQueryBuilder:
    """Parse `{"mlt": {...}}` (or one of its aliases), given as a mapping or JSON text."""
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError as e:
            raise ValidationError(f"query body is not valid JSON: {e}") from e
    if classify(body) is not Shape.OBJECT or len(body) != 1:
        raise ValidationError("query body must be an object with exactly one query")

    (name, inner), = body.items()
    if name not in QUERY_NAMES:
        raise UnsupportedParameterError(name, context="query")
    return parse_more_like_this(inner)
