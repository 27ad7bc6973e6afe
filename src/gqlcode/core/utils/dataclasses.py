import dataclasses
import enum
import functools
import re
from typing import (
    Any,
    Dict,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

__all__ = [
    "to_snake_case",
    "to_camel_case",
    "from_dict",
    "as_dict",
    "CamelSnakeMixin",
]

_RE_SNAKE_CASE_1 = re.compile(r"[\-\.\s]")
_RE_SNAKE_CASE_2 = re.compile(r"[A-Z]")


@functools.lru_cache(maxsize=None)
def to_snake_case(s: str) -> str:
    s = _RE_SNAKE_CASE_1.sub("_", s)
    if not s:
        return s
    return s[0].lower() + _RE_SNAKE_CASE_2.sub(lambda matched: "_" + matched.group(0).lower(), s[1:])


_RE_CAMEL_CASE_1 = re.compile(r"^[\-_\.]")
_RE_CAMEL_CASE_2 = re.compile(r"[\-_\.\s]([a-z])")


@functools.lru_cache(maxsize=None)
def to_camel_case(s: str) -> str:
    s = _RE_CAMEL_CASE_1.sub("", s)
    if not s:
        return s
    return str(s[0]).lower() + _RE_CAMEL_CASE_2.sub(lambda matched: str(matched.group(1)).upper(), s[1:])


class CamelSnakeMixin:
    @classmethod
    def _encode_case(cls, s: str) -> str:
        return to_camel_case(s)

    @classmethod
    def _decode_case(cls, s: str) -> str:
        return to_snake_case(s)


_T = TypeVar("_T")


def _field_key(t: Type[Any], field: "dataclasses.Field[Any]") -> str:
    alias = field.metadata.get("alias", None)
    if alias:
        return str(alias)
    if hasattr(t, "_encode_case"):
        return str(t._encode_case(field.name))
    return field.name


def _convert_value(value: Any, t: Any) -> Any:
    if value is None:
        return None

    origin = get_origin(t)
    if origin is Union:
        args = [a for a in get_args(t) if a is not type(None)]
        for a in args:
            try:
                return _convert_value(value, a)
            except TypeError:
                continue
        raise TypeError(f"Value {value!r} does not match {t!r}.")

    if origin in (list, tuple, set, frozenset):
        (item_type, *_) = get_args(t) or (Any,)
        return origin(_convert_value(v, item_type) for v in value)

    if origin in (dict, Mapping):
        return dict(value)

    if t is Any:
        return value

    if isinstance(t, type) and issubclass(t, enum.Enum):
        return t(value)

    if isinstance(t, type) and dataclasses.is_dataclass(t):
        return from_dict(value, t)

    if t is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)

    if isinstance(t, type) and not isinstance(value, t):
        raise TypeError(f"Value {value!r} is not of type {t.__qualname__}.")

    return value


def from_dict(value: Optional[Mapping[str, Any]], t: Type[_T]) -> _T:
    """Creates the dataclass `t` from a mapping of settings.

    Keys are matched against the field alias, then the encoded field name
    (camelCase for `CamelSnakeMixin` classes), then the field name itself.
    Unknown keys are ignored, missing keys keep the field default.
    """
    if not dataclasses.is_dataclass(t):
        raise TypeError(f"{t!r} is not a dataclass.")

    value = value or {}
    hints = get_type_hints(t)
    kwargs: Dict[str, Any] = {}

    for field in dataclasses.fields(t):
        if not field.init:
            continue

        for key in (_field_key(t, field), field.name):
            if key in value:
                kwargs[field.name] = _convert_value(value[key], hints.get(field.name, Any))
                break

    return t(**kwargs)


def as_dict(value: Any, remove_defaults: bool = False) -> Dict[str, Any]:
    if not dataclasses.is_dataclass(value) or isinstance(value, type):
        raise TypeError(f"{value!r} is not a dataclass instance.")

    result: Dict[str, Any] = {}
    for field in dataclasses.fields(value):
        v = getattr(value, field.name)
        if remove_defaults:
            if field.default is not dataclasses.MISSING and v == field.default:
                continue
            if field.default_factory is not dataclasses.MISSING and v == field.default_factory():
                continue
        result[_field_key(type(value), field)] = v.value if isinstance(v, enum.Enum) else v
    return result
