"""
Publish a tree of pages to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from typing import Any, TypeVar, get_args, get_origin

from cattrs.preconf.orjson import make_converter  # spellchecker:disable-line

from .environment import SerializationError

JsonType = None | bool | int | float | str | dict[str, "JsonType"] | list["JsonType"]

T = TypeVar("T")


# fields equal to their default (e.g. an empty list) are left out of the generated JSON
_converter = make_converter(forbid_extra_keys=False, omit_if_default=True)


def _structure_str(value: Any, cls: type[str]) -> str:
    "Accepts a JSON string only, rather than converting any value with `str()`."

    if not isinstance(value, str):
        raise TypeError(f"expected: string; got: {type(value).__name__}")
    return value


def _structure_list(value: Any, cls: type[list[Any]]) -> list[Any]:
    "Accepts a JSON array only, rejecting strings and objects that would otherwise be iterated."

    if not isinstance(value, list):
        raise TypeError(f"expected: array; got: {type(value).__name__}")
    (item_type,) = get_args(cls) or (Any,)
    return [_converter.structure(item, item_type) for item in value]


_converter.register_structure_hook(str, _structure_str)
_converter.register_structure_hook_func(lambda cls: get_origin(cls) is list, _structure_list)


def json_to_object(typ: type[T], data: JsonType) -> T:
    """
    Converts a raw JSON object to a structured object, validating input data.

    :param typ: Target structured type.
    :param data: Source data as a JSON object.
    :returns: A valid object instance of the expected type.
    """

    return _converter.structure(data, typ)


def json_payload_to_object(typ: type[T], payload: bytes | str) -> T:
    """
    Parses a JSON string and converts the result to a structured object, validating input data.

    :param typ: Target structured type.
    :param payload: JSON string, either as text or encoded in UTF-8.
    :returns: A valid object instance of the expected type.
    """

    return _converter.loads(payload, typ)


def object_to_json(data: object) -> JsonType:
    "Converts a structured object to a raw JSON object, leaving out fields that hold their default value."

    return _converter.unstructure(data)


def object_to_json_payload(data: object) -> bytes:
    """
    Converts a structured object to a JSON string encoded in UTF-8.

    :param data: Object to convert to a JSON string.
    :returns: JSON string encoded in UTF-8.
    :raises SerializationError: Raised when the object has no JSON representation.
    """

    try:
        return _converter.dumps(data)
    except (TypeError, ValueError) as ex:
        raise SerializationError(f"unable to convert {type(data).__name__} to JSON: {ex}") from ex
