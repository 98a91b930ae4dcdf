"""
JSON Mapper - Converts JSON payloads to and from domain records.

Mapping is tolerant: keys a record does not declare are reported to the
undefined-property handler (a debug log by default) and dropped, missing keys
leave the attribute as None, and scalar values are assigned without type
enforcement. Nested records, ``list[Record]`` and ``dict[str, Record]`` are
resolved from the dataclass type hints.

Serialization goes the other way and drops empty values, since Jira expects
absent optional fields to be omitted rather than sent as null.
"""

import dataclasses
import logging
import types
from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any, Optional, TypeVar, Union, get_args, get_origin, get_type_hints

from .exceptions import MappingError


T = TypeVar("T")

UndefinedPropertyHandler = Callable[[type, str, Any], None]


@dataclasses.dataclass(frozen=True)
class _FieldSpec:
    name: str
    json_key: str
    hint: Any


@dataclasses.dataclass(frozen=True)
class _RecordSpec:
    by_json_key: dict[str, _FieldSpec]
    extra_field: Optional[str]


@lru_cache(maxsize=None)
def _record_spec(cls: type) -> _RecordSpec:
    hints = get_type_hints(cls)
    by_json_key: dict[str, _FieldSpec] = {}
    extra_field = None

    for f in dataclasses.fields(cls):
        if f.metadata.get("extra"):
            extra_field = f.name
            continue
        json_key = f.metadata.get("json", f.name)
        by_json_key[json_key] = _FieldSpec(f.name, json_key, hints.get(f.name, Any))

    return _RecordSpec(by_json_key, extra_field)


def _is_record_type(hint: Any) -> bool:
    return isinstance(hint, type) and dataclasses.is_dataclass(hint)


def _unwrap_optional(hint: Any) -> Any:
    """Reduce ``X | None`` to ``X``; leave other unions as Any."""
    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        return args[0] if len(args) == 1 else Any
    return hint


def record_to_dict(value: Any) -> Any:
    """
    Convert records (recursively) into plain JSON-ready structures.

    Attribute names are translated back to their JSON keys and catch-all
    fields are merged at the top level. Nothing is filtered here.
    """
    if _is_record_type(type(value)):
        spec = _record_spec(type(value))
        result: dict[str, Any] = {}
        for field_spec in spec.by_json_key.values():
            result[field_spec.json_key] = record_to_dict(getattr(value, field_spec.name))
        if spec.extra_field:
            for key, extra in (getattr(value, spec.extra_field) or {}).items():
                result[key] = record_to_dict(extra)
        return result

    if isinstance(value, Mapping):
        return {key: record_to_dict(item) for key, item in value.items()}

    if isinstance(value, (list, tuple)):
        return [record_to_dict(item) for item in value]

    return value


def _record_entries(record: Any) -> dict[str, Any]:
    """One level of ``record_to_dict``: JSON keys to raw attribute values."""
    spec = _record_spec(type(record))
    entries = {f.json_key: getattr(record, f.name) for f in spec.by_json_key.values()}
    if spec.extra_field:
        entries.update(getattr(record, spec.extra_field) or {})
    return entries


_DROPPED = object()


def _filter_entry(item: Any, predicate: Callable[[Any], bool] | None) -> Any:
    keep = predicate or bool

    # A record is filtered first, so one left with no populated fields goes
    if _is_record_type(type(item)):
        item = filter_empty(item, predicate)
        return item if keep(item) else _DROPPED

    if not keep(item):
        return _DROPPED
    if isinstance(item, (Mapping, list, tuple)):
        return filter_empty(item, predicate)
    return item


def filter_empty(value: Any, predicate: Callable[[Any], bool] | None = None) -> Any:
    """
    Recursively drop empty entries from mappings and lists.

    By default every falsy entry goes (None, "", [], {}, False, 0). With a
    predicate, the entries it rejects go instead. Plain containers are
    filtered before recursing, so a nested mapping or list that only held
    empty values is kept as an empty container. Records are the exception:
    a nested record is filtered first and dropped when nothing is left.
    """
    if _is_record_type(type(value)):
        value = _record_entries(value)

    if isinstance(value, Mapping):
        filtered = {key: _filter_entry(item, predicate) for key, item in value.items()}
        return {key: item for key, item in filtered.items() if item is not _DROPPED}

    if isinstance(value, (list, tuple)):
        filtered_items = [_filter_entry(item, predicate) for item in value]
        return [item for item in filtered_items if item is not _DROPPED]

    return value


class JsonMapper:
    """
    Maps decoded JSON onto the domain records.

    Example:
        >>> mapper = JsonMapper()
        >>> issue_type = mapper.map({"id": "1", "name": "Bug"}, IssueType)
        >>> mapper.to_json(issue_type)
        {'id': '1', 'name': 'Bug'}
    """

    def __init__(
        self,
        logger: Any = None,
        undefined_property_handler: Optional[UndefinedPropertyHandler] = None,
    ):
        """
        Args:
            logger: Logger for mapping diagnostics.
            undefined_property_handler: Called with (record class, key, value)
                for every key the record does not declare. Defaults to a
                debug log.
        """
        self.logger = logger or logging.getLogger("JsonMapper")
        self.undefined_property_handler = (
            undefined_property_handler or self._log_undefined_property
        )

    def _log_undefined_property(self, cls: type, key: str, value: Any) -> None:
        self.logger.debug(f"Handle undefined property {key!r} on {cls.__name__}")

    def map(self, data: Any, cls: type[T]) -> T:
        """
        Populate a new ``cls`` record from a decoded JSON object.

        Raises:
            MappingError: If ``cls`` is not a record or ``data`` is not an object.
        """
        if not _is_record_type(cls):
            raise MappingError(f"{cls!r} is not a record type")
        if not isinstance(data, Mapping):
            raise MappingError(
                f"Cannot map {type(data).__name__} onto {cls.__name__}, expected a JSON object"
            )

        spec = _record_spec(cls)
        values: dict[str, Any] = {}
        extra: dict[str, Any] = {}

        for key, value in data.items():
            field_spec = spec.by_json_key.get(key)
            if field_spec is None:
                if spec.extra_field:
                    extra[key] = value
                else:
                    self.undefined_property_handler(cls, key, value)
                continue
            values[field_spec.name] = self._convert(value, field_spec.hint)

        if spec.extra_field:
            values[spec.extra_field] = extra

        return cls(**values)

    def map_list(self, items: Any, cls: type[T]) -> list[T]:
        """Map a decoded JSON array of objects."""
        if not isinstance(items, list):
            raise MappingError(
                f"Cannot map {type(items).__name__} onto list of {cls.__name__}, "
                "expected a JSON array"
            )
        return [self.map(item, cls) for item in items]

    def _convert(self, value: Any, hint: Any) -> Any:
        if value is None:
            return None

        hint = _unwrap_optional(hint)

        if _is_record_type(hint):
            return self.map(value, hint) if isinstance(value, Mapping) else value

        origin = get_origin(hint)
        args = get_args(hint)

        if origin is list and isinstance(value, list):
            item_hint = args[0] if args else Any
            return [self._convert(item, item_hint) for item in value]

        if origin is dict and isinstance(value, Mapping):
            value_hint = args[1] if len(args) == 2 else Any
            return {key: self._convert(item, value_hint) for key, item in value.items()}

        return value

    def to_json(
        self,
        record: Any,
        predicate: Callable[[Any], bool] | None = None,
    ) -> Any:
        """Serialize a record (or list of records) with empty fields removed."""
        return filter_empty(record, predicate)
