# publicview/engine/descriptors.py

"""Per-type field descriptors for composite values.

Composites are dataclass instances and pydantic models. Their field layout is
read once per type and cached, so the redactor never re-inspects a class it
has already seen.
"""

import dataclasses
import logging
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

from publicview.core.definitions import FALSE_VALUES, TEMPORAL_TYPES, TagKey, XmlFlag
from publicview.core.domain import FieldDescriptor, Record, TypeDescriptor
from publicview.core.exceptions import MarshalError

logger = logging.getLogger(__name__)

_DESCRIPTOR_CACHE: Dict[type, TypeDescriptor] = {}


def hidden(**kwargs: Any) -> Any:
    """Declares a dataclass field that never appears in encoded output.

    Accepts the same keyword arguments as ``dataclasses.field``.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TagKey.OUT] = False
    return dataclasses.field(metadata=metadata, **kwargs)


def exposed(
    name: Optional[str] = None,
    omitempty: bool = False,
    attr: bool = False,
    **kwargs: Any,
) -> Any:
    """Declares a visible dataclass field with wire-level options.

    Args:
        name: Wire name, defaults to the attribute name
        omitempty: Drop the field when its value is empty
        attr: Render as an XML attribute
        **kwargs: Forwarded to ``dataclasses.field``
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if name:
        metadata[TagKey.NAME] = name
    if omitempty:
        metadata[TagKey.OMIT_EMPTY] = True
    if attr:
        metadata[TagKey.XML] = XmlFlag.ATTR
    return dataclasses.field(metadata=metadata, **kwargs)


def is_composite(value: Any) -> bool:
    """Checks whether ``value`` is an instance with a described field layout."""
    if isinstance(value, type):
        return False
    return isinstance(value, BaseModel) or dataclasses.is_dataclass(value)


def is_empty(value: Any) -> bool:
    """Checks a value against the omit-empty rule.

    ``None``, ``False``, zero and empty strings or containers are empty;
    temporal values never are.
    """
    if value is None:
        return True
    if isinstance(value, TEMPORAL_TYPES):
        return False
    if isinstance(value, (bool, int, float, Decimal)):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def _flag(options: Mapping[str, Any], key: str, default: bool) -> bool:
    if key not in options:
        return default
    value = options[key]
    if isinstance(value, str):
        value = value.strip()
    return value not in FALSE_VALUES


def _from_options(
    attr: str,
    options: Mapping[str, Any],
    excluded: bool = False,
    alias: Optional[str] = None,
) -> FieldDescriptor:
    return FieldDescriptor(
        attr=attr,
        name=options.get(TagKey.NAME) or alias or attr,
        visible=not excluded and _flag(options, TagKey.OUT, True),
        omit_empty=_flag(options, TagKey.OMIT_EMPTY, False),
        xml_attr=options.get(TagKey.XML) == XmlFlag.ATTR,
    )


def _describe_dataclass(cls: type) -> TypeDescriptor:
    fields = tuple(
        _from_options(f.name, f.metadata)
        for f in dataclasses.fields(cls)
        if not f.name.startswith("_")
    )
    return TypeDescriptor(tag=cls.__name__, fields=fields)


def _describe_model(cls: type) -> TypeDescriptor:
    fields = []
    for attr, info in cls.model_fields.items():
        if attr.startswith("_"):
            continue
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        fields.append(
            _from_options(
                attr,
                extra,
                excluded=info.exclude is True,
                alias=info.serialization_alias or info.alias,
            )
        )
    return TypeDescriptor(tag=cls.__name__, fields=tuple(fields))


def check_wire_names(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Rejects descriptors whose visible fields share a wire name.

    Raises:
        MarshalError: If two visible fields map to the same key or attribute
    """
    seen: Dict[str, str] = {}
    for f in descriptor.visible_fields:
        other = seen.get(f.name)
        if other is not None:
            raise MarshalError(
                f"{descriptor.tag}: fields {other!r} and {f.attr!r} share the wire name {f.name!r}"
            )
        seen[f.name] = f.attr
    return descriptor


def describe(cls: type) -> TypeDescriptor:
    """Returns the cached descriptor for a dataclass or pydantic model class.

    Args:
        cls: Composite class to describe

    Returns:
        TypeDescriptor with fields in declaration order

    Raises:
        TypeError: If ``cls`` is neither a dataclass nor a pydantic model
    """
    descriptor = _DESCRIPTOR_CACHE.get(cls)
    if descriptor is not None:
        return descriptor

    if isinstance(cls, type) and issubclass(cls, BaseModel):
        descriptor = _describe_model(cls)
    elif dataclasses.is_dataclass(cls):
        descriptor = _describe_dataclass(cls)
    else:
        raise TypeError(f"Cannot describe non-composite type {cls!r}")

    _DESCRIPTOR_CACHE[cls] = descriptor
    logger.debug(
        "Type descriptor built",
        extra={
            "type_name": descriptor.tag,
            "field_count": len(descriptor.fields),
            "hidden_count": len(descriptor.fields) - len(descriptor.visible_fields),
        },
    )
    return descriptor


def to_record(value: Any) -> Record:
    """Shallow field view of a composite, as the marshaling layer sees it.

    Used for composites returned by override views, which are encoded as
    returned: wire names, ``hidden()`` markers and omit-empty apply, but field
    values are not walked or redacted further.

    Raises:
        MarshalError: If two visible fields share a wire name
    """
    descriptor = check_wire_names(describe(type(value)))
    result = Record(
        descriptor.tag,
        (f.name for f in descriptor.visible_fields if f.xml_attr),
    )
    for f in descriptor.visible_fields:
        if not hasattr(value, f.attr):
            continue
        item = getattr(value, f.attr)
        if f.omit_empty and is_empty(item):
            continue
        result[f.name] = item
    return result


def clear_cache() -> None:
    """Drops every cached descriptor.

    Redactors built with a field policy keep their own policy-applied
    descriptors; build a new Redactor to pick up changed classes there.
    """
    _DESCRIPTOR_CACHE.clear()
