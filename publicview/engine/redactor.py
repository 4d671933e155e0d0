# publicview/engine/redactor.py

"""Structural redaction of arbitrary value trees before encoding."""

import logging
from collections import deque
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set
from uuid import UUID

from publicview.core.definitions import TEMPORAL_TYPES
from publicview.core.domain import Record, TypeDescriptor
from publicview.core.exceptions import CyclicReferenceError
from publicview.core.loader import EMPTY_POLICY, FieldPolicy
from publicview.engine.descriptors import check_wire_names, describe, is_composite, is_empty
from publicview.engine.views import find_view

logger = logging.getLogger(__name__)

# Copied verbatim, never walked into
SCALAR_TYPES = (str, bytes, bytearray, bool, int, float, Decimal, UUID, Enum)
SEQUENCE_TYPES = (list, tuple, set, frozenset, deque)


class Redactor:
    """Produces serialization-safe copies of arbitrary values.

    Every node of the input is handled the same way: ``None`` stays ``None``,
    a value with an override view is replaced by that view, composites are
    copied field by field without their suppressed fields, and mappings and
    sequences are copied element-wise. The input is never modified.

    A redactor holds no mutable state besides a cache of policy-applied
    descriptors, so one instance can be shared across threads. That cache is
    separate from ``descriptors.clear_cache()``.
    """

    def __init__(self, policy: Optional[FieldPolicy] = None) -> None:
        """Initialize the redactor.

        Args:
            policy: Extra hidden fields for types without in-code markers
        """
        self.policy = policy or EMPTY_POLICY
        self._descriptors: Dict[type, TypeDescriptor] = {}

    def redact(self, value: Any) -> Any:
        """Returns a redacted copy of ``value``.

        Args:
            value: Any value, including None

        Returns:
            Tree of Records, dicts, lists and scalars, or an override view result

        Raises:
            CyclicReferenceError: If a container refers back to an ancestor
            MarshalError: If visible fields of a composite share a wire name
        """
        return self._redact(value, set())

    def _redact(self, value: Any, path: Set[int]) -> Any:
        if value is None:
            return None

        view = find_view(value)
        if view is not None:
            logger.debug("Override view applied", extra={"type_name": type(value).__name__})
            return view(value)

        if isinstance(value, SCALAR_TYPES) or isinstance(value, TEMPORAL_TYPES):
            return value

        if is_composite(value):
            with _Visit(path, value):
                return self._copy_record(value, path)

        if isinstance(value, Mapping):
            with _Visit(path, value):
                return self._copy_mapping(value, path)

        if isinstance(value, SEQUENCE_TYPES):
            with _Visit(path, value):
                return self._copy_sequence(value, path)

        return value

    def _descriptor(self, cls: type) -> TypeDescriptor:
        if not self.policy:
            return check_wire_names(describe(cls))

        # Policy-applied descriptors live here, not in the module cache
        descriptor = self._descriptors.get(cls)
        if descriptor is not None:
            return descriptor

        base = describe(cls)
        descriptor = check_wire_names(
            TypeDescriptor(
                tag=base.tag,
                fields=tuple(
                    f if not self.policy.hides(cls, f.attr) else replace(f, visible=False)
                    for f in base.fields
                ),
            )
        )

        self._descriptors[cls] = descriptor
        return descriptor

    def _copy_record(self, value: Any, path: Set[int]) -> Record:
        descriptor = self._descriptor(type(value))
        result = Record(
            descriptor.tag,
            (f.name for f in descriptor.visible_fields if f.xml_attr),
        )

        for f in descriptor.visible_fields:
            # Slots that were never set are skipped like unexported fields
            if not hasattr(value, f.attr):
                continue

            redacted = self._redact(getattr(value, f.attr), path)
            if f.omit_empty and is_empty(redacted):
                continue

            result[f.name] = redacted

        return result

    def _copy_mapping(self, value: Mapping, path: Set[int]) -> Dict[Any, Any]:
        if isinstance(value, Record):
            result: Dict[Any, Any] = Record(value.tag, value.attrs)
        else:
            result = {}

        for key, item in value.items():
            result[key] = self._redact(item, path)

        return result

    def _copy_sequence(self, value: Any, path: Set[int]) -> List[Any]:
        return [self._redact(item, path) for item in value]


class _Visit:
    """Marks a container as being on the current path while it is copied."""

    __slots__ = ("path", "key", "type_name")

    def __init__(self, path: Set[int], value: Any) -> None:
        self.path = path
        self.key = id(value)
        self.type_name = type(value).__name__

    def __enter__(self) -> None:
        if self.key in self.path:
            raise CyclicReferenceError(self.type_name)
        self.path.add(self.key)

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.path.discard(self.key)
        return False


_DEFAULT_REDACTOR = Redactor()


def redact(value: Any) -> Any:
    """Redacts ``value`` with a policy-free, module-level redactor."""
    return _DEFAULT_REDACTOR.redact(value)
