# publicview/core/domain.py

"""Domain models for descriptors, encoder options and encoded responses."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from publicview.core.definitions import DEFAULT_INDENT
from publicview.core.exceptions import MarshalError


@dataclass(frozen=True)
class FieldDescriptor:
    """Output metadata for a single field of a composite type.

    Attributes:
        attr: Python attribute name on the instance
        name: Key (JSON) or element name (XML) written to the wire
        visible: False when the field is suppressed from every output
        omit_empty: Drop the field when its redacted value is empty
        xml_attr: Render the field as an XML attribute instead of an element
    """

    attr: str
    name: str
    visible: bool = True
    omit_empty: bool = False
    xml_attr: bool = False


@dataclass(frozen=True)
class TypeDescriptor:
    """Cached field layout of a composite type, in declaration order."""

    tag: str
    fields: Tuple[FieldDescriptor, ...] = ()

    @property
    def visible_fields(self) -> Tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.visible)


class Record(dict):
    """Redacted copy of a composite value.

    Behaves exactly like a ``dict`` for JSON encoding. The type tag and the
    set of keys rendered as XML attributes travel with it for the XML encoder.
    """

    __slots__ = ("tag", "attrs")

    def __init__(self, tag: str, attrs: Iterable[str] = (), *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.tag = tag
        self.attrs: FrozenSet[str] = frozenset(attrs)

    def __repr__(self) -> str:
        return f"Record({self.tag!r}, {dict.__repr__(self)})"


@dataclass(frozen=True)
class EncodeOptions:
    """Per-call encoder options.

    Attributes:
        pretty_print: Indent the output
        emit_null_for_empty: Encode an empty JSON result as ``null`` instead of ``{}``
        root_tag: XML root element name; required for top-level sequences and mappings
        indent: Indentation unit used when pretty printing
    """

    pretty_print: bool = False
    emit_null_for_empty: bool = False
    root_tag: Optional[str] = None
    indent: str = DEFAULT_INDENT


@dataclass
class EncodedResponse:
    """Result object returned by the response service.

    Attributes:
        body: Encoded bytes, empty when encoding failed
        content_type: Content type matching the wire format
        error: The encoding failure, if any
        metadata: Additional processing information
    """

    body: bytes
    content_type: str
    error: Optional[MarshalError] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None
