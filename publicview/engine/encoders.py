# publicview/engine/encoders.py

"""Wire encoders that redact values and hand them to the marshaling library."""

import base64
import json
import logging
import re
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from collections import deque
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type
from uuid import UUID

from publicview.core.definitions import (
    TEMPORAL_TYPES,
    XML_HEADER,
    XML_ITEM_TAG,
    ContentType,
    WireFormat,
)
from publicview.core.domain import EncodeOptions, Record
from publicview.core.exceptions import ConfigurationError, MarshalError
from publicview.engine.descriptors import is_composite, to_record
from publicview.engine.redactor import Redactor, redact

logger = logging.getLogger(__name__)

# Element and attribute names accepted by the XML encoder
XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")

# Characters outside the XML Char production
XML_INVALID_CHARS = re.compile("[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def collect(values: Tuple[Any, ...]) -> Any:
    """Folds encode() arguments into one value: nothing, the value, or a list."""
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return list(values)


class Encoder(ABC):
    """Base class for wire encoders.

    Subclasses implement ``_marshal``; redaction and option handling live
    here so every format sees the same redacted tree.
    """

    content_type: str = ""

    def __init__(
        self,
        options: Optional[EncodeOptions] = None,
        redactor: Optional[Redactor] = None,
    ) -> None:
        self.options = options or EncodeOptions()
        self._redactor = redactor

    def redact(self, value: Any) -> Any:
        if self._redactor is None:
            return redact(value)
        return self._redactor.redact(value)

    def encode(self, *values: Any, options: Optional[EncodeOptions] = None) -> bytes:
        """Redacts and encodes the given values.

        No value encodes the empty result, one value encodes that value, and
        several values encode a list of them.

        Args:
            *values: Values to encode
            options: Per-call options, defaults to the encoder's own

        Returns:
            Encoded bytes

        Raises:
            MarshalError: If the redacted tree cannot be represented
        """
        opts = options or self.options

        try:
            tree = self.redact(collect(values))
            return self._marshal(tree, opts)
        except MarshalError:
            raise
        except (TypeError, ValueError, RecursionError) as e:
            raise MarshalError(f"{type(self).__name__} failed: {e}") from e

    @abstractmethod
    def _marshal(self, tree: Any, options: EncodeOptions) -> bytes:
        """Encodes an already redacted tree."""
        pass


def _json_default(value: Any) -> Any:
    if isinstance(value, TEMPORAL_TYPES):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (set, frozenset, deque)):
        return list(value)
    if is_composite(value):
        return to_record(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonEncoder(Encoder):
    """Encodes values as UTF-8 JSON."""

    content_type = ContentType.JSON

    def _marshal(self, tree: Any, options: EncodeOptions) -> bytes:
        # Callers expect an object shape, not null, for empty results
        if tree is None and not options.emit_null_for_empty:
            tree = {}

        if options.pretty_print:
            text = json.dumps(
                tree,
                default=_json_default,
                ensure_ascii=False,
                allow_nan=False,
                indent=options.indent,
                separators=(",", ": "),
            )
        else:
            text = json.dumps(
                tree,
                default=_json_default,
                ensure_ascii=False,
                allow_nan=False,
                separators=(",", ":"),
            )

        return text.encode("utf-8")


def _check_name(name: str) -> str:
    if not isinstance(name, str) or not XML_NAME.match(name):
        raise MarshalError(f"xml: invalid element or attribute name {name!r}")
    return name


def _normalize(value: Any) -> Any:
    """Brings override view results into the shapes the XML builder handles."""
    if is_composite(value):
        return to_record(value)
    if isinstance(value, (tuple, set, frozenset, deque)):
        return list(value)
    return value


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _text(value.value)
    if isinstance(value, TEMPORAL_TYPES):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, str):
        # Characters XML cannot carry become U+FFFD
        return XML_INVALID_CHARS.sub("\ufffd", value)
    if isinstance(value, (int, float, Decimal, UUID)):
        return str(value)
    raise MarshalError(f"xml: unsupported type: {type(value).__name__}")


class XmlEncoder(Encoder):
    """Encodes values as an XML document.

    A composite becomes an element named after its type, each field a child
    element named after its wire name. List fields repeat the element once
    per item. Top-level lists and plain mappings have no natural element name
    and need ``EncodeOptions.root_tag``.
    """

    content_type = ContentType.XML

    def _marshal(self, tree: Any, options: EncodeOptions) -> bytes:
        if tree is None:
            return XML_HEADER.encode("utf-8")

        root = self._root(_normalize(tree), options)
        if options.pretty_print:
            ET.indent(root, space=options.indent)

        body = ET.tostring(root, encoding="unicode")
        return (XML_HEADER + body).encode("utf-8")

    def _root(self, tree: Any, options: EncodeOptions) -> ET.Element:
        if isinstance(tree, Record):
            tag = options.root_tag or tree.tag
        elif isinstance(tree, (Mapping, list)):
            if not options.root_tag:
                raise MarshalError(
                    f"xml: top-level {type(tree).__name__} needs a root_tag to be encoded"
                )
            tag = options.root_tag
        else:
            tag = options.root_tag or type(tree).__name__

        root = ET.Element(_check_name(tag))

        if isinstance(tree, list):
            for item in tree:
                item = _normalize(item)
                item_tag = item.tag if isinstance(item, Record) else XML_ITEM_TAG
                self._append(root, item_tag, item)
        else:
            self._fill(root, tree)

        return root

    def _fill(self, element: ET.Element, value: Any) -> None:
        if not isinstance(value, Mapping):
            element.text = _text(value)
            return

        attrs = value.attrs if isinstance(value, Record) else frozenset()
        for key, item in value.items():
            name = str(key)
            if item is None:
                continue

            if name in attrs:
                item = _normalize(item)
                if isinstance(item, (Mapping, list)):
                    raise MarshalError(f"xml: attribute {name!r} must hold a scalar value")
                element.set(_check_name(name), _text(item))
                continue

            self._append(element, name, item)

    def _append(self, parent: ET.Element, tag: str, value: Any) -> None:
        value = _normalize(value)
        if value is None:
            return

        if isinstance(value, list):
            for item in value:
                self._append(parent, tag, item)
            return

        child = ET.SubElement(parent, _check_name(tag))
        self._fill(child, value)


_ENCODERS: Dict[str, Type[Encoder]] = {
    WireFormat.JSON: JsonEncoder,
    WireFormat.XML: XmlEncoder,
}


def get_encoder(
    fmt: str,
    options: Optional[EncodeOptions] = None,
    redactor: Optional[Redactor] = None,
) -> Encoder:
    """Factory method returning an encoder for a wire format.

    Args:
        fmt: Wire format name ('json' or 'xml')
        options: Default options for the encoder
        redactor: Redactor to use instead of the module-level default

    Returns:
        Encoder instance

    Raises:
        ConfigurationError: If the format is unknown
    """
    encoder_class = _ENCODERS.get(fmt.lower() if isinstance(fmt, str) else fmt)

    if encoder_class is None:
        logger.warning(f"No encoder found for wire format: {fmt}")
        raise ConfigurationError(
            f"Unknown wire format '{fmt}', expected one of {list(WireFormat.ALL)}"
        )

    return encoder_class(options=options, redactor=redactor)
