# publicview/core/definitions.py

"""Constants shared by the redaction engine and the wire encoders."""

from datetime import date, datetime, time

# Opaque temporal values: copied verbatim, encoded as ISO 8601
TEMPORAL_TYPES = (datetime, date, time)


class TagKey:
    """Field metadata keys recognized on dataclass fields and pydantic extras."""

    # "out": False (or "false") hides the field from every wire format
    OUT = "out"
    NAME = "name"
    OMIT_EMPTY = "omitempty"
    XML = "xml"


class XmlFlag:
    """Values accepted under the ``xml`` metadata key."""

    ATTR = "attr"


class WireFormat:
    """Supported output formats."""

    JSON = "json"
    XML = "xml"

    ALL = (JSON, XML)


class ContentType:
    """Response content types per wire format."""

    JSON = "application/json; charset=utf-8"
    XML = "application/xml; charset=utf-8"


XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Values that switch a boolean-ish metadata flag off
FALSE_VALUES = frozenset({False, 0, "false", "False", "FALSE", "0", "no", "off"})

DEFAULT_INDENT = "\t"
XML_ITEM_TAG = "item"
