# publicview/__init__.py

"""Redacting JSON and XML encoders for API responses.

Domain objects can be returned from handlers as they are: fields marked with
``hidden()`` (or ``{"out": False}`` metadata) never reach the wire, and any
type may supply its own ``public_view()``.
"""

from publicview.core.domain import EncodedResponse, EncodeOptions, Record
from publicview.core.exceptions import (
    ConfigurationError,
    CyclicReferenceError,
    MarshalError,
    PublicViewError,
)
from publicview.engine.descriptors import exposed, hidden
from publicview.engine.encoders import Encoder, JsonEncoder, XmlEncoder, get_encoder
from publicview.engine.redactor import Redactor, redact
from publicview.engine.views import PublicView, register_view, unregister_view

__all__ = [
    "ConfigurationError",
    "CyclicReferenceError",
    "EncodeOptions",
    "EncodedResponse",
    "Encoder",
    "JsonEncoder",
    "MarshalError",
    "PublicView",
    "PublicViewError",
    "Record",
    "Redactor",
    "XmlEncoder",
    "exposed",
    "get_encoder",
    "hidden",
    "redact",
    "register_view",
    "unregister_view",
]
