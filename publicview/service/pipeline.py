# publicview/service/pipeline.py

"""Response rendering service built on the redactor and wire encoders."""

import logging
import threading
from typing import Any, Dict, Optional

from publicview.service.config import settings
from publicview.core.domain import EncodedResponse, EncodeOptions
from publicview.core.exceptions import MarshalError
from publicview.core.loader import load_policy
from publicview.engine.encoders import Encoder, get_encoder
from publicview.engine.redactor import Redactor

logger = logging.getLogger(__name__)


class ResponseService:
    """Singleton holder for the process-wide redactor and encoders.

    The redactor is built once, with the field policy named in settings, and
    shared by every encoder the service hands out.
    """

    _redactor: Optional[Redactor] = None
    _encoders: Dict[str, Encoder] = {}
    _lock = threading.Lock()

    @classmethod
    def get_redactor(cls) -> Redactor:
        """Returns the singleton redactor.

        Raises:
            ConfigurationError: If the configured field policy cannot be loaded
        """
        if cls._redactor is None:
            with cls._lock:
                # Double-checked locking pattern
                if cls._redactor is None:
                    policy = load_policy(settings.policy_file)
                    cls._redactor = Redactor(policy=policy)
                    logger.info(
                        "Redactor initialized",
                        extra={"policy_types": len(policy.hidden_fields)},
                    )

        return cls._redactor

    @classmethod
    def get_encoder(cls, fmt: Optional[str] = None) -> Encoder:
        """Returns the cached encoder for ``fmt`` (default: settings.default_format).

        Raises:
            ConfigurationError: If the format is unknown
        """
        key = (fmt or settings.default_format).lower()
        encoder = cls._encoders.get(key)
        if encoder is None:
            encoder = get_encoder(key, options=default_options(), redactor=cls.get_redactor())
            cls._encoders[key] = encoder
        return encoder

    @classmethod
    def reset(cls) -> None:
        """Drops the redactor and encoders so the next call rebuilds them."""
        with cls._lock:
            cls._redactor = None
            cls._encoders = {}


def default_options() -> EncodeOptions:
    """Encoder options derived from the current settings."""
    return EncodeOptions(
        pretty_print=settings.pretty_print,
        emit_null_for_empty=settings.emit_null_for_empty,
        root_tag=settings.xml_root_tag,
    )


def render(
    *values: Any,
    fmt: Optional[str] = None,
    pretty_print: Optional[bool] = None,
    emit_null_for_empty: Optional[bool] = None,
    root_tag: Optional[str] = None,
) -> EncodedResponse:
    """Main entry point for encoding a response body.

    Args:
        *values: Values to encode (see Encoder.encode)
        fmt: Wire format, defaults to settings.default_format
        pretty_print: Overrides the configured pretty printing
        emit_null_for_empty: Overrides the configured empty-result handling
        root_tag: Overrides the configured XML root element

    Returns:
        EncodedResponse with the body, or with the error and an empty body.

    Raises:
        ConfigurationError: If the format or the field policy is invalid
    """
    encoder = ResponseService.get_encoder(fmt)

    base = encoder.options
    options = EncodeOptions(
        pretty_print=base.pretty_print if pretty_print is None else pretty_print,
        emit_null_for_empty=(
            base.emit_null_for_empty if emit_null_for_empty is None else emit_null_for_empty
        ),
        root_tag=root_tag or base.root_tag,
        indent=base.indent,
    )

    try:
        body = encoder.encode(*values, options=options)

    except MarshalError as e:
        # Log the technical error, the response only carries a generic message
        logger.error(
            f"Encoding failed: {type(e).__name__}",
            exc_info=True,
            extra={"encoder": type(encoder).__name__, "value_count": len(values)},
        )
        return EncodedResponse(
            body=b"",
            content_type=encoder.content_type,
            error=e,
            metadata={
                "error": "The response could not be encoded.",
                "status": "failed",
                "error_type": type(e).__name__,
            },
        )

    logger.debug(
        "Response encoded",
        extra={"encoder": type(encoder).__name__, "body_length": len(body)},
    )
    return EncodedResponse(
        body=body,
        content_type=encoder.content_type,
        metadata={"encoder": type(encoder).__name__, "length": len(body)},
    )


def must(response: EncodedResponse) -> bytes:
    """Returns the body of a successful response or raises its error.

    For frameworks that turn uncaught exceptions into server errors in one
    place. Nothing is raised unless this helper is called.

    Raises:
        MarshalError: The error carried by a failed response
    """
    if response.error is not None:
        raise response.error
    return response.body

