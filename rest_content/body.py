from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .content import ByteArrayContent
from .encoding import DEFAULT_ENCODING, codec_name, resolve_charset
from .exceptions import InvalidOperationError
from .parameters import Binary, Text

if TYPE_CHECKING:  # pragma: no cover
    from typing import Any, Protocol

    from .parameters import Parameter

    class Serializer(Protocol):
        """Turns a body object into bytes of a fixed content type."""

        content_type: str

        def serialize(self, obj: Any) -> bytes: ...


OCTET_STREAM = "application/octet-stream"

logger = logging.getLogger(__name__)


def build_body_content(
    serializer: Serializer | None,
    parameter: Parameter | None,
    default_encoding: str = DEFAULT_ENCODING,
) -> ByteArrayContent | None:
    """
    Builds the content for an explicit request body parameter.

    Raw bytes are sent as they are (``application/octet-stream`` unless the
    parameter says otherwise).  Text is encoded with its charset when the
    parameter names one, or when there's no serializer to hand it to; the
    charset is appended to the Content-Type.  Anything else goes through the
    serializer, whose content type is used as-is.

    The returned content always has a Content-Type and a Content-Length.
    Both are written without validation: they're computed here, and a
    caller-supplied content type may legitimately fail strict checks.
    """
    if parameter is None:
        return None

    value = parameter.value
    if isinstance(value, Binary):
        content_type = parameter.content_type or OCTET_STREAM
        buffer = value.data
    elif isinstance(value, Text) and (parameter.encoding is not None or serializer is None):
        charset = resolve_charset(parameter.encoding, default_encoding)
        if parameter.content_type is not None:
            content_type = parameter.content_type
            if "charset=" not in content_type.lower():
                content_type += f";charset={charset}"
        else:
            content_type = f"text/plain;charset={charset}"
        buffer = value.text.encode(codec_name(charset))
    elif serializer is not None:
        obj = value.text if isinstance(value, Text) else getattr(value, "obj", None)
        buffer = serializer.serialize(obj)
        content_type = serializer.content_type
    elif value is None:
        # Nothing to serialize with, so an absent value is an empty text body.
        charset = resolve_charset(parameter.encoding, default_encoding)
        content_type = parameter.content_type or f"text/plain;charset={charset}"
        buffer = b""
    else:
        logger.error("No serializer to write body parameter %r", parameter.name)
        raise InvalidOperationError("A serializer is required to send a structured body parameter.")

    content = ByteArrayContent(buffer)
    content.headers.replace_without_validation("Content-Type", content_type)
    content.headers.replace_without_validation("Content-Length", str(len(buffer)))
    return content
