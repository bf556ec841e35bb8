from __future__ import annotations

import codecs
import logging
from datetime import date, datetime, time
from typing import TYPE_CHECKING
from urllib.parse import quote, quote_plus

from .exceptions import UnsupportedOperationError
from .parameters import Binary, ParameterKind, Structured, Text

if TYPE_CHECKING:  # pragma: no cover
    from .parameters import Parameter, ParameterValue


#: The charset used when neither the parameter nor the configuration name one.
DEFAULT_ENCODING = "utf-8"

# Kinds that have a URL-encoded wire form.
ENCODABLE_KINDS = frozenset((ParameterKind.GET_OR_POST, ParameterKind.QUERY_STRING, ParameterKind.URL_SEGMENT))

# Python codec names whose IANA (wire) name is spelled differently.
IANA_NAMES = {
    "ascii": "us-ascii",
    "utf-8-sig": "utf-8",
    "utf-16-le": "utf-16le",
    "utf-16-be": "utf-16be",
    "utf-32-le": "utf-32le",
    "utf-32-be": "utf-32be",
    "euc_jp": "euc-jp",
    "euc_kr": "euc-kr",
    "mac-roman": "macintosh",
}

# Charsets that Python writes with a byte order mark; on the wire they're
# little-endian without one.
BOM_FREE_CODECS = {"utf-16": "utf-16-le", "utf-32": "utf-32-le"}

logger = logging.getLogger(__name__)


def resolve_charset(encoding: str | None, default: str = DEFAULT_ENCODING) -> str:
    """
    Returns the IANA name of a charset, as written into the ``charset=``
    option of a Content-Type: ``"Latin-1"`` becomes ``"iso-8859-1"`` and
    ``"cp1252"`` becomes ``"windows-1252"``.  ``codecs.lookup`` raises a
    LookupError if Python doesn't know the charset.
    """
    name = codecs.lookup(encoding or default).name
    if name in IANA_NAMES:
        return IANA_NAMES[name]
    if name.startswith("iso8859-"):
        return "iso-8859-" + name[len("iso8859-") :]
    if name.startswith("cp125") and len(name) == 6:
        return "windows-" + name[2:]
    return name


def codec_name(charset: str) -> str:
    """The Python codec that writes ``charset`` without a byte order mark."""
    return BOM_FREE_CODECS.get(charset, charset)


def url_escape(value: str | bytes, encoding: str = DEFAULT_ENCODING, space_as_plus: bool = False) -> str:
    """
    Percent-encodes a string (encoded with ``encoding`` first) or raw bytes.
    Only the RFC 3986 unreserved characters are left as they are.  With
    ``space_as_plus`` a space is written as ``+``, as in HTML form data.
    """
    if isinstance(value, str):
        if space_as_plus:
            return quote_plus(value, safe="", encoding=codec_name(encoding))
        return quote(value, safe="", encoding=codec_name(encoding))

    if space_as_plus:
        return quote_plus(value, safe="")
    return quote(value, safe="")


def to_request_string(value: ParameterValue | None, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Formats a parameter value the way it's written into a request: text as
    it is, bytes decoded with ``encoding``, booleans in lower case, dates and
    times in ISO 8601 and everything else through ``str()``.
    """
    if value is None:
        return ""
    if isinstance(value, Text):
        return value.text
    if isinstance(value, Binary):
        return value.data.decode(codec_name(encoding))

    assert isinstance(value, Structured), "Unknown parameter value %r" % (value,)
    obj = value.obj
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    return str(obj)


def encode_parameter(parameter: Parameter, space_as_plus: bool = False, default_encoding: str = DEFAULT_ENCODING) -> str:
    """
    Converts a parameter into its URL-encoded string.  Only GET-or-POST,
    query string and URL segment parameters can be encoded; any other kind
    raises an :class:`UnsupportedOperationError`.
    """
    if parameter.kind not in ENCODABLE_KINDS:
        logger.error("Can't URL-encode a parameter of type %s", parameter.kind)
        raise UnsupportedOperationError(
            f"Parameter of type {parameter.kind} doesn't support an encoding.", kind=parameter.kind
        )

    value = parameter.value
    if value is None:
        return ""

    charset = resolve_charset(parameter.encoding, default_encoding)
    if isinstance(value, Text):
        return url_escape(value.text, charset, space_as_plus)
    if isinstance(value, Binary):
        return url_escape(value.data, charset, space_as_plus)
    return url_escape(to_request_string(value, charset), charset, space_as_plus)


def encode_name(name: str | None, encoding: str = DEFAULT_ENCODING) -> str:
    """Encodes a form field name for ``application/x-www-form-urlencoded`` data."""
    return url_escape(name or "", encoding, space_as_plus=True)
