from __future__ import annotations

import logging
from email.message import Message
from typing import TYPE_CHECKING

from .exceptions import HeaderFormatError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterator


# fmt: off
# Characters allowed in an HTTP token (RFC 7230 3.2.6): header names, media
# types and their parameter names are made of these.
TOKEN_CHARS_SET = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789"
    "!#$%&'*+-.^_`|~")
# fmt: on

HTAB = "\t"

# Content headers that can't hold more than one value.
SINGLE_VALUE_HEADERS = frozenset(
    (
        "content-type",
        "content-length",
        "content-disposition",
        "content-location",
        "content-md5",
        "content-range",
    )
)


def is_token(value: str) -> bool:
    return bool(value) and all(c in TOKEN_CHARS_SET for c in value)


def parse_options_header(value: str | bytes | None) -> tuple[str, dict[str, str]]:
    """
    Parses a Content-Type like header into a value in the following format:
        (content_type, {parameters})

    The content type and the parameter names are lower-cased, quoted values
    are unquoted.
    """
    if not value:
        return ("", {})

    if isinstance(value, bytes):  # pragma: no cover
        value = value.decode("latin-1")

    # If we have no options, return the string as-is.
    if ";" not in value:
        return (value.lower().strip(), {})

    # The email module does the RFC 2231 and quoting work for us.
    message = Message()
    message["content-type"] = value
    params = message.get_params()
    assert params, "At least the content type value should be present"
    ctype = params.pop(0)[0].lower().strip()
    options: dict[str, str] = {}
    for key, param_value in params:
        if isinstance(param_value, tuple):
            param_value = param_value[-1]
        options[key.lower()] = param_value
    return ctype, options


def _check_value(name: str, value: str) -> str | None:
    """Returns why ``value`` isn't acceptable for header ``name``, or None."""
    for c in value:
        if (c < " " and c != HTAB) or c == "\x7f":
            return "contains the control character %r" % c

    lname = name.lower()
    if lname == "content-type":
        ctype, options = parse_options_header(value)
        main, sep, sub = ctype.partition("/")
        if not sep or not is_token(main) or not is_token(sub):
            return "is not a valid media type"
        for key, option in options.items():
            if not key and not option:
                # A trailing or doubled semicolon.
                continue
            if not is_token(key) or not option:
                return "has a malformed parameter %r" % key
    elif lname == "content-length":
        if not value.strip().isdigit():
            return "is not a non-negative integer"
    elif lname == "content-disposition":
        if not is_token(value.split(";", 1)[0].strip()):
            return "doesn't start with a disposition type"
    return None


class Headers:
    """
    An ordered collection of HTTP headers.  Names are matched case
    insensitively but keep the spelling they were first added with, and a
    header may carry several values.

    There are two ways to write a header: :meth:`add` validates both name and
    value and raises a :class:`HeaderFormatError` on bad input, while
    :meth:`try_add_without_validation` and :meth:`replace_without_validation`
    only look at the name.  The latter are meant for values that are computed
    internally, or that the caller explicitly wants to force through.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)
        self._headers: dict[str, tuple[str, list[str]]] = {}

    def contains(self, name: str) -> bool:
        return name.lower() in self._headers

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def remove(self, name: str) -> bool:
        """Removes all values of the header.  Returns False if it wasn't there."""
        return self._headers.pop(name.lower(), None) is not None

    def get_values(self, name: str) -> list[str]:
        entry = self._headers.get(name.lower())
        if entry is None:
            return []
        return list(entry[1])

    def get(self, name: str, default: str | None = None) -> str | None:
        entry = self._headers.get(name.lower())
        if entry is None:
            return default
        return ", ".join(entry[1])

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def add(self, name: str, value: str) -> None:
        if not is_token(name):
            self.logger.warning("Invalid header name: %r", name)
            raise HeaderFormatError(f"The header name {name!r} has an invalid format.", name, value)

        problem = _check_value(name, value)
        if problem is not None:
            self.logger.warning("Invalid value for header %s: %r", name, value)
            raise HeaderFormatError(f"The value {value!r} of header {name!r} {problem}.", name, value)

        if name.lower() in SINGLE_VALUE_HEADERS and self.contains(name):
            raise HeaderFormatError(f"Cannot add a value because header {name!r} does not support multiple values.", name, value)

        self._append(name, value)

    def try_add_without_validation(self, name: str, value: str) -> bool:
        if not is_token(name):
            self.logger.warning("Refusing header with invalid name: %r", name)
            return False
        self._append(name, value)
        return True

    def replace_without_validation(self, name: str, value: str) -> None:
        self.remove(name)
        self._headers[name.lower()] = (name, [value])

    def set_header(self, name: str, value: str, validate: bool = True) -> None:
        """
        Sets a header, replacing any values it had.  With ``validate`` the
        write goes through :meth:`add` and may raise a
        :class:`HeaderFormatError`; without it, only the name is checked.
        """
        existing = self._headers.pop(name.lower(), None)
        try:
            if validate:
                self.add(name, value)
            elif not self.try_add_without_validation(name, value):
                raise HeaderFormatError(f"The header name {name!r} has an invalid format.", name, value)
        except HeaderFormatError:
            if existing is not None:
                self._headers[name.lower()] = existing
            raise

    def _append(self, name: str, value: str) -> None:
        entry = self._headers.get(name.lower())
        if entry is None:
            self._headers[name.lower()] = (name, [value])
        else:
            entry[1].append(value)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        for name, values in self._headers.values():
            yield name, ", ".join(values)

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "{}({!r})".format(self.__class__.__name__, list(self))
