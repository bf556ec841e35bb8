from __future__ import annotations

import codecs
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Iterator
    from typing import Any


class ParameterKind(Enum):
    QUERY_STRING = "QueryString"
    URL_SEGMENT = "UrlSegment"
    GET_OR_POST = "GetOrPost"
    REQUEST_BODY = "RequestBody"
    HTTP_HEADER = "HttpHeader"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Parameter values
# =============================================================================


class ParameterValue:
    """
    The value carried by a parameter.  This is one of :class:`Text`,
    :class:`Binary` or :class:`Structured`; a missing value is represented by
    None rather than by a variant.
    """

    __slots__ = ()

    @classmethod
    def from_object(cls, value: Any) -> ParameterValue | None:
        """
        Wraps a plain Python value in the matching variant.  Strings become
        :class:`Text`, bytes-like objects become :class:`Binary`, and
        everything else becomes :class:`Structured`.  None and values that
        are already wrapped are returned as-is.
        """
        if value is None or isinstance(value, ParameterValue):
            return value
        if isinstance(value, str):
            return Text(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return Binary(bytes(value))
        return Structured(value)


class Text(ParameterValue):
    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Text):
            return self.text == other.text
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Text, self.text))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.text!r})"


class Binary(ParameterValue):
    __slots__ = ("data",)

    def __init__(self, data: bytes) -> None:
        self.data = data

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Binary):
            return self.data == other.data
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Binary, self.data))

    def __repr__(self) -> str:
        if len(self.data) > 97:
            # Shorten long payloads, keeping the repr quote at the end.
            v = repr(self.data[:97])[:-1] + "...'"
        else:
            v = repr(self.data)
        return f"{self.__class__.__name__}({v})"


class Structured(ParameterValue):
    """An arbitrary object, formatted or serialized when the request is built."""

    __slots__ = ("obj",)

    def __init__(self, obj: Any) -> None:
        self.obj = obj

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Structured):
            return self.obj == other.obj
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.obj!r})"


# =============================================================================
# Parameters
# =============================================================================


class Parameter:
    """
    A named value attached to a request.  Don't instantiate this directly,
    use one of the concrete variants below; each of them fixes the
    :class:`ParameterKind` it stands for.

    The ``encoding`` is a charset name (e.g. ``"utf-8"``).  When it's None,
    the default encoding configured for the request content is used.
    """

    kind: ParameterKind

    def __init__(
        self,
        name: str | None,
        value: Any = None,
        content_type: str | None = None,
        encoding: str | None = None,
        validate_on_add: bool = True,
    ) -> None:
        if encoding is not None:
            # Unknown charsets raise a LookupError right here.
            codecs.lookup(encoding)

        self._name = name
        self._value = ParameterValue.from_object(value)
        self._content_type = content_type
        self._encoding = encoding
        self._validate_on_add = validate_on_add

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def value(self) -> ParameterValue | None:
        return self._value

    @property
    def content_type(self) -> str | None:
        return self._content_type

    @property
    def encoding(self) -> str | None:
        return self._encoding

    @property
    def validate_on_add(self) -> bool:
        """
        Only relevant for header parameters: whether the header must pass
        validation when it's written to the assembled content.
        """
        return self._validate_on_add

    def _key(self) -> tuple[Any, ...]:
        return (
            self.__class__,
            self._name,
            self._value,
            self._content_type,
            self._encoding,
            self._validate_on_add,
        )

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Parameter):
            return self._key() == other._key()
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "{}(name={!r}, value={!r}, content_type={!r}, encoding={!r})".format(
            self.__class__.__name__,
            self._name,
            self._value,
            self._content_type,
            self._encoding,
        )


class QueryParameter(Parameter):
    kind = ParameterKind.QUERY_STRING


class UrlSegmentParameter(Parameter):
    kind = ParameterKind.URL_SEGMENT


class FormParameter(Parameter):
    """A GET-or-POST parameter: query string for GET, form data otherwise."""

    kind = ParameterKind.GET_OR_POST


class FileParameter(Parameter):
    """
    A file upload.  It is a GET-or-POST parameter that is only ever sent as a
    multipart section, using the field ``name`` and the ``file_name``.
    """

    kind = ParameterKind.GET_OR_POST

    def __init__(
        self,
        name: str,
        data: bytes | bytearray,
        file_name: str,
        content_type: str | None = None,
    ) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview, Binary)):
            raise TypeError("File data must be bytes, not %r" % type(data).__name__)

        super().__init__(name, data, content_type=content_type)
        self._file_name = file_name

    @property
    def value(self) -> Binary:
        assert isinstance(self._value, Binary)
        return self._value

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def content_length(self) -> int:
        return len(self.value)

    def _key(self) -> tuple[Any, ...]:
        return super()._key() + (self._file_name,)

    def __repr__(self) -> str:
        return "{}(name={!r}, file_name={!r}, content_type={!r}, content_length={})".format(
            self.__class__.__name__,
            self._name,
            self._file_name,
            self._content_type,
            self.content_length,
        )


class BodyParameter(Parameter):
    """The explicit request body.  Its name is only used for multipart sections."""

    kind = ParameterKind.REQUEST_BODY

    def __init__(
        self,
        value: Any,
        name: str | None = None,
        content_type: str | None = None,
        encoding: str | None = None,
    ) -> None:
        super().__init__(name, value, content_type=content_type, encoding=encoding)


class HeaderParameter(Parameter):
    kind = ParameterKind.HTTP_HEADER

    def __init__(self, name: str, value: Any, validate_on_add: bool = True) -> None:
        super().__init__(name, value, validate_on_add=validate_on_add)


# =============================================================================
# Classification
# =============================================================================


def get_or_post_parameters(parameters: Iterable[Parameter], include_files: bool = False) -> Iterator[Parameter]:
    """
    Yields the GET-or-POST parameters.  File parameters are POST-only, so
    they're skipped unless ``include_files`` is set.
    """
    for p in parameters:
        if p.kind is ParameterKind.GET_OR_POST and (include_files or not isinstance(p, FileParameter)):
            yield p


def file_parameters(parameters: Iterable[Parameter]) -> Iterator[FileParameter]:
    for p in parameters:
        if isinstance(p, FileParameter):
            yield p


def body_parameters(parameters: Iterable[Parameter]) -> Iterator[BodyParameter]:
    for p in parameters:
        if isinstance(p, BodyParameter):
            yield p


def is_content_header_parameter(parameter: Parameter) -> bool:
    """
    Whether the parameter is a header that belongs to the content (the body)
    rather than to the request, i.e. its name starts with ``Content-``.
    """
    return (
        parameter.kind is ParameterKind.HTTP_HEADER
        and bool(parameter.name)
        and parameter.name[:8].lower() == "content-"  # type: ignore[index]
    )


class RequestParameters:
    """
    The merged parameters of a single request, split into the parameters that
    make up the content and the ``Content-*`` headers that are applied to it
    afterwards.  Request-level headers are kept apart for the transport.
    """

    def __init__(
        self,
        other_parameters: Iterable[Parameter] = (),
        content_header_parameters: Iterable[Parameter] = (),
        header_parameters: Iterable[Parameter] = (),
    ) -> None:
        self.other_parameters: tuple[Parameter, ...] = tuple(other_parameters)
        self.content_header_parameters: tuple[Parameter, ...] = tuple(content_header_parameters)
        self.header_parameters: tuple[Parameter, ...] = tuple(header_parameters)

    @classmethod
    def from_parameters(cls, parameters: Iterable[Parameter]) -> RequestParameters:
        other: list[Parameter] = []
        content_headers: list[Parameter] = []
        headers: list[Parameter] = []
        for p in parameters:
            if is_content_header_parameter(p):
                content_headers.append(p)
            elif p.kind is ParameterKind.HTTP_HEADER:
                headers.append(p)
            else:
                other.append(p)
        return cls(other, content_headers, headers)

    def __repr__(self) -> str:
        return "{}(other_parameters={!r}, content_header_parameters={!r})".format(
            self.__class__.__name__,
            self.other_parameters,
            self.content_header_parameters,
        )
