from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from .body import OCTET_STREAM, build_body_content
from .content import ByteArrayContent, FormUrlEncodedContent, MultipartFormDataContent, StringContent
from .encoding import DEFAULT_ENCODING, encode_name, encode_parameter, resolve_charset, to_request_string
from .exceptions import InvalidOperationError
from .parameters import (
    Binary,
    BodyParameter,
    FileParameter,
    ParameterKind,
    RequestParameters,
    body_parameters,
    file_parameters,
    get_or_post_parameters,
)

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence
    from typing import Any, Protocol, TypedDict

    from .body import Serializer
    from .content import Content
    from .parameters import Parameter

    class RequestLike(Protocol):
        method: str | None
        serializer: Serializer | None
        content_collection_mode: ContentCollectionMode

    class ClientLike(Protocol):
        def get_effective_http_method(self, request: Any, parameters: Sequence[Parameter]) -> str: ...

    class ContentConfig(TypedDict, total=False):
        DEFAULT_ENCODING: str
        BOUNDARY: str | None
        ERROR_ON_DROPPED_FILES: bool


class ContentCollectionMode(Enum):
    """How the parameters of a request are collected into its content."""

    #: Multipart content only when there are file parameters.
    MULTI_PART_FOR_FILE_PARAMETERS = "MultiPartForFileParameters"
    #: Always multipart content.
    MULTI_PART = "MultiPart"
    #: Never multipart content.
    BASIC_CONTENT = "BasicContent"


def get_effective_http_method(
    client: ClientLike | None, request: RequestLike | None, parameters: Sequence[Parameter]
) -> str:
    """
    Returns the method the request is actually sent with.  The client has the
    final say when there is one; otherwise the request's own method is used,
    and a request without a method becomes a POST if it has a body or files.
    """
    if client is not None:
        return client.get_effective_http_method(request, parameters).upper()

    method = getattr(request, "method", None)
    if method:
        return method.upper()

    for p in parameters:
        if p.kind is ParameterKind.REQUEST_BODY or isinstance(p, FileParameter):
            return "POST"
    return "GET"


class ContentCollector:
    """
    Assembles the content of a request from its merged parameters.

    Depending on the request's :class:`ContentCollectionMode` the parameters
    end up in a single-part body (the explicit body parameter, or the form
    encoded GET-or-POST parameters) or in a ``multipart/form-data`` body.
    Afterwards the ``Content-*`` header parameters are written onto the
    result.

    Collection either produces a complete content or raises; nothing is
    returned half-built.
    """

    # This is the default configuration for our collector.
    DEFAULT_CONFIG: ContentConfig = {
        "DEFAULT_ENCODING": DEFAULT_ENCODING,
        # None generates a fresh boundary for each multipart content.
        "BOUNDARY": None,
        # Raise when BASIC_CONTENT would have to drop file parameters?
        "ERROR_ON_DROPPED_FILES": True,
    }

    def __init__(self, client: ClientLike | None = None, config: dict[Any, Any] = {}) -> None:
        self.logger = logging.getLogger(__name__)
        self.client = client

        self.config: ContentConfig = self.DEFAULT_CONFIG.copy()
        self.config.update(config)  # type: ignore[typeddict-item]

        # Fail early on a misspelled charset.
        resolve_charset(self.config["DEFAULT_ENCODING"])

    @property
    def default_encoding(self) -> str:
        return self.config["DEFAULT_ENCODING"]

    def collect(self, request: RequestLike | None, parameters: RequestParameters) -> Content | None:
        mode = getattr(request, "content_collection_mode", None) or ContentCollectionMode.MULTI_PART_FOR_FILE_PARAMETERS
        files = list(file_parameters(parameters.other_parameters))

        if mode is ContentCollectionMode.BASIC_CONTENT:
            if files:
                if self.config["ERROR_ON_DROPPED_FILES"]:
                    self.logger.error("%d file parameter(s) on a request without multipart content", len(files))
                    raise InvalidOperationError("File parameters require multi-part encoding.")
                self.logger.warning("Dropping %d file parameter(s): multipart content is disabled", len(files))
            content = self._basic_content(request, parameters)
        elif mode is ContentCollectionMode.MULTI_PART or files:
            content = self._multipart_content(request, parameters)
        else:
            content = self._basic_content(request, parameters)

        if content is None:
            self.logger.debug("Request has no content")
            return None

        self._apply_content_headers(content, parameters.content_header_parameters)
        return content

    def build_body(self, request: RequestLike | None, parameter: Parameter | None) -> ByteArrayContent | None:
        serializer = getattr(request, "serializer", None)
        return build_body_content(serializer, parameter, self.default_encoding)

    def _basic_content(self, request: RequestLike | None, parameters: RequestParameters) -> Content | None:
        bodies = list(body_parameters(parameters.other_parameters))
        if bodies:
            if len(bodies) > 1:
                self.logger.warning("Ignoring %d extra body parameter(s), only the first is sent", len(bodies) - 1)
            self.logger.debug("Using body parameter %r as content", bodies[0].name)
            return self.build_body(request, bodies[0])

        method = get_effective_http_method(self.client, request, parameters.other_parameters)
        if method == "GET":
            return None

        fields = list(get_or_post_parameters(parameters.other_parameters))
        if not fields:
            return None

        self.logger.debug("Form-encoding %d parameter(s) for a %s request", len(fields), method)
        return FormUrlEncodedContent(
            (
                encode_name(p.name, resolve_charset(p.encoding, self.default_encoding)),
                encode_parameter(p, space_as_plus=True, default_encoding=self.default_encoding),
            )
            for p in fields
        )

    def _multipart_content(self, request: RequestLike | None, parameters: RequestParameters) -> MultipartFormDataContent:
        method = get_effective_http_method(self.client, request, parameters.other_parameters)
        is_post = method == "POST"
        multipart = MultipartFormDataContent(self.config["BOUNDARY"])
        self.logger.debug("Building multipart content for a %s request", method)

        for p in parameters.other_parameters:
            if isinstance(p, FileParameter):
                data = ByteArrayContent(p.value.data)
                if p.content_type:
                    data.headers.replace_without_validation("Content-Type", p.content_type)
                data.headers.replace_without_validation("Content-Length", str(p.content_length))
                multipart.add(data, p.name or "", p.file_name)

            elif is_post and p.kind is ParameterKind.GET_OR_POST:
                self._add_form_section(multipart, p)

            elif isinstance(p, BodyParameter):
                body = self.build_body(request, p)
                assert body is not None
                name = p.name or body.headers.get("Content-Type")
                name = next((x.strip() for x in (name or "").split(";") if x.strip()), None)
                if not name:
                    self.logger.error("Body parameter without a name in multipart content")
                    raise InvalidOperationError("You must specify a name for a body parameter.")
                multipart.add(body, name)

            elif p.kind is ParameterKind.GET_OR_POST:
                self.logger.debug("Skipping form parameter %r for a %s request", p.name, method)

        return multipart

    def _add_form_section(self, multipart: MultipartFormDataContent, parameter: Parameter) -> None:
        value = parameter.value
        data: ByteArrayContent
        if isinstance(value, Binary):
            data = ByteArrayContent(value.data)
            data.headers.replace_without_validation("Content-Type", parameter.content_type or OCTET_STREAM)
            data.headers.replace_without_validation("Content-Length", str(len(value)))
        else:
            # Multipart field values are sent as they are, not URL-encoded.
            charset = resolve_charset(parameter.encoding, self.default_encoding)
            data = StringContent(to_request_string(value, charset), charset)
            if parameter.content_type:
                data.headers.replace_without_validation("Content-Type", parameter.content_type)
        multipart.add(data, parameter.name or "")

    def _apply_content_headers(self, content: Content, header_parameters: Sequence[Parameter]) -> None:
        for p in header_parameters:
            name = p.name or ""
            value = to_request_string(p.value, self.default_encoding)
            if content.headers.remove(name):
                self.logger.debug("Replacing content header %s", name)

            if p.validate_on_add:
                content.headers.add(name, value)
            elif not content.headers.try_add_without_validation(name, value):
                self.logger.warning("Content header %r was not applied", name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(client={self.client!r}, config={self.config!r})"


def get_content(
    client: ClientLike | None,
    request: RequestLike | None,
    parameters: RequestParameters,
    config: dict[Any, Any] = {},
) -> Content | None:
    """
    Returns the content to send for a request, or None when the request has
    no body.  This is the entry point transports call right before sending.

    :param client: The client executing the request, used to resolve the
                   effective HTTP method.  May be None.
    :param request: The request, providing the method, the body serializer
                    and the :class:`ContentCollectionMode`.  May be None.
    :param parameters: The merged request parameters.
    :param config: Overrides for :attr:`ContentCollector.DEFAULT_CONFIG`.
    """
    return ContentCollector(client, config=config).collect(request, parameters)


def get_body_content(
    request: RequestLike | None, body: Parameter | None, config: dict[Any, Any] = {}
) -> ByteArrayContent | None:
    """Returns the content for a single body parameter, or None without one."""
    return ContentCollector(config=config).build_body(request, body)
