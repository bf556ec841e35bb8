from __future__ import annotations

from typing import TYPE_CHECKING

from .collector import ContentCollectionMode, get_content
from .parameters import (
    BodyParameter,
    FileParameter,
    FormParameter,
    HeaderParameter,
    QueryParameter,
    RequestParameters,
    UrlSegmentParameter,
)

if TYPE_CHECKING:  # pragma: no cover
    from typing import Any

    from .body import Serializer
    from .collector import ClientLike
    from .content import Content
    from .parameters import Parameter


class RestRequest:
    """
    Collects the parameters of a single request in the order they're added.

    This is a small builder; URL building and execution are left to the
    client.  ``method`` may be None to let the content decide between GET and
    POST.
    """

    def __init__(
        self,
        method: str | None = None,
        serializer: Serializer | None = None,
        content_collection_mode: ContentCollectionMode = ContentCollectionMode.MULTI_PART_FOR_FILE_PARAMETERS,
    ) -> None:
        self.method = method.upper() if method else None
        self.serializer = serializer
        self.content_collection_mode = content_collection_mode
        self._parameters: list[Parameter] = []

    @property
    def parameters(self) -> list[Parameter]:
        return list(self._parameters)

    def add(self, parameter: Parameter) -> RestRequest:
        self._parameters.append(parameter)
        return self

    def add_parameter(
        self, name: str, value: Any, content_type: str | None = None, encoding: str | None = None
    ) -> RestRequest:
        return self.add(FormParameter(name, value, content_type=content_type, encoding=encoding))

    def add_query_parameter(self, name: str, value: Any, encoding: str | None = None) -> RestRequest:
        return self.add(QueryParameter(name, value, encoding=encoding))

    def add_url_segment(self, name: str, value: Any) -> RestRequest:
        return self.add(UrlSegmentParameter(name, value))

    def add_file(self, name: str, data: bytes, file_name: str, content_type: str | None = None) -> RestRequest:
        return self.add(FileParameter(name, data, file_name, content_type=content_type))

    def add_body(
        self,
        value: Any,
        name: str | None = None,
        content_type: str | None = None,
        encoding: str | None = None,
    ) -> RestRequest:
        return self.add(BodyParameter(value, name=name, content_type=content_type, encoding=encoding))

    def add_header(self, name: str, value: Any, validate_on_add: bool = True) -> RestRequest:
        return self.add(HeaderParameter(name, value, validate_on_add=validate_on_add))

    def request_parameters(self) -> RequestParameters:
        return RequestParameters.from_parameters(self._parameters)

    def get_content(self, client: ClientLike | None = None, config: dict[Any, Any] = {}) -> Content | None:
        """Shortcut for :func:`~rest_content.collector.get_content` on this request."""
        return get_content(client, self, self.request_parameters(), config=config)

    def __repr__(self) -> str:
        return "%s(method=%r, content_collection_mode=%r, parameters=%r)" % (
            self.__class__.__name__,
            self.method,
            self.content_collection_mode,
            self._parameters,
        )
