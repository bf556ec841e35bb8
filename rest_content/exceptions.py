from __future__ import annotations


class ContentError(ValueError):
    """Base error class for request content assembly."""


class UnsupportedOperationError(ContentError):
    """This exception is raised when a parameter is asked for a wire form it
    doesn't have - for example, URL-encoding a header or a request body.
    """

    #: The :class:`~rest_content.parameters.ParameterKind` that was rejected.
    #: It will be None if not specified.
    kind = None

    def __init__(self, message: str, kind: object = None) -> None:
        super().__init__(message)
        self.kind = kind


class InvalidOperationError(ContentError):
    """This exception is raised when the request parameters can't be turned
    into a consistent body, e.g. a body part without a name, or file
    parameters on a request that forbids multipart content.
    """


class HeaderFormatError(ContentError):
    """This exception is raised when a header is added with validation and
    either its name or its value is malformed.
    """

    def __init__(self, message: str, header_name: str | None = None, header_value: str | None = None) -> None:
        super().__init__(message)
        self.header_name = header_name
        self.header_value = header_value
