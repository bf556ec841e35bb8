__version__ = "0.1.0"

from .collector import ContentCollectionMode, ContentCollector, get_body_content, get_content
from .content import (
    ByteArrayContent,
    Content,
    FormUrlEncodedContent,
    MultipartFormDataContent,
    StringContent,
)
from .exceptions import ContentError, HeaderFormatError, InvalidOperationError, UnsupportedOperationError
from .headers import Headers
from .parameters import (
    BodyParameter,
    FileParameter,
    FormParameter,
    HeaderParameter,
    ParameterKind,
    QueryParameter,
    RequestParameters,
    UrlSegmentParameter,
)
from .request import RestRequest

__all__ = (
    "BodyParameter",
    "ByteArrayContent",
    "Content",
    "ContentCollectionMode",
    "ContentCollector",
    "ContentError",
    "FileParameter",
    "FormParameter",
    "FormUrlEncodedContent",
    "HeaderFormatError",
    "HeaderParameter",
    "Headers",
    "InvalidOperationError",
    "MultipartFormDataContent",
    "ParameterKind",
    "QueryParameter",
    "RequestParameters",
    "RestRequest",
    "StringContent",
    "UnsupportedOperationError",
    "UrlSegmentParameter",
    "get_body_content",
    "get_content",
)
