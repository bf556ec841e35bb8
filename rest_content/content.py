from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from .encoding import DEFAULT_ENCODING, codec_name, resolve_charset
from .headers import Headers

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Iterator


CRLF = b"\r\n"


class Content:
    """
    The body of an HTTP request together with its content headers.  Every
    content is fully materialised, so its length is always known.
    """

    def __init__(self) -> None:
        self.headers = Headers()

    def to_bytes(self) -> bytes:
        raise NotImplementedError  # pragma: no cover

    def __len__(self) -> int:
        return len(self.to_bytes())

    def __repr__(self) -> str:
        return "%s(headers=%r)" % (self.__class__.__name__, self.headers)


class ByteArrayContent(Content):
    def __init__(self, data: bytes) -> None:
        super().__init__()
        self._data = bytes(data)

    @property
    def data(self) -> bytes:
        return self._data

    def to_bytes(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        if len(self._data) > 97:
            v = repr(self._data[:97])[:-1] + "...'"
        else:
            v = repr(self._data)
        return "%s(data=%s, headers=%r)" % (self.__class__.__name__, v, self.headers)


class StringContent(ByteArrayContent):
    """
    Text encoded with the given charset.  A Content-Type is only written when
    a ``media_type`` is given; the charset is appended to it.
    """

    def __init__(self, text: str, encoding: str = DEFAULT_ENCODING, media_type: str | None = None) -> None:
        charset = resolve_charset(encoding)
        super().__init__(text.encode(codec_name(charset)))
        self._text = text
        self._charset = charset
        if media_type is not None:
            self.headers.replace_without_validation("Content-Type", f"{media_type}; charset={charset}")

    @property
    def text(self) -> str:
        return self._text

    @property
    def charset(self) -> str:
        return self._charset


class FormUrlEncodedContent(ByteArrayContent):
    """
    An ``application/x-www-form-urlencoded`` body built from pairs whose
    names and values are already percent-encoded.
    """

    CONTENT_TYPE = "application/x-www-form-urlencoded"

    def __init__(self, encoded_pairs: Iterable[tuple[str, str]]) -> None:
        self._pairs = list(encoded_pairs)
        super().__init__("&".join(f"{name}={value}" for name, value in self._pairs).encode("ascii"))
        self.headers.replace_without_validation("Content-Type", self.CONTENT_TYPE)
        self.headers.replace_without_validation("Content-Length", str(len(self._data)))

    @property
    def pairs(self) -> list[tuple[str, str]]:
        return list(self._pairs)


def _quote_disposition_value(value: str) -> str:
    # Percent-encodes the quote, CR and LF the way browsers write form-data
    # names.
    return '"%s"' % value.replace('"', "%22").replace("\r", "%0D").replace("\n", "%0A")


class MultipartSection:
    """
    A single part of a multipart body: a nested content plus the name (and
    optional file name) it's sent under.
    """

    def __init__(self, content: Content, name: str, file_name: str | None = None) -> None:
        self.content = content
        self.name = name
        self.file_name = file_name

    @property
    def content_disposition(self) -> str:
        disposition = "form-data; name=" + _quote_disposition_value(self.name)
        if self.file_name is not None:
            disposition += "; filename=" + _quote_disposition_value(self.file_name)
        return disposition

    @property
    def headers(self) -> Headers:
        """
        The headers written in front of this part: the Content-Disposition
        followed by the headers of the nested content.
        """
        headers = Headers()
        headers.replace_without_validation("Content-Disposition", self.content_disposition)
        for name, value in self.content.headers:
            if name.lower() != "content-disposition":
                headers.try_add_without_validation(name, value)
        return headers

    def _head(self) -> bytes:
        lines = [f"{name}: {value}".encode() for name, value in self.headers]
        return CRLF.join(lines) + CRLF + CRLF

    def to_bytes(self) -> bytes:
        return self._head() + self.content.to_bytes()

    def __len__(self) -> int:
        return len(self._head()) + len(self.content)

    def __repr__(self) -> str:
        return "%s(name=%r, file_name=%r, content=%r)" % (
            self.__class__.__name__,
            self.name,
            self.file_name,
            self.content,
        )


class MultipartFormDataContent(Content):
    """
    A ``multipart/form-data`` body.  Sections keep the order they're added
    in.  The Content-Type (with the boundary) and the Content-Length are kept
    up to date as sections are added; the length is tracked as a running
    total, so the body is only serialised by :meth:`to_bytes`.
    """

    def __init__(self, boundary: str | None = None) -> None:
        super().__init__()
        self.logger = logging.getLogger(__name__)
        if boundary is None:
            boundary = uuid.uuid4().hex
        if not 1 <= len(boundary) <= 70 or boundary.endswith(" "):
            raise ValueError("Invalid multipart boundary: %r" % boundary)

        self.boundary = boundary
        self._delimiter = b"--" + boundary.encode("ascii")
        self._sections: list[MultipartSection] = []
        # Closing delimiter: --boundary--CRLF
        self._length = len(self._delimiter) + 4
        self.headers.replace_without_validation("Content-Type", f"multipart/form-data; boundary={boundary}")
        self._update_length()

    @property
    def sections(self) -> list[MultipartSection]:
        return list(self._sections)

    def add(self, content: Content, name: str, file_name: str | None = None) -> MultipartSection:
        section = MultipartSection(content, name, file_name)
        self.logger.debug("Adding multipart section %r (file name %r)", name, file_name)
        self._sections.append(section)
        # --boundary CRLF section CRLF
        self._length += len(self._delimiter) + len(section) + 4
        self._update_length()
        return section

    def _update_length(self) -> None:
        self.headers.replace_without_validation("Content-Length", str(self._length))

    def to_bytes(self) -> bytes:
        parts: list[bytes] = []
        for section in self._sections:
            parts.extend((self._delimiter, CRLF, section.to_bytes(), CRLF))
        parts.extend((self._delimiter, b"--", CRLF))
        return b"".join(parts)

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[MultipartSection]:
        return iter(self._sections)

    def __repr__(self) -> str:
        return "%s(boundary=%r, sections=%r)" % (self.__class__.__name__, self.boundary, self._sections)
