from __future__ import annotations

import unittest
from unittest.mock import patch

from rest_content.content import (
    ByteArrayContent,
    FormUrlEncodedContent,
    MultipartFormDataContent,
    StringContent,
)

from .helpers import parse_multipart


class TestByteArrayContent(unittest.TestCase):
    def test_data(self) -> None:
        c = ByteArrayContent(bytearray(b"asd"))
        self.assertEqual(c.to_bytes(), b"asd")
        self.assertEqual(c.data, b"asd")
        self.assertEqual(len(c), 3)
        self.assertEqual(len(c.headers), 0)

    def test_repr(self) -> None:
        self.assertIn("data=b'asd'", repr(ByteArrayContent(b"asd")))
        self.assertIn("...'", repr(ByteArrayContent(b"a" * 100)))


class TestStringContent(unittest.TestCase):
    def test_no_media_type(self) -> None:
        c = StringContent("grüße")
        self.assertEqual(c.to_bytes(), "grüße".encode())
        self.assertEqual(c.text, "grüße")
        self.assertEqual(c.charset, "utf-8")
        self.assertNotIn("Content-Type", c.headers)

    def test_media_type(self) -> None:
        c = StringContent("grüße", "Latin-1", media_type="text/plain")
        self.assertEqual(c.to_bytes(), b"gr\xfc\xdfe")
        self.assertEqual(c.headers["Content-Type"], "text/plain; charset=iso-8859-1")


class TestFormUrlEncodedContent(unittest.TestCase):
    def test_pairs(self) -> None:
        c = FormUrlEncodedContent([("a", "1"), ("b", "x+y")])
        self.assertEqual(c.to_bytes(), b"a=1&b=x+y")
        self.assertEqual(c.pairs, [("a", "1"), ("b", "x+y")])
        self.assertEqual(c.headers["Content-Type"], "application/x-www-form-urlencoded")
        self.assertEqual(c.headers["Content-Length"], "9")

    def test_empty(self) -> None:
        c = FormUrlEncodedContent([])
        self.assertEqual(c.to_bytes(), b"")
        self.assertEqual(c.headers["Content-Length"], "0")


class TestMultipartFormDataContent(unittest.TestCase):
    def setUp(self) -> None:
        self.m = MultipartFormDataContent("boundary")

    def test_empty(self) -> None:
        self.assertEqual(self.m.to_bytes(), b"--boundary--\r\n")
        self.assertEqual(self.m.headers["Content-Type"], "multipart/form-data; boundary=boundary")
        self.assertEqual(self.m.headers["Content-Length"], "14")
        self.assertEqual(self.m.sections, [])

    def test_wire_format(self) -> None:
        f = ByteArrayContent(b"asd")
        f.headers.replace_without_validation("Content-Type", "text/plain")
        self.m.add(f, "file1", "filename.txt")
        self.m.add(StringContent("value1"), "param1")

        self.assertEqual(
            self.m.to_bytes(),
            b"--boundary\r\n"
            b'Content-Disposition: form-data; name="file1"; filename="filename.txt"\r\n'
            b"Content-Type: text/plain\r\n"
            b"\r\n"
            b"asd\r\n"
            b"--boundary\r\n"
            b'Content-Disposition: form-data; name="param1"\r\n'
            b"\r\n"
            b"value1\r\n"
            b"--boundary--\r\n",
        )
        self.assertEqual(self.m.headers["Content-Length"], str(len(self.m.to_bytes())))

    def test_parses_back(self) -> None:
        self.m.add(ByteArrayContent(b"\x00\r\n--bound\xff"), "bin", "bin.dat")
        self.m.add(StringContent("a b&c"), "text")
        self.assertEqual(
            parse_multipart(self.m),
            [
                {"name": "bin", "file_name": "bin.dat", "value": b"\x00\r\n--bound\xff"},
                {"name": "text", "value": b"a b&c"},
            ],
        )

    def test_quoted_names(self) -> None:
        section = self.m.add(StringContent("x"), 'my "field"', "C\\dir\\a.txt")
        self.assertEqual(
            section.content_disposition,
            'form-data; name="my %22field%22"; filename="C\\dir\\a.txt"',
        )

    def test_names_cannot_break_header_lines(self) -> None:
        self.m.add(ByteArrayContent(b"asd"), "f\r\nX-Injected: 1\r\nContent-Type: text/evil", "a\nb.txt")
        data = self.m.to_bytes()
        self.assertNotIn(b"\r\nX-Injected: 1\r\n", data)
        self.assertIn(b'name="f%0D%0AX-Injected: 1%0D%0AContent-Type: text/evil"; filename="a%0Ab.txt"', data)

        sections = parse_multipart(self.m)
        self.assertEqual(len(sections), 1)
        self.assertEqual(sections[0]["value"], b"asd")

    def test_section_headers(self) -> None:
        data = ByteArrayContent(b"x")
        data.headers.replace_without_validation("Content-Length", "1")
        section = self.m.add(data, "a")
        self.assertEqual(
            list(section.headers),
            [("Content-Disposition", 'form-data; name="a"'), ("Content-Length", "1")],
        )

    def test_iteration_order(self) -> None:
        for name in ("c", "a", "b"):
            self.m.add(StringContent(name), name)
        self.assertEqual([s.name for s in self.m], ["c", "a", "b"])

    def test_generated_boundary(self) -> None:
        m = MultipartFormDataContent()
        self.assertEqual(len(m.boundary), 32)
        self.assertEqual(m.headers["Content-Type"], f"multipart/form-data; boundary={m.boundary}")

    def test_invalid_boundary(self) -> None:
        for boundary in ("", "x" * 71, "trailing "):
            with self.assertRaises(ValueError):
                MultipartFormDataContent(boundary)

    def test_length_is_tracked_without_serialising(self) -> None:
        contents = [ByteArrayContent(bytes([i % 256]) * 1000) for i in range(300)]
        with patch.object(MultipartFormDataContent, "to_bytes", side_effect=AssertionError("serialised")) as to_bytes:
            for i, content in enumerate(contents):
                self.m.add(content, f"field{i}", f"file{i}.bin" if i % 2 else None)
            self.assertFalse(to_bytes.called)

        data = self.m.to_bytes()
        self.assertEqual(self.m.headers["Content-Length"], str(len(data)))
        self.assertEqual(len(self.m), len(data))
        self.assertEqual(len(parse_multipart(self.m)), 300)

    def test_length_with_nested_headers(self) -> None:
        c = StringContent("grüße", media_type="text/plain")
        self.m.add(c, "ünïcode name")
        self.assertEqual(self.m.headers["Content-Length"], str(len(self.m.to_bytes())))
