from __future__ import annotations

import os
from io import BytesIO
from typing import TYPE_CHECKING

import yaml
from python_multipart import parse_form

from rest_content import ContentCollectionMode, RestRequest

if TYPE_CHECKING:
    from typing import Any, TypedDict

    from rest_content.content import Content

    class RequestCase(TypedDict):
        name: str
        request: dict[str, Any]
        result: dict[str, Any]


curr_dir = os.path.abspath(os.path.dirname(__file__))
requests_dir = os.path.join(curr_dir, "test_data", "requests")


class FakeSerializer:
    """Serializes anything through ``repr``, so tests can spot it."""

    content_type = "application/x-test"

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def serialize(self, obj: Any) -> bytes:
        self.calls.append(obj)
        return repr(obj).encode("utf-8")


def parse_multipart(content: Content) -> list[dict[str, Any]]:
    """
    Feeds a multipart content through python-multipart and returns its
    sections as dicts, in wire order.
    """
    sections: list[dict[str, Any]] = []

    def on_field(field: Any) -> None:
        sections.append({"name": field.field_name.decode("utf-8"), "value": field.value})

    def on_file(file: Any) -> None:
        file.file_object.seek(0)
        sections.append(
            {
                "name": file.field_name.decode("utf-8"),
                "file_name": file.file_name.decode("utf-8"),
                "value": file.file_object.read(),
            }
        )

    data = content.to_bytes()
    headers = {"Content-Type": content.headers["Content-Type"], "Content-Length": str(len(data))}
    parse_form(headers, BytesIO(data), on_field, on_file)
    return sections


def build_request(case: dict[str, Any]) -> RestRequest:
    """Creates a request from the ``request`` mapping of a YAML test case."""
    mode = ContentCollectionMode(case.get("mode", "MultiPartForFileParameters"))
    request = RestRequest(case.get("method"), content_collection_mode=mode)
    if case.get("serializer"):
        request.serializer = FakeSerializer()

    for p in case.get("parameters", []):
        kind = p["type"]
        if kind == "form":
            request.add_parameter(p["name"], p.get("value"), content_type=p.get("content_type"), encoding=p.get("encoding"))
        elif kind == "query":
            request.add_query_parameter(p["name"], p.get("value"))
        elif kind == "file":
            request.add_file(p["name"], p["data"], p["file_name"], content_type=p.get("content_type"))
        elif kind == "body":
            request.add_body(p.get("value"), name=p.get("name"), content_type=p.get("content_type"), encoding=p.get("encoding"))
        elif kind == "header":
            request.add_header(p["name"], p["value"], validate_on_add=p.get("validate", True))
        else:
            raise ValueError("Unknown parameter type in test case: %r" % kind)
    return request


def load_request_cases() -> list[RequestCase]:
    cases: list[RequestCase] = []
    for f in sorted(os.listdir(requests_dir)):
        fname, ext = os.path.splitext(f)
        if ext != ".yaml":
            continue
        with open(os.path.join(requests_dir, f), "rb") as fh:
            data = yaml.safe_load(fh)
        cases.append({"name": fname, "request": data["request"], "result": data["result"]})
    return cases
