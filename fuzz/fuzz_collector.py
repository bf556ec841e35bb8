import sys
from io import BytesIO
from unittest.mock import Mock

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from python_multipart import parse_form

    from rest_content.collector import ContentCollectionMode
    from rest_content.content import MultipartFormDataContent
    from rest_content.exceptions import ContentError
    from rest_content.request import RestRequest

on_field = Mock()
on_file = Mock()


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    request = RestRequest(
        fdp.PickValueInList(["GET", "POST", "PUT", None]),
        content_collection_mode=fdp.PickValueInList(list(ContentCollectionMode)),
    )
    for _ in range(fdp.ConsumeIntInRange(0, 8)):
        request.add(fdp.ConsumeParameter())

    try:
        content = request.get_content()
    except ContentError:
        return
    except UnicodeError:
        return

    if isinstance(content, MultipartFormDataContent):
        body = content.to_bytes()
        headers = {"Content-Type": content.headers["Content-Type"], "Content-Length": str(len(body))}
        parse_form(headers, BytesIO(body), on_field, on_file)


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
