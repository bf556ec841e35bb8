import sys

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from rest_content.exceptions import HeaderFormatError
    from rest_content.headers import Headers, parse_options_header


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    name = fdp.PickValueInList(["Content-Type", "Content-Length", "Content-Disposition", "Content-Language"])
    value = fdp.ConsumeRandomString()

    try:
        parse_options_header(value)
    except AssertionError:
        return
    except TypeError:
        return

    headers = Headers()
    try:
        headers.add(name, value)
    except HeaderFormatError:
        assert name not in headers
        return
    assert headers.get(name) == value


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
