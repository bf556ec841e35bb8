import sys
from urllib.parse import unquote_to_bytes

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from rest_content.encoding import encode_parameter
    from rest_content.parameters import FormParameter


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    value = fdp.ConsumeRandomBytes()
    space_as_plus = fdp.ConsumeBool()

    encoded = encode_parameter(FormParameter("a", value), space_as_plus=space_as_plus)

    if space_as_plus:
        encoded = encoded.replace("+", "%20")
    assert unquote_to_bytes(encoded) == value


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
