import atheris

from rest_content.parameters import BodyParameter, FileParameter, FormParameter, QueryParameter

CHARSETS = ["utf-8", "latin-1", "utf-16", "ascii"]


class EnhancedDataProvider(atheris.FuzzedDataProvider):
    def ConsumeRandomBytes(self) -> bytes:
        return self.ConsumeBytes(self.ConsumeIntInRange(0, self.remaining_bytes()))

    def ConsumeRandomString(self) -> str:
        return self.ConsumeUnicodeNoSurrogates(self.ConsumeIntInRange(0, self.remaining_bytes()))

    def ConsumeShortString(self) -> str:
        return self.ConsumeUnicodeNoSurrogates(self.ConsumeIntInRange(0, 32))

    def ConsumeValue(self):
        kind = self.ConsumeIntInRange(0, 3)
        if kind == 0:
            return None
        if kind == 1:
            return self.ConsumeShortString()
        if kind == 2:
            return self.ConsumeBytes(self.ConsumeIntInRange(0, 32))
        return self.ConsumeInt(4)

    def ConsumeParameter(self):
        kind = self.ConsumeIntInRange(0, 3)
        if kind == 0:
            return FormParameter(self.ConsumeShortString(), self.ConsumeValue(), encoding=self.PickValueInList(CHARSETS))
        if kind == 1:
            return QueryParameter(self.ConsumeShortString(), self.ConsumeValue())
        if kind == 2:
            return FileParameter(self.ConsumeShortString(), self.ConsumeBytes(32), self.ConsumeShortString())
        return BodyParameter(self.ConsumeValue(), name=self.ConsumeShortString() or None)
