from __future__ import annotations

import codecs
from pathlib import Path
from typing import Protocol, Tuple


# Longest BOMs first: the UTF-32 LE mark starts with the UTF-16 LE mark.
_BOMS: Tuple[Tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

DEFAULT_ENCODING = "cp1252"

UNDEFINED_BYTES = "markupgen-undefined-bytes"


def _pass_through_undefined(exc: UnicodeError) -> Tuple[str, int]:
    # Bytes the code page leaves unassigned (0x81, 0x8D, 0x8F, 0x90, 0x9D in
    # cp1252) decode to the C1 control with the same value.
    if not isinstance(exc, UnicodeDecodeError):
        raise exc
    bad = exc.object[exc.start:exc.end]
    return "".join(chr(b) for b in bad), exc.end


codecs.register_error(UNDEFINED_BYTES, _pass_through_undefined)


def decode_source(raw: bytes, default_encoding: str = DEFAULT_ENCODING) -> str:
    """Decode template bytes, honouring a byte-order mark when one is present."""
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return raw[len(bom):].decode(encoding)
    return raw.decode(default_encoding, errors=UNDEFINED_BYTES)


class UnknownEncodingError(LookupError):
    pass


class SourceReader(Protocol):
    def read(self, path: str) -> str:
        ...


class FileSourceReader:
    def __init__(self, default_encoding: str = DEFAULT_ENCODING):
        try:
            codecs.lookup(default_encoding)
        except LookupError:
            raise UnknownEncodingError(f"Unknown source encoding: {default_encoding!r}") from None
        self.default_encoding = default_encoding

    def read(self, path: str) -> str:
        return decode_source(Path(path).read_bytes(), self.default_encoding)


class InlineSourceReader:
    """Serves template text that is already in memory (API requests, tests)."""

    def __init__(self, text: str):
        self.text = text

    def read(self, path: str) -> str:
        return self.text
