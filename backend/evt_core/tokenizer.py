from __future__ import annotations

import codecs
import re
from pathlib import Path
from typing import Iterator, List, Optional

_INT_RE = re.compile(r"^[+-]?\d+$", re.ASCII)
_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def split_fields(line: str) -> List[str]:
    """Split one CSV line into trimmed fields.

    Quotes toggle quoted mode, a doubled quote inside quoted mode is a literal
    quote and commas only separate fields outside quotes. An unterminated quote
    runs to the end of the line.
    """

    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    idx = 0
    length = len(line)
    while idx < length:
        char = line[idx]
        if char == '"':
            if in_quotes and idx + 1 < length and line[idx + 1] == '"':
                current.append('"')
                idx += 2
                continue
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        idx += 1
    fields.append("".join(current).strip())
    return fields


def iter_rows(text: str) -> Iterator[List[str]]:
    for line in text.splitlines():
        yield split_fields(line)


def decode_text(data: bytes) -> str:
    if data.startswith(codecs.BOM_UTF8):
        return data.decode("utf-8-sig", errors="replace")
    if data.startswith(codecs.BOM_UTF16_LE) or data.startswith(codecs.BOM_UTF16_BE):
        return data.decode("utf-16", errors="replace")
    return data.decode("utf-8", errors="replace")


def read_text(path: Path) -> str:
    """Read a whole file, honouring a byte-order mark when one is present."""

    with path.open("rb") as handle:
        return decode_text(handle.read())


def parse_int(value: str | None) -> Optional[int]:
    if value is None:
        return None
    text = value.strip()
    if not _INT_RE.match(text):
        return None
    return int(text)


def parse_number(value: str | None) -> Optional[float]:
    if value is None:
        return None
    text = value.strip()
    if not _NUMBER_RE.match(text):
        return None
    return float(text)
