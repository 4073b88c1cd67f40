"""Text helpers for DataVolley scouting files."""

from __future__ import annotations

from typing import List

DEFAULT_ENCODING = "cp1252"

# A UTF-8 byte order mark as read by a UTF codec and by cp1252.
BYTE_ORDER_MARKS = ("\ufeff", "\u00ef\u00bb\u00bf")

# DVW files written on Turkish systems store their letters in the cp1254 slots,
# which a cp1252 decode turns into Icelandic look-alikes.
SPECIAL_CHARACTER_TRANSLATION = str.maketrans(
    {
        "Ý": "İ",
        "Ð": "Ğ",
        "Þ": "Ş",
        "ý": "ı",
        "ð": "ğ",
        "þ": "ş",
    }
)


def fix_special_characters(text: str) -> str:
    return text.translate(SPECIAL_CHARACTER_TRANSLATION)


def decode_dvw_bytes(data: bytes, *, encoding: str = DEFAULT_ENCODING) -> str:
    """Decode raw file content and normalize legacy characters.

    ``cp1252`` leaves five byte values undefined; they are replaced instead of
    failing the whole file.
    """

    text = data.decode(encoding, errors="replace")
    for mark in BYTE_ORDER_MARKS:
        if text.startswith(mark):
            text = text[len(mark):]
            break
    return fix_special_characters(text)


def split_lines(text: str) -> List[str]:
    """Split on LF or CRLF, dropping the carriage return of each line."""

    return [line.rstrip("\r") for line in text.split("\n")]


__all__ = [
    "BYTE_ORDER_MARKS",
    "DEFAULT_ENCODING",
    "SPECIAL_CHARACTER_TRANSLATION",
    "decode_dvw_bytes",
    "fix_special_characters",
    "split_lines",
]
