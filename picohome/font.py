"""Bitmap fonts for the SSD1306 display.

Each glyph is eight column bytes; bit ``j`` of column ``i`` is the pixel at
``(i, j)`` relative to the glyph's top-left corner.
"""

from __future__ import annotations

_BLANK = bytes(8)

# Full printable ASCII font, from ' ' (0x20) to '~' (0x7E).
_ASCII_FONT: tuple[bytes, ...] = tuple(
    bytes.fromhex(row)
    for row in (
        "00 00 00 00 00 00 00 00",  # ' '
        "00 00 00 5F 5F 00 00 00",  # !
        "00 07 07 00 07 07 00 00",  # "
        "14 7F 7F 14 7F 7F 14 00",  # #
        "24 2E 2A 6B 6B 3A 12 00",  # $
        "46 66 30 18 0C 66 62 00",  # %
        "30 7A 4F 5D 37 7A 48 00",  # &
        "00 04 07 03 00 00 00 00",  # '
        "00 00 1C 3E 63 41 00 00",  # (
        "00 00 41 63 3E 1C 00 00",  # )
        "08 2A 3E 1C 1C 3E 2A 08",  # *
        "00 08 08 3E 3E 08 08 00",  # +
        "00 00 80 E0 60 00 00 00",  # ,
        "00 08 08 08 08 08 08 00",  # -
        "00 00 00 60 60 00 00 00",  # .
        "60 30 18 0C 06 03 01 00",  # /
        "3E 7F 59 4D 47 7F 3E 00",  # 0
        "00 40 42 7F 7F 40 40 00",  # 1
        "72 7B 49 49 49 4F 46 00",  # 2
        "41 41 49 49 49 7F 36 00",  # 3
        "1E 1E 10 10 7F 7F 10 00",  # 4
        "27 67 45 45 45 7D 39 00",  # 5
        "3E 7F 49 49 49 79 30 00",  # 6
        "01 01 61 71 19 0F 07 00",  # 7
        "36 7F 49 49 49 7F 36 00",  # 8
        "06 4F 49 49 49 7F 3E 00",  # 9
        "00 00 00 66 66 00 00 00",  # :
        "00 00 80 E6 66 00 00 00",  # ;
        "00 08 1C 36 63 41 00 00",  # <
        "00 14 14 14 14 14 14 00",  # =
        "00 00 41 63 36 1C 08 00",  # >
        "00 02 03 59 5D 07 02 00",  # ?
        "3E 7F 41 5D 5D 5F 5E 00",  # @
        "7C 7E 13 11 13 7E 7C 00",  # A
        "7F 7F 49 49 49 7F 36 00",  # B
        "3E 7F 41 41 41 63 22 00",  # C
        "7F 7F 41 41 63 3E 1C 00",  # D
        "7F 7F 49 49 49 41 41 00",  # E
        "7F 7F 09 09 09 01 01 00",  # F
        "3E 7F 41 41 51 73 32 00",  # G
        "7F 7F 08 08 08 7F 7F 00",  # H
        "00 41 41 7F 7F 41 41 00",  # I
        "20 60 40 40 40 7F 3F 00",  # J
        "7F 7F 08 1C 36 63 41 00",  # K
        "7F 7F 40 40 40 40 40 00",  # L
        "7F 7F 0E 1C 0E 7F 7F 00",  # M
        "7F 7F 06 0C 18 7F 7F 00",  # N
        "3E 7F 41 41 41 7F 3E 00",  # O
        "7F 7F 09 09 09 0F 06 00",  # P
        "3E 7F 41 71 61 FF BE 00",  # Q
        "7F 7F 09 19 39 6F 46 00",  # R
        "26 6F 49 49 49 7B 32 00",  # S
        "01 01 01 7F 7F 01 01 01",  # T
        "7F 7F 40 40 40 7F 7F 00",  # U
        "1F 3F 60 60 60 3F 1F 00",  # V
        "3F 7F 60 30 60 7F 3F 00",  # W
        "63 77 1C 08 1C 77 63 00",  # X
        "47 4F 68 38 18 0F 07 00",  # Y
        "41 61 71 59 4D 47 43 00",  # Z
        "00 00 7F 7F 41 41 00 00",  # [
        "01 03 06 0C 18 30 60 00",  # backslash
        "00 00 41 41 7F 7F 00 00",  # ]
        "08 0C 06 03 06 0C 08 00",  # ^
        "80 80 80 80 80 80 80 80",  # _
        "00 00 00 03 07 04 00 00",  # `
        "20 74 54 54 54 7C 78 00",  # a
        "7F 7F 48 48 48 78 30 00",  # b
        "38 7C 44 44 44 6C 28 00",  # c
        "30 78 48 48 48 7F 7F 00",  # d
        "38 7C 54 54 54 5C 18 00",  # e
        "00 48 7E 7F 49 03 02 00",  # f
        "98 BC A4 A4 A4 FC 7C 00",  # g
        "7F 7F 04 04 04 7C 78 00",  # h
        "00 00 44 7D 7D 40 00 00",  # i
        "40 C0 80 80 80 FD 7D 00",  # j
        "7F 7F 10 18 3C 64 40 00",  # k
        "00 00 41 7F 7F 40 00 00",  # l
        "7C 7C 18 78 1C 7C 78 00",  # m
        "7C 7C 04 04 04 7C 78 00",  # n
        "38 7C 44 44 44 7C 38 00",  # o
        "FC FC 24 24 24 3C 18 00",  # p
        "18 3C 24 24 24 FC FC 00",  # q
        "7C 7C 04 04 04 0C 08 00",  # r
        "48 5C 54 54 54 74 24 00",  # s
        "00 04 04 3F 7F 44 44 00",  # t
        "3C 7C 40 40 40 7C 7C 00",  # u
        "1C 3C 60 60 60 3C 1C 00",  # v
        "3C 7C 60 30 60 7C 3C 00",  # w
        "44 6C 38 10 38 6C 44 00",  # x
        "9C BC A0 A0 A0 FC 7C 00",  # y
        "44 64 74 54 5C 4C 44 00",  # z
        "00 08 08 3E 77 41 41 00",  # {
        "00 00 00 77 77 00 00 00",  # |
        "00 41 41 77 3E 08 08 00",  # }
        "02 03 01 03 02 03 01 00",  # ~
    )
)

# Thin digits and capitals of the compact font; its lowercase letters are
# the same as those of the ASCII font.
_COMPACT_DIGITS: tuple[bytes, ...] = tuple(
    bytes.fromhex(row)
    for row in (
        "3e 41 41 49 41 41 3e 00",  # 0
        "00 00 42 7f 40 00 00 00",  # 1
        "30 49 49 49 49 46 00 00",  # 2
        "49 49 49 49 49 49 36 00",  # 3
        "3f 20 20 78 20 20 00 00",  # 4
        "4f 49 49 49 49 30 00 00",  # 5
        "3f 48 48 48 48 48 30 00",  # 6
        "01 01 01 61 31 0d 03 00",  # 7
        "36 49 49 49 49 49 36 00",  # 8
        "06 09 09 09 09 09 7f 00",  # 9
    )
)

_COMPACT_UPPER: tuple[bytes, ...] = tuple(
    bytes.fromhex(row)
    for row in (
        "78 14 12 11 12 14 78 00",  # A
        "7f 49 49 49 49 49 7f 00",  # B
        "7e 41 41 41 41 41 41 00",  # C
        "7f 41 41 41 41 41 7e 00",  # D
        "7f 49 49 49 49 49 49 00",  # E
        "7f 09 09 09 09 01 01 00",  # F
        "7f 41 41 41 51 51 73 00",  # G
        "7f 08 08 08 08 08 7f 00",  # H
        "00 00 00 7f 00 00 00 00",  # I
        "21 41 41 3f 01 01 01 00",  # J
        "00 7f 08 08 14 22 41 00",  # K
        "7f 40 40 40 40 40 40 00",  # L
        "7f 02 04 08 04 02 7f 00",  # M
        "7f 02 04 08 10 20 7f 00",  # N
        "3e 41 41 41 41 41 3e 00",  # O
        "7f 11 11 11 11 11 0e 00",  # P
        "3e 41 41 49 51 61 7e 00",  # Q
        "7f 11 11 11 31 51 0e 00",  # R
        "46 49 49 49 49 30 00 00",  # S
        "01 01 01 7f 01 01 01 00",  # T
        "3f 40 40 40 40 40 3f 00",  # U
        "0f 10 20 40 20 10 0f 00",  # V
        "7f 20 10 08 10 20 7f 00",  # W
        "00 41 22 14 14 22 41 00",  # X
        "01 02 04 78 04 02 01 00",  # Y
        "41 61 59 45 43 41 00 00",  # Z
    )
)


def _check_char(char: str) -> str:
    if not isinstance(char, str):
        raise TypeError(f"expected a one-character string, got {type(char).__name__}")
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")
    return char


def compact_glyph(char: str) -> bytes:
    """Glyph of the compact font; characters other than letters and digits are blank."""
    _check_char(char)
    if "A" <= char <= "Z":
        return _COMPACT_UPPER[ord(char) - ord("A")]
    if "0" <= char <= "9":
        return _COMPACT_DIGITS[ord(char) - ord("0")]
    if "a" <= char <= "z":
        return _ASCII_FONT[ord(char) - ord(" ")]
    return _BLANK


def ascii_glyph(char: str) -> bytes:
    """Glyph of the printable-ASCII font; other characters map to the blank space glyph."""
    _check_char(char)
    if " " <= char <= "~":
        return _ASCII_FONT[ord(char) - ord(" ")]
    return _ASCII_FONT[0]