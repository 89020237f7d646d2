"""Column letter and table position arithmetic.

Two numeric encodings of a column letter are used and must not be mixed:

* ``letter_to_index`` is the zero-based grid index (A=0, Z=25, AA=26) that
  the Sheets API expects in ``startColumnIndex`` / ``endColumnIndex``.
* ``letter_to_number`` is the bijective base-26 value (A=1, Z=26, AA=27)
  that the increment and addition helpers move through.
"""

import re

from .exceptions import AddressParseError
from .sheets.models import TablePosition

_LETTERS_RE = re.compile(r"[A-Za-z]+")
_ROW_RE = re.compile(r"[0-9]+")


def _normalize(letter: str) -> str:
    if not letter or not _LETTERS_RE.fullmatch(letter):
        raise ValueError(f"Invalid column letter: {letter!r}")
    return letter.upper()


def letter_to_number(letter: str) -> int:
    """Convert column letter(s) to the bijective base-26 value. A=1, Z=26, AA=27."""
    result = 0
    for char in _normalize(letter):
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result


def letter_to_index(letter: str) -> int:
    """Convert column letter(s) to a 0-based grid index. A=0, Z=25, AA=26."""
    return letter_to_number(letter) - 1


def number_to_letter(number: int) -> str:
    """Convert a bijective base-26 value back to column letter(s)."""
    if number < 1:
        raise ValueError(f"Column number must be >= 1, got {number}")
    result = ""
    while number > 0:
        number -= 1
        result = chr(ord("A") + (number % 26)) + result
        number //= 26
    return result


def increment_letter(letter: str) -> str:
    """Return the next column letter: A -> B, Z -> AA, AZ -> BA, ZZ -> AAA."""
    chars = list(_normalize(letter))
    i = len(chars) - 1
    while i >= 0:
        if chars[i] == "Z":
            chars[i] = "A"
            i -= 1
        else:
            chars[i] = chr(ord(chars[i]) + 1)
            return "".join(chars)
    # Every character carried over.
    return "A" + "".join(chars)


def decrement_letter(letter: str) -> str:
    """Return the previous column letter. A has no predecessor."""
    return number_to_letter(letter_to_number(letter) - 1)


def add_letters(letter: str, count: int = 1) -> str:
    """Advance a column letter by ``count`` columns: (A, 2) -> C, (AA, 2) -> AC."""
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    letter = _normalize(letter)
    for _ in range(count):
        letter = increment_letter(letter)
    return letter


def parse_position(position: str) -> TablePosition:
    """Parse a ``"LETTER:NUMBER"`` string such as ``"B:4"`` into a TablePosition."""
    if not isinstance(position, str) or ":" not in position:
        raise AddressParseError(str(position), "expected LETTER:NUMBER")

    letter, _, number = position.partition(":")
    letter = letter.strip()
    number = number.strip()

    if not letter or not _LETTERS_RE.fullmatch(letter):
        raise AddressParseError(position, "column must be one or more letters A-Z")
    if not _ROW_RE.fullmatch(number) or int(number) < 1:
        raise AddressParseError(position, "row must be a positive integer")

    return TablePosition(letter=letter.upper(), number=int(number))


def format_cell(sheet_name: str, letter: str, row: int) -> str:
    """Render a single-cell range, e.g. ``Sheet1!A1``."""
    return f"{sheet_name}!{letter}{row}"


def format_range(
    sheet_name: str,
    start_letter: str,
    start_row: int,
    end_letter: str,
    end_row: int,
) -> str:
    """Render a rectangular range, e.g. ``Sheet1!A2:C10``."""
    return f"{sheet_name}!{start_letter}{start_row}:{end_letter}{end_row}"
