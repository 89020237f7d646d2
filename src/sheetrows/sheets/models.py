"""Data models for Google Sheets operations."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

SUCCESS_CODES = (200, 201, 202)


class TablePosition(BaseModel):
    """Top-left cell of a logical table, e.g. ``A:1``."""

    letter: str
    number: int = Field(ge=1)

    @field_validator("letter")
    @classmethod
    def _uppercase_letter(cls, value: str) -> str:
        if not value or not value.isascii() or not value.isalpha():
            raise ValueError(f"Invalid column letter: {value!r}")
        return value.upper()

    @property
    def cell(self) -> str:
        """A1 notation of the position, e.g. ``A1``."""
        return f"{self.letter}{self.number}"

    def __str__(self) -> str:
        return f"{self.letter}:{self.number}"


class TableRegion(BaseModel):
    """Rectangular bound of a table: header row plus body.

    ``end_letter`` is the last header column and ``end_row_number`` the last
    populated row (the header row itself when the table has no body).
    """

    start: TablePosition
    end_letter: str
    end_row_number: int

    @property
    def body_row_count(self) -> int:
        return max(self.end_row_number - self.start.number, 0)

    def header_range(self, sheet_name: str) -> str:
        row = self.start.number
        return f"{sheet_name}!{self.start.letter}{row}:{self.end_letter}{row}"

    def body_range(self, sheet_name: str) -> str:
        return (
            f"{sheet_name}!{self.start.letter}{self.start.number + 1}:"
            f"{self.end_letter}{self.end_row_number}"
        )


class SheetInfo(BaseModel):
    """A sheet (tab) inside a spreadsheet."""

    name: str
    id: int
    index: int = 0


class ValueRange(BaseModel):
    """Rows destined for a single A1 range."""

    range: str
    values: list[list[Any]] = Field(default_factory=list)


class DeleteRange(BaseModel):
    """A row span to delete, in 0-based, end-exclusive grid indices."""

    sheet_id: int
    start_row_index: int = Field(ge=0)
    end_row_index: int = Field(ge=0)
    start_column_index: int = Field(ge=0)
    end_column_index: int = Field(ge=0)

    def to_request(self) -> dict:
        """Render the ``deleteRange`` request body used by ``spreadsheets.batchUpdate``."""
        return {
            "deleteRange": {
                "shiftDimension": "ROWS",
                "range": {
                    "sheetId": self.sheet_id,
                    "startRowIndex": self.start_row_index,
                    "endRowIndex": self.end_row_index,
                    "startColumnIndex": self.start_column_index,
                    "endColumnIndex": self.end_column_index,
                },
            }
        }


class WriteResult(BaseModel):
    """Result of a write against the value store."""

    status: int = 200
    updated_cells: int = 0
    updated_range: Optional[str] = None
    details: list[dict] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status in SUCCESS_CODES
