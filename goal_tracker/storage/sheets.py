"""Google Sheets backend built on gspread."""
import asyncio
import logging
from typing import Optional

import gspread
from google.auth.exceptions import GoogleAuthError
from gspread.exceptions import GSpreadException, WorksheetNotFound
from gspread.utils import rowcol_to_a1

from goal_tracker.errors import BackendUnavailableError
from goal_tracker.storage.backend import TabularBackend
from goal_tracker.storage.schema import TableSchema


logger = logging.getLogger(__name__)

NEW_SHEET_ROWS = 1000


class SheetsBackend(TabularBackend):
    """
    One worksheet per logical table inside a single spreadsheet.

    gspread is synchronous, so every request runs in a worker thread. Any
    gspread, google-auth or transport failure surfaces as
    BackendUnavailableError; nothing is retried here.
    """

    durable = True

    def __init__(
        self,
        client: gspread.Client,
        spreadsheet_id: str,
        sheet_titles: Optional[dict[str, str]] = None,
    ):
        """
        Initialize backend.

        Args:
            client: Authorized gspread client
            spreadsheet_id: Key of the spreadsheet holding every table
            sheet_titles: Worksheet title per table name; defaults to the table name
        """
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.sheet_titles = dict(sheet_titles or {})
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._worksheets: dict[str, gspread.Worksheet] = {}
        self._ensured: set[str] = set()

    def title_for(self, schema: TableSchema) -> str:
        return self.sheet_titles.get(schema.name, schema.name)

    async def _call(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except (GSpreadException, GoogleAuthError, OSError) as e:
            raise BackendUnavailableError(f"Google Sheets request failed: {e}") from e

    def _open(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            self._spreadsheet = self.client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def _worksheet(self, schema: TableSchema) -> gspread.Worksheet:
        title = self.title_for(schema)
        worksheet = self._worksheets.get(title)
        if worksheet is None:
            worksheet = self._open().worksheet(title)
            self._worksheets[title] = worksheet
        return worksheet

    def _ensure_table(self, schema: TableSchema) -> None:
        spreadsheet = self._open()
        title = self.title_for(schema)

        try:
            worksheet = spreadsheet.worksheet(title)
        except WorksheetNotFound:
            logger.info("Creating sheet %s", title)
            worksheet = spreadsheet.add_worksheet(
                title=title,
                rows=NEW_SHEET_ROWS,
                cols=schema.width,
            )
        self._worksheets[title] = worksheet

        headers = list(schema.headers)
        first_row = worksheet.row_values(1)
        if first_row == headers:
            return

        # Blank out stale cells past the canonical width so the whole row matches.
        width = max(len(first_row), schema.width)
        values = headers + [""] * (width - schema.width)
        logger.info("Rewriting header row of sheet %s", title)
        worksheet.update(
            range_name=f"A1:{rowcol_to_a1(1, width)}",
            values=[values],
            value_input_option="RAW",
        )

    async def ensure_table(self, schema: TableSchema) -> None:
        if schema.name in self._ensured:
            return
        await self._call(self._ensure_table, schema)
        self._ensured.add(schema.name)

    def _read_rows(self, schema: TableSchema) -> list[list[str]]:
        try:
            worksheet = self._worksheet(schema)
        except WorksheetNotFound:
            # Nothing has been written to this table yet.
            return []
        values = worksheet.get(schema.data_range)
        return [[str(cell) for cell in row] for row in values]

    async def read_rows(self, schema: TableSchema) -> list[list[str]]:
        return await self._call(self._read_rows, schema)

    def _append_row(self, schema: TableSchema, row: list[str]) -> None:
        self._worksheet(schema).append_row(
            row,
            value_input_option="RAW",
            insert_data_option="INSERT_ROWS",
            table_range="A1",
        )

    async def append_row(self, schema: TableSchema, row: list[str]) -> None:
        await self._call(self._append_row, schema, row)

    def _update_row(self, schema: TableSchema, index: int, row: list[str]) -> None:
        # Data row 0 sits on sheet row 2, under the header.
        self._worksheet(schema).update(
            range_name=schema.row_range(index + 2),
            values=[row],
            value_input_option="RAW",
        )

    async def update_row(self, schema: TableSchema, index: int, row: list[str]) -> None:
        await self._call(self._update_row, schema, index, row)
