from typing import List
import logging
from constants import SHEET_HEADER, SHEET_LAST_COLUMN
from slots import Slot

logger = logging.getLogger(__name__)


def _a1(sheet_name: str, cells: str) -> str:
    """A1 range on a named tab; quotes in the name are doubled"""
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{cells}"


def slot_row(slot: Slot) -> List[str]:
    """Row for one slot: 'HH:MM - HH:MM', title, then the four links"""
    time_range = f'{slot.start[11:16]} - {slot.end[11:16]}'
    return [time_range, slot.title] + slot.links


class GoogleSheetsMirror:
    """Mirrors a day's slots into one tab per sheet name of a spreadsheet"""

    def __init__(self, spreadsheet_id: str, service=None):
        self.spreadsheet_id = spreadsheet_id
        self.service = service

    def _sheet_titles(self) -> List[str]:
        spreadsheet = self.service.spreadsheets().get(
            spreadsheetId=self.spreadsheet_id,
            fields='sheets.properties.title'
        ).execute()
        return [sheet['properties']['title'] for sheet in spreadsheet.get('sheets', [])]

    def ensure_sheet(self, sheet_name: str) -> None:
        """Create the tab if missing and make sure row 1 is the expected header"""
        if sheet_name not in self._sheet_titles():
            logger.info("Creating sheet %s", sheet_name)
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={'requests': [{'addSheet': {'properties': {'title': sheet_name}}}]}
            ).execute()

        header_range = _a1(sheet_name, f'A1:{SHEET_LAST_COLUMN}1')
        result = self.service.spreadsheets().values().get(
            spreadsheetId=self.spreadsheet_id,
            range=header_range
        ).execute()
        rows = result.get('values', [])
        if not rows or rows[0] != SHEET_HEADER:
            logger.info("Writing header row to sheet %s", sheet_name)
            self.service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=header_range,
                valueInputOption='RAW',
                body={'values': [SHEET_HEADER]}
            ).execute()

    def write_slots(self, sheet_name: str, slots: List[Slot]) -> int:
        """Replace every row below the header with one row per slot. Returns rows written."""
        self.ensure_sheet(sheet_name)
        self._clear_rows(sheet_name)
        if not slots:
            return 0
        rows = [slot_row(slot) for slot in slots]
        self.service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=_a1(sheet_name, f'A2:{SHEET_LAST_COLUMN}{len(rows) + 1}'),
            valueInputOption='RAW',
            body={'values': rows}
        ).execute()
        logger.info("Wrote %s rows to sheet %s", len(rows), sheet_name)
        return len(rows)

    def _clear_rows(self, sheet_name: str) -> None:
        self.service.spreadsheets().values().clear(
            spreadsheetId=self.spreadsheet_id,
            range=_a1(sheet_name, f'A2:{SHEET_LAST_COLUMN}'),
            body={}
        ).execute()

    def clear_slots(self, sheet_name: str) -> None:
        """Clear every row below the header; the header stays"""
        self.ensure_sheet(sheet_name)
        self._clear_rows(sheet_name)
        logger.info("Cleared rows of sheet %s", sheet_name)
