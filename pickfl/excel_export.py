"""Export a week's picks and fantasy leaderboard to an Excel workbook."""

import logging
from pathlib import Path
from typing import Any, Sequence

import openpyxl
from openpyxl.styles import Font

from .constants import LINEUP_SLOTS

logger = logging.getLogger('pickfl.excel_export')

RESPONSES_SHEET = 'Responses'
FANTASY_SHEET = 'Fantasy'


def format_answer(answer: Any) -> Any:
    """Cell value for an answer; several accepted answers are joined with ' / '."""
    if answer is None:
        return None
    if isinstance(answer, (list, tuple)):
        return ' / '.join(str(a) for a in answer)
    return answer


def _reset_sheet(wb: openpyxl.Workbook, sheet_name: str):
    if sheet_name in wb.sheetnames:
        ws = wb[sheet_name]
        ws.delete_rows(1, ws.max_row)
    else:
        ws = wb.create_sheet(sheet_name)
    return ws


def write_responses_sheet(
    ws,
    header: Sequence[str],
    rows: Sequence[Sequence[Any]],
    correct_answers: Sequence[Any],
) -> None:
    """
    Fill a sheet with one row per user and one column per question.

    Row 1 holds the headers and row 2 the correct answers (bold); user rows
    follow from row 3.
    """
    for col, title in enumerate(header, start=1):
        ws.cell(row=1, column=col, value=title).font = Font(bold=True)

    ws.cell(row=2, column=1, value='Correct Answer').font = Font(bold=True)
    for col, answer in enumerate(correct_answers, start=2):
        ws.cell(row=2, column=col, value=format_answer(answer)).font = Font(bold=True)

    for row_idx, row in enumerate(rows, start=3):
        for col, value in enumerate(row, start=1):
            ws.cell(row=row_idx, column=col, value=format_answer(value))


def write_fantasy_sheet(ws, leaderboard: Sequence[dict]) -> None:
    """Fill a sheet with the ranked lineups: rank, user, points, then the nine slots."""
    columns = ['Rank', 'Username', 'Points'] + list(LINEUP_SLOTS)
    for col, title in enumerate(columns, start=1):
        ws.cell(row=1, column=col, value=title).font = Font(bold=True)

    for row_idx, entry in enumerate(leaderboard, start=2):
        ws.cell(row=row_idx, column=1, value=entry['rank'])
        ws.cell(row=row_idx, column=2, value=entry['username'])
        ws.cell(row=row_idx, column=3, value=round(entry['total_points'], 2))
        for col, slot in enumerate(LINEUP_SLOTS, start=4):
            ws.cell(row=row_idx, column=col, value=entry.get(slot))


def export_week_workbook(
    excel_path: str | Path,
    header: Sequence[str],
    rows: Sequence[Sequence[Any]],
    correct_answers: Sequence[Any],
    leaderboard: Sequence[dict],
) -> Path:
    """
    Write a week's Responses and Fantasy sheets.

    An existing workbook is updated in place: both sheets are cleared and
    rewritten, other sheets are left alone.

    Args:
        excel_path: Workbook to create or update
        header: 'Username' followed by the question texts
        rows: One row per user (username followed by answers)
        correct_answers: Correct answer per question
        leaderboard: Ranked lineup dicts (see LeagueService.leaderboard)

    Returns:
        Path of the saved workbook
    """
    excel_path = Path(excel_path)

    if excel_path.exists():
        wb = openpyxl.load_workbook(str(excel_path))
    else:
        excel_path.parent.mkdir(parents=True, exist_ok=True)
        wb = openpyxl.Workbook()
        wb.active.title = RESPONSES_SHEET

    write_responses_sheet(_reset_sheet(wb, RESPONSES_SHEET), header, rows, correct_answers)
    write_fantasy_sheet(_reset_sheet(wb, FANTASY_SHEET), leaderboard)

    wb.save(str(excel_path))
    wb.close()

    logger.info(f'Exported {len(rows)} responses and {len(leaderboard)} lineups to {excel_path}')
    return excel_path
