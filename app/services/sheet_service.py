import asyncio
from dataclasses import replace
from datetime import datetime

import gspread
from google.auth.exceptions import GoogleAuthError
from loguru import logger

from app.core.config import settings
from app.models.records import TaskRecord, TransactionRecord
from app.utils.dates import format_vi_date, local_now

# API errors and credential problems both end in a "save failed" reply
SHEET_ERRORS = (gspread.exceptions.GSpreadException, GoogleAuthError, OSError, ValueError)

TRANSACTION_COLUMNS = [
    "Date", "Category", "Description", "Amount", "Type", "ReceiptLink",
    "Timestamp", "Subcategory", "Quantity", "PaymentMethod", "Note",
]
TASK_COLUMNS = [
    "SequenceNumber", "TaskName", "Description", "StartTime",
    "Deadline", "ProgressPercent", "Status", "Notes",
]


def transaction_row(record: TransactionRecord, *, username: str, user_id: int,
                    receipt_url: str | None = None, now: datetime | None = None) -> list:
    now = now or local_now()
    return [
        format_vi_date(record.occurred_on),
        record.category,
        record.description,
        record.amount,
        record.type.value,
        receipt_url or "",
        now.isoformat(),
        record.subcategory,
        record.quantity,
        record.payment_method.value,
        f"{username} ({user_id})",
    ]


def task_row(task: TaskRecord, started_at: datetime) -> list:
    return [
        task.sequence_number,
        task.name,
        task.description,
        started_at.strftime("%d/%m/%Y %H:%M"),
        task.deadline,
        0,
        task.status,
        task.notes,
    ]


class SheetService:
    """
    Append-only access to the ledger and task spreadsheets.

    gspread is blocking, so every call runs in a worker thread. Write failures
    are logged and reported as a falsy result; the caller tells the user.
    """

    def __init__(self, client: gspread.Client | None = None, *, sheet_id: str | None = None,
                 task_sheet_id: str | None = None, task_worksheet: str | None = None):
        self._client = client
        self.sheet_id = sheet_id or settings.GOOGLE_SHEET_ID
        self.task_sheet_id = task_sheet_id or settings.TASK_SHEET_ID or self.sheet_id
        self.task_worksheet = task_worksheet or settings.TASK_WORKSHEET_TITLE

    @property
    def client(self) -> gspread.Client:
        if self._client is None:
            self._client = gspread.service_account(filename=settings.GOOGLE_SERVICE_ACCOUNT_FILE)
        return self._client

    def _ledger(self):
        return self.client.open_by_key(self.sheet_id).get_worksheet(0)

    def _tasks(self):
        spreadsheet = self.client.open_by_key(self.task_sheet_id)
        try:
            return spreadsheet.worksheet(self.task_worksheet)
        except gspread.exceptions.WorksheetNotFound:
            return spreadsheet.get_worksheet(0)

    # --- ledger ---

    def _append_transaction(self, row: list) -> None:
        self._ledger().append_row(row, value_input_option="USER_ENTERED")

    async def append_transaction(self, record: TransactionRecord, *, username: str, user_id: int,
                                 receipt_url: str | None = None, now: datetime | None = None) -> bool:
        row = transaction_row(record, username=username, user_id=user_id, receipt_url=receipt_url, now=now)
        try:
            await asyncio.to_thread(self._append_transaction, row)
        except SHEET_ERRORS:
            logger.exception("Failed to append transaction for user {}", user_id)
            return False
        logger.info("Saved {} {} ({}) for user {}", record.type.value, record.amount, record.category, user_id)
        return True

    # --- tasks ---

    def _append_task(self, task: TaskRecord, started_at: datetime) -> TaskRecord:
        ws = self._tasks()
        # header row excluded
        count = max(len(ws.get_all_values()) - 1, 0)
        persisted = replace(task, sequence_number=count + 1)
        ws.append_row(task_row(persisted, started_at), value_input_option="USER_ENTERED")
        return persisted

    async def append_task(self, task: TaskRecord, now: datetime | None = None) -> TaskRecord | None:
        """Returns the task with its sequence number, or None if the write failed."""
        try:
            persisted = await asyncio.to_thread(self._append_task, task, now or local_now())
        except SHEET_ERRORS:
            logger.exception("Failed to append task {!r}", task.name)
            return None
        logger.info("Saved task #{} {!r}", persisted.sequence_number, persisted.name)
        return persisted

    def _list_tasks(self) -> list[dict]:
        rows = self._tasks().get_all_values()[1:]
        tasks = []
        for row in rows:
            row = list(row) + [""] * (len(TASK_COLUMNS) - len(row))
            name = (row[1] or "").strip()
            if not name:
                continue
            tasks.append({
                "name": name,
                "deadline": row[4],
                "progress": row[5] or 0,
                "status": row[6],
                "notes": row[7],
            })
        return tasks

    async def list_tasks(self) -> list[dict]:
        try:
            return await asyncio.to_thread(self._list_tasks)
        except SHEET_ERRORS:
            logger.exception("Failed to read task list")
            return []
