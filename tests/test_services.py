import pytest
import pytest_asyncio
from datetime import date, datetime
from dataclasses import replace
import gspread
from google.auth.exceptions import RefreshError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from app.db.base import Base
from app.db import models  # noqa: F401
from app.models.records import TaskRecord
from app.services.sheet_service import SheetService, transaction_row
from app.services.subscriber_service import SubscriberService
from app.utils.parser import parse_transaction


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session

    await engine.dispose()


class FakeWorksheet:
    def __init__(self, rows=None, fail=False):
        self.rows = [list(r) for r in (rows or [])]
        self.fail = fail

    def append_row(self, row, value_input_option=None):
        if self.fail:
            raise gspread.exceptions.GSpreadException("quota exceeded")
        self.rows.append(list(row))

    def get_all_values(self):
        return [list(r) for r in self.rows]


class FakeSpreadsheet:
    def __init__(self, worksheets: dict):
        self.worksheets = worksheets

    def worksheet(self, title):
        if title not in self.worksheets:
            raise gspread.exceptions.WorksheetNotFound(title)
        return self.worksheets[title]

    def get_worksheet(self, index):
        return list(self.worksheets.values())[index]


class FakeClient:
    def __init__(self, spreadsheets: dict):
        self.spreadsheets = spreadsheets

    def open_by_key(self, key):
        return self.spreadsheets[key]


NOW = datetime(2024, 7, 15, 9, 30)


def test_transaction_row_column_order():
    record = parse_transaction("Đổ xăng - 500k - tk", now=NOW)
    row = transaction_row(record, username="ninh", user_id=5, now=NOW)
    assert row == [
        "15/07/2024", "Car expenses", "Đổ xăng", 500000, "expense", "",
        "2024-07-15T09:30:00", "Fuel", 1, "Transfer", "ninh (5)",
    ]


@pytest.mark.asyncio
async def test_append_transaction_success_and_failure():
    ledger = FakeWorksheet([["Date"]])
    client = FakeClient({"ledger": FakeSpreadsheet({"Sheet1": ledger})})
    svc = SheetService(client, sheet_id="ledger")
    record = parse_transaction("Lương 20 triệu", now=NOW)

    ok = await svc.append_transaction(record, username="ninh", user_id=5,
                                      receipt_url="https://x/2024_07/a.jpg", now=NOW)
    assert ok is True
    assert ledger.rows[-1][3] == 20_000_000
    assert ledger.rows[-1][4] == "income"
    assert ledger.rows[-1][5] == "https://x/2024_07/a.jpg"

    ledger.fail = True
    assert await svc.append_transaction(record, username="ninh", user_id=5, now=NOW) is False


@pytest.mark.asyncio
async def test_append_task_assigns_sequence_number():
    tasks = FakeWorksheet([["SequenceNumber", "TaskName"], [1, "A"], [2, "B"]])
    client = FakeClient({"tasks": FakeSpreadsheet({"Ninh": tasks})})
    svc = SheetService(client, sheet_id="ledger", task_sheet_id="tasks", task_worksheet="Ninh")

    persisted = await svc.append_task(TaskRecord(name="Họp team", deadline="10/6"), now=NOW)
    assert persisted.sequence_number == 3
    assert persisted.is_persisted
    assert tasks.rows[-1] == [3, "Họp team", "", "15/07/2024 09:30", "10/6", 0, "Not started", ""]


@pytest.mark.asyncio
async def test_task_sheet_falls_back_to_first_worksheet():
    first = FakeWorksheet([["SequenceNumber"]])
    client = FakeClient({"tasks": FakeSpreadsheet({"Sheet1": first})})
    svc = SheetService(client, sheet_id="ledger", task_sheet_id="tasks", task_worksheet="Missing")

    persisted = await svc.append_task(TaskRecord(name="Gọi khách"), now=NOW)
    assert persisted.sequence_number == 1
    assert first.rows[-1][1] == "Gọi khách"


@pytest.mark.asyncio
async def test_append_task_failure_returns_none():
    client = FakeClient({"tasks": FakeSpreadsheet({"Ninh": FakeWorksheet([["h"]], fail=True)})})
    svc = SheetService(client, sheet_id="ledger", task_sheet_id="tasks", task_worksheet="Ninh")
    assert await svc.append_task(TaskRecord(name="X"), now=NOW) is None


@pytest.mark.asyncio
async def test_list_tasks_skips_blank_names():
    rows = [
        ["SequenceNumber", "TaskName", "Description", "StartTime", "Deadline", "ProgressPercent", "Status", "Notes"],
        ["1", "Báo cáo", "", "", "15/6", "50", "Đang thực hiện", "Chờ số liệu"],
        ["2", "  ", "", "", "", "", "", ""],
        ["3", "Họp"],
    ]
    client = FakeClient({"tasks": FakeSpreadsheet({"Ninh": FakeWorksheet(rows)})})
    svc = SheetService(client, sheet_id="ledger", task_sheet_id="tasks", task_worksheet="Ninh")

    tasks = await svc.list_tasks()
    assert [t["name"] for t in tasks] == ["Báo cáo", "Họp"]
    assert tasks[0]["progress"] == "50"
    assert tasks[1]["status"] == ""


@pytest.mark.asyncio
async def test_subscriber_add_update_list_remove(db_session: AsyncSession):
    svc = SubscriberService(db_session)
    await svc.add(100, "ninh")
    await svc.add(200, "lan", topics="task")

    assert sorted(await svc.list_chat_ids()) == [100, 200]
    assert await svc.list_chat_ids("expense") == [100]
    assert sorted(await svc.list_chat_ids("task")) == [100, 200]

    updated = await svc.add(100, topics="expense")
    assert updated.topics == "expense"
    assert updated.username == "ninh"
    assert await svc.list_chat_ids("task") == [200]

    assert await svc.remove(200) is not None
    assert await svc.remove(200) is None
    assert await svc.list_chat_ids() == [100]


@pytest.mark.asyncio
async def test_subscriber_rejects_unknown_topic(db_session: AsyncSession):
    with pytest.raises(ValueError):
        await SubscriberService(db_session).add(1, topics="weekly")


def test_persisted_task_is_a_copy():
    draft = TaskRecord(name="Họp")
    persisted = replace(draft, sequence_number=4)
    assert not draft.is_persisted
    assert persisted.is_persisted
    assert draft.name == persisted.name


def test_record_validity_sentinels():
    assert not parse_transaction("Xin chào", now=date(2024, 7, 15)).is_valid
    assert not TaskRecord(name="").is_valid


class ExpiredCredentialsClient:
    def open_by_key(self, key):
        raise RefreshError("invalid_grant: Token has been expired or revoked.")


class BrokenKeyFileClient:
    def open_by_key(self, key):
        raise ValueError("Service account info was not in the expected format")


@pytest.mark.asyncio
@pytest.mark.parametrize("client", [ExpiredCredentialsClient(), BrokenKeyFileClient()])
async def test_credential_failures_are_reported_not_raised(client):
    svc = SheetService(client, sheet_id="ledger", task_sheet_id="tasks", task_worksheet="Ninh")
    record = parse_transaction("Ăn trưa 45k", now=NOW)

    assert await svc.append_transaction(record, username="ninh", user_id=5, now=NOW) is False
    assert await svc.append_task(TaskRecord(name="Họp"), now=NOW) is None
    assert await svc.list_tasks() == []
