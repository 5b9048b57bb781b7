import pytest
from datetime import datetime

from app.services.reminder_service import (
    due_reminders,
    expense_reminder_text,
    pending_tasks,
    send_due_reminders,
    task_digest_text,
)


def _task(name, status="Đang thực hiện", **extra):
    return {"name": name, "status": status, "deadline": "", "progress": 0, "notes": "", **extra}


def test_due_reminders_by_hour():
    assert due_reminders(datetime(2024, 7, 15, 12, 0)) == (True, False)
    assert due_reminders(datetime(2024, 7, 15, 18, 0)) == (True, True)
    assert due_reminders(datetime(2024, 7, 15, 7, 0)) == (False, True)
    assert due_reminders(datetime(2024, 7, 15, 10, 0)) == (False, False)
    assert due_reminders(datetime(2024, 7, 15, 12, 5)) == (False, False)


def test_expense_reminder_text():
    assert "12:00" in expense_reminder_text(12)
    assert expense_reminder_text(9) is None


def test_pending_tasks_filters_closed_and_blank_status():
    tasks = [_task("A"), _task("B", "Hoàn thành"), _task("C", "Đã hủy"), _task("D", "")]
    assert [t["name"] for t in pending_tasks(tasks)] == ["A"]


def test_task_digest_lists_first_five():
    tasks = [_task(f"Việc {i}", deadline="10/6", progress="40") for i in range(7)]
    text = task_digest_text(tasks, 8)
    assert "(8:00)" in text
    assert "7 công việc đang thực hiện" in text
    assert "Việc 4" in text
    assert "Việc 5" not in text
    assert "Và 2 công việc khác" in text
    assert "📈 Tiến độ: 40%" in text


def test_task_digest_all_done():
    text = task_digest_text([_task("A", "Hoàn thành")], 9)
    assert "Tất cả công việc đã hoàn thành" in text


class FakeBot:
    def __init__(self):
        self.sent = []

    async def send_message(self, chat_id, text, **kwargs):
        self.sent.append((chat_id, text, kwargs))


class FakeSheets:
    async def list_tasks(self):
        return [_task("Báo cáo")]


class FakeSubscribers:
    async def list_chat_ids(self, topic=None):
        return {"expense": [1], "task": [1, 2]}[topic]


@pytest.mark.asyncio
async def test_send_due_reminders_at_18():
    bot = FakeBot()
    actions = await send_due_reminders(bot, FakeSheets(), FakeSubscribers(), datetime(2024, 7, 15, 18, 0))

    assert actions == ["expense reminder 18:00", "task reminder 18:00"]
    assert [chat for chat, _, _ in bot.sent] == [1, 1, 2]
    assert "CUỐI NGÀY" in bot.sent[0][1]
    assert "Báo cáo" in bot.sent[1][1]
    assert bot.sent[1][2] == {"parse_mode": "HTML"}


@pytest.mark.asyncio
async def test_send_due_reminders_off_hour_sends_nothing():
    bot = FakeBot()
    actions = await send_due_reminders(bot, FakeSheets(), FakeSubscribers(), datetime(2024, 7, 15, 10, 0))
    assert actions == []
    assert bot.sent == []


def test_task_digest_escapes_task_fields():
    task = _task("fix_db *migr* <v2>", notes="đợi a_b", deadline="10/6")
    text = task_digest_text([task], 8)
    assert "<b>fix_db *migr* &lt;v2&gt;</b>" in text
    assert "<b>NHẮC NHỞ CÔNG VIỆC</b>" in text
    assert "Vướng mắc: đợi a_b" in text
