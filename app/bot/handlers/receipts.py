import asyncio
import os
import tempfile

from aiogram import Router, F
from aiogram.types import Message

from app.bot.handlers.expenses import AMOUNT_USAGE, save_transaction, sender_name
from app.core.storage import ReceiptArchive
from app.services.sheet_service import SheetService
from app.utils.dates import local_now
from app.utils.parser import parse_transaction

router = Router(name="receipts")


@router.message(F.photo)
async def add_expense_with_receipt(message: Message, sheets: SheetService, receipts: ReceiptArchive):
    """
    User sends a photo with caption like:
      "Ăn tối - 350k - tk"
    → receipt is archived, transaction saved with its link
    """
    if not message.caption:
        await message.answer("📷 Hãy thêm chú thích cho ảnh, ví dụ: \"Ăn tối - 350k - tk\"")
        return

    now = local_now()
    record = parse_transaction(message.caption, now=now)
    if not record.is_valid:
        await message.answer(AMOUNT_USAGE)
        return

    # --- Receipt handling ---
    photo = message.photo[-1]  # highest resolution
    file = await message.bot.get_file(photo.file_id)

    fd, tmp_path = tempfile.mkstemp(suffix=".jpg")
    os.close(fd)
    try:
        await message.bot.download_file(file.file_path, destination=tmp_path)
        receipt_url = await asyncio.to_thread(receipts.archive, tmp_path, sender_name(message), now)
    finally:
        os.unlink(tmp_path)

    note = "📎 Đã lưu hoá đơn" if receipt_url else "⚠️ Không lưu được ảnh hoá đơn"
    await save_transaction(message, sheets, record, receipt_url=receipt_url, note=note)
