from aiogram.types import ReplyKeyboardMarkup, KeyboardButton


def main_menu_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="/categories"), KeyboardButton(text="/tasks")],
            [KeyboardButton(text="/subscribe"), KeyboardButton(text="/unsubscribe")],
            [KeyboardButton(text="/help"), KeyboardButton(text="/menu")],
        ],
        resize_keyboard=True,
    )
