from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    TELEGRAM_BOT_TOKEN: str = ""
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/ledgerbot.db"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    LOCAL_TIMEZONE: str = "Asia/Ho_Chi_Minh"

    # Google Sheets
    GOOGLE_SERVICE_ACCOUNT_FILE: str = "service_account.json"
    GOOGLE_SHEET_ID: str = ""
    TASK_SHEET_ID: str = ""  # falls back to GOOGLE_SHEET_ID
    TASK_WORKSHEET_TITLE: str = "Ninh"

    # Messages posted in this forum topic are parsed as tasks
    TASK_TOPIC_ID: int | None = None

    RECEIPTS_DIR: str = "data/receipts"
    RECEIPTS_PUBLIC_URL: str = "http://localhost:8080/receipts"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

settings = Settings()
