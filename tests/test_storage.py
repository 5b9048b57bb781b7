from datetime import datetime
from PIL import Image

from app.core.storage import ReceiptArchive, folder_name


def test_folder_name():
    assert folder_name(datetime(2024, 7, 15)) == "2024_07"


def test_archive_resizes_and_returns_url(tmp_path):
    src = tmp_path / "in.png"
    Image.new("RGBA", (2000, 1000), (255, 0, 0, 255)).save(src)

    archive = ReceiptArchive(base_dir=tmp_path / "receipts", public_url="https://files.example.com/r/")
    url = archive.archive(src, "Nguyễn Ninh", datetime(2024, 7, 15, 9, 30))

    assert url.startswith("https://files.example.com/r/2024_07/nguyen-ninh_20240715_093000_")
    stored = list((tmp_path / "receipts" / "2024_07").iterdir())
    assert len(stored) == 1
    with Image.open(stored[0]) as img:
        assert img.width == 1280
        assert img.format == "JPEG"


def test_archive_returns_none_for_unreadable_file(tmp_path):
    src = tmp_path / "broken.jpg"
    src.write_bytes(b"not an image")
    archive = ReceiptArchive(base_dir=tmp_path / "receipts", public_url="https://files.example.com/r")
    assert archive.archive(src, "ninh") is None
