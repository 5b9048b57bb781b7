from pathlib import Path
from datetime import datetime
from uuid import uuid4
from loguru import logger
from PIL import Image, UnidentifiedImageError

from app.core.config import settings
from app.utils.text import slugify

def folder_name(when: datetime) -> str:
    return f"{when.year}_{when.month:02d}"

def ensure_storage_dir(base_dir: Path, when: datetime) -> Path:
    path = base_dir / folder_name(when)
    path.mkdir(parents=True, exist_ok=True)
    return path

def optimize_and_save(image_path: Path, output_path: Path, max_width: int = 1280, quality: int = 80):
    """
    Resize/compress image while keeping good readability.
    """
    with Image.open(image_path) as img:
        img = img.convert("RGB")
        # Resize if wider than max_width (keep aspect ratio)
        if img.width > max_width:
            ratio = max_width / float(img.width)
            new_height = int(float(img.height) * ratio)
            img = img.resize((max_width, new_height), Image.LANCZOS)
        # Save optimized JPEG
        img.save(output_path, "JPEG", optimize=True, quality=quality)
    return output_path


class ReceiptArchive:
    """
    Stores receipt photos under <base_dir>/<YYYY>_<MM>/ and hands back the
    public URL they are served from.
    """

    def __init__(self, base_dir: str | Path | None = None, public_url: str | None = None):
        self.base_dir = Path(base_dir or settings.RECEIPTS_DIR)
        self.public_url = (public_url or settings.RECEIPTS_PUBLIC_URL).rstrip("/")

    def archive(self, temp_path: str | Path, owner: str, when: datetime | None = None) -> str | None:
        """Returns the receipt URL, or None if the image could not be stored."""
        when = when or datetime.now()
        filename = f"{slugify(owner)}_{when:%Y%m%d_%H%M%S}_{uuid4().hex[:8]}.jpg"
        try:
            folder = ensure_storage_dir(self.base_dir, when)
            optimize_and_save(Path(temp_path), folder / filename)
        except (OSError, UnidentifiedImageError):
            logger.exception("Failed to archive receipt {}", temp_path)
            return None
        url = f"{self.public_url}/{folder_name(when)}/{filename}"
        logger.info("Receipt archived: {}", url)
        return url
