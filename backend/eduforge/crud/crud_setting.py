from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models
from ..core.config import settings


def get_setting(db: Session, key: str) -> Optional[models.SystemSetting]:
    return (
        db.query(models.SystemSetting)
        .filter(models.SystemSetting.key == key)
        .first()
    )


def get_settings_map(db: Session, category: Optional[str] = None) -> Dict[str, str]:
    query = db.query(models.SystemSetting)
    if category:
        query = query.filter(models.SystemSetting.category == category)
    return {s.key: s.value for s in query.order_by(models.SystemSetting.key).all()}


def upsert_setting(
    db: Session, key: str, value: str, category: str = "general"
) -> models.SystemSetting:
    """Insert or update one key; an existing key keeps its category.

    Flushes only; the caller commits.
    """
    row = get_setting(db, key)
    if row is None:
        row = models.SystemSetting(key=key, value=value, category=category)
        db.add(row)
    else:
        row.value = value
    db.flush()
    return row


def get_file_limits(db: Session) -> Tuple[int, List[str]]:
    """Return ``(max_bytes, allowed_extensions)`` for uploads."""
    stored = get_settings_map(db)
    try:
        max_mb = int(stored.get("max_file_size_mb") or settings.DEFAULT_MAX_FILE_SIZE_MB)
    except ValueError:
        max_mb = settings.DEFAULT_MAX_FILE_SIZE_MB
    raw_types = stored.get("allowed_file_types") or settings.DEFAULT_ALLOWED_FILE_TYPES
    allowed = [t.strip().lower().lstrip(".") for t in raw_types.split(",") if t.strip()]
    return max_mb * 1024 * 1024, allowed
