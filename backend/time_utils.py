import os
from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def _timezone() -> ZoneInfo:
    name = os.environ.get("APP_TIMEZONE", "UTC")
    return ZoneInfo(name)


def now_tz() -> datetime:
    return datetime.now(_timezone())


def epoch_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)
