from datetime import datetime
from typing import Optional

from pytz import timezone, utc

from match_insights.config import APP_TIMEZONE

# Timezone every date string of the output is rendered in
APP_TZ = timezone(APP_TIMEZONE)

def get_current_time() -> datetime:
    """Get current time in the application timezone."""
    return datetime.now(APP_TZ)

def get_today_str() -> str:
    """Get today's date string in the application timezone (YYYY-MM-DD)."""
    return get_current_time().strftime("%Y-%m-%d")

def to_app_time(value: Optional[datetime]) -> Optional[datetime]:
    """Convert a timestamp to the application timezone. Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = utc.localize(value)
    return value.astimezone(APP_TZ)
