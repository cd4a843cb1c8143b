from datetime import datetime, timedelta
from typing import Callable, Optional

import pytz

from config import HOTEL_TIMEZONE

HOTEL_TZ = pytz.timezone(HOTEL_TIMEZONE)


class HotelClock:
    """
    Reloj de la operación: hora actual y fecha calendario en la zona del hotel.
    Se inyecta en los jobs para poder fijar "hoy" en tests.
    """

    def __init__(self, tz=HOTEL_TZ, now_fn: Optional[Callable[[], datetime]] = None):
        self.tz = tz
        self._now_fn = now_fn

    def now(self) -> datetime:
        """Returns current time in Hotel Timezone"""
        if self._now_fn is None:
            return datetime.now(self.tz)
        return to_hotel_time(self._now_fn(), self.tz)

    def today_iso(self) -> str:
        """Returns today's date formatted as YYYY-MM-DD in Hotel Timezone"""
        return self.now().strftime("%Y-%m-%d")

    def days_before_iso(self, days: int) -> str:
        return (self.now().date() - timedelta(days=days)).isoformat()


def to_hotel_time(dt: datetime, tz=HOTEL_TZ) -> datetime:
    """Converts a datetime to Hotel Timezone"""
    if dt.tzinfo is None:
        # naive = UTC
        return pytz.utc.localize(dt).astimezone(tz)
    return dt.astimezone(tz)
