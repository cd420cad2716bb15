"""
Offset oracles: the authority mapping (instant, zone) to wall-clock time.

The resolver never derives DST rules itself. It asks an oracle, which in
production is backed by the IANA database shipped with pytz.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, tzinfo
from typing import Dict, Optional
import pytz
from models.errors import UnknownTimezone
from models.schema import MS_PER_MINUTE, CivilDateTime, instant_to_datetime


logger = logging.getLogger(__name__)


class OffsetOracle(ABC):
    """
    Abstract instant-to-wall-clock authority.

    Implementations must be deterministic for a fixed (instant, zone) and
    raise UnknownTimezone for ids they do not recognise.
    """

    @abstractmethod
    def format(self, instant: int, tz: str) -> CivilDateTime:
        """
        Wall-clock reading of ``instant`` in ``tz``.

        Args:
            instant: Epoch milliseconds
            tz: Timezone identifier

        Returns:
            CivilDateTime at second precision

        Raises:
            UnknownTimezone: If tz is not recognised
        """
        pass

    def offset_minutes(self, instant: int, tz: str) -> int:
        """UTC offset in minutes, derived by comparing the zone's wall clock with UTC's."""
        local = self.format(instant, tz).naive_seconds()
        utc = CivilDateTime.from_datetime(instant_to_datetime(instant)).naive_seconds()
        return int((local - utc) / 60)

    def is_known(self, tz: str) -> bool:
        try:
            self.format(0, tz)
        except UnknownTimezone:
            return False
        return True


class PytzOffsetOracle(OffsetOracle):
    """Oracle backed by pytz's copy of the IANA timezone database."""

    def _zone(self, tz: str) -> tzinfo:
        try:
            return pytz.timezone(tz)
        except pytz.UnknownTimeZoneError:
            logger.warning("Unknown timezone requested: %r", tz)
            raise UnknownTimezone(tz) from None

    def _localize(self, instant: int, tz: str) -> datetime:
        return instant_to_datetime(instant).astimezone(self._zone(tz))

    def format(self, instant: int, tz: str) -> CivilDateTime:
        return CivilDateTime.from_datetime(self._localize(instant, tz))

    def offset_minutes(self, instant: int, tz: str) -> int:
        offset = self._localize(instant, tz).utcoffset()
        return int(offset.total_seconds() / 60)

    def is_known(self, tz: str) -> bool:
        try:
            self._zone(tz)
        except UnknownTimezone:
            return False
        return True


class FixedOffsetOracle(OffsetOracle):
    """
    Oracle with one constant offset per zone and no DST.

    ``"UTC"`` is always known with offset 0.
    """

    def __init__(self, offsets: Optional[Dict[str, int]] = None):
        self.offsets: Dict[str, int] = {"UTC": 0}
        self.offsets.update(offsets or {})

    def offset_minutes(self, instant: int, tz: str) -> int:
        if tz not in self.offsets:
            raise UnknownTimezone(tz)
        return self.offsets[tz]

    def format(self, instant: int, tz: str) -> CivilDateTime:
        shifted = instant + self.offset_minutes(instant, tz) * MS_PER_MINUTE
        return CivilDateTime.from_datetime(instant_to_datetime(shifted))

    def is_known(self, tz: str) -> bool:
        return tz in self.offsets
