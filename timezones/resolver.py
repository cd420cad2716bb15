"""
DST-aware conversion between wall-clock time in a named zone and instants.
"""

import calendar
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple, Union
from models.enums import AmbiguityPolicy, CivilTimeKind
from models.errors import InvalidCivilDateTime
from models.schema import (
    MS_PER_SECOND,
    CivilDate,
    CivilDateTime,
    CivilTimeOfDay,
    DateTimeRange,
)
from utils.config import EngineSettings, get_settings
from .oracle import OffsetOracle, PytzOffsetOracle


logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR

# Probes stay a day inside what datetime can represent once an offset is applied.
MIN_PROBE_SECONDS = calendar.timegm((1, 1, 1, 0, 0, 0)) + SECONDS_PER_DAY
MAX_PROBE_SECONDS = calendar.timegm((9999, 12, 31, 23, 59, 59)) - SECONDS_PER_DAY


class TimezoneResolver:
    """
    Bidirectional mapping between civil date-times in a zone and instants.

    ``civil_to_instant`` bisects a window around the naive candidate (the
    civil time read as UTC), comparing the oracle's wall-clock reading of
    each probe with the target. A wall-clock time that occurs twice
    (fall-back overlap) is resolved by ``ambiguity_policy``. A wall-clock
    time that never occurs (spring-forward gap) snaps to the nearest
    representable instant, which is the transition itself.

    Every operation takes an optional ``tz``; when omitted the resolver
    uses ``default_timezone`` from its settings.
    """

    def __init__(
        self,
        oracle: Optional[OffsetOracle] = None,
        settings: Optional[EngineSettings] = None,
        ambiguity_policy: Optional[AmbiguityPolicy] = None,
    ):
        settings = settings or get_settings()
        self.oracle = oracle or PytzOffsetOracle()
        self.window_seconds = settings.search_window_hours * SECONDS_PER_HOUR
        self.max_iterations = settings.max_iterations
        self.ambiguity_policy = ambiguity_policy or settings.ambiguity_policy
        self.default_timezone = settings.default_timezone

    def offset_minutes(self, instant: int, tz: Optional[str] = None) -> int:
        """
        UTC offset in effect for ``tz`` at ``instant``.

        Raises:
            UnknownTimezone: If tz is not recognised by the oracle
        """
        return self.oracle.offset_minutes(instant, self._zone(tz))

    def instant_to_civil(self, instant: int, tz: Optional[str] = None) -> CivilDateTime:
        """Wall-clock reading of an instant in ``tz``. Always exact."""
        return self.oracle.format(instant, self._zone(tz))

    def civil_to_instant(
        self,
        civil: Union[CivilDateTime, datetime],
        tz: Optional[str] = None,
    ) -> int:
        """
        Find the instant whose wall clock in ``tz`` reads ``civil``.

        Args:
            civil: Wall-clock date-time (a naive datetime is accepted)
            tz: Timezone identifier (default: settings.default_timezone)

        Returns:
            Epoch milliseconds

        Raises:
            UnknownTimezone: If tz is not recognised by the oracle
            InvalidCivilDateTime: If civil is not a civil date-time
        """
        civil = _as_civil(civil)
        tz = self._zone(tz)
        target = civil.naive_seconds()
        match, closest = self._bisect(civil, tz, target)
        found = self._occurrences(civil, tz, target, match)

        if len(found) > 1:
            chosen = found[0] if self.ambiguity_policy == AmbiguityPolicy.EARLIER else found[-1]
            logger.debug(
                "%s occurs %d times in %s, picked %d (%s)",
                civil, len(found), tz, chosen, self.ambiguity_policy.value,
            )
            return chosen
        if found:
            return found[0]

        logger.debug("%s does not occur in %s, snapped to %d", civil, tz, closest)
        return closest

    def occurrences(
        self,
        civil: Union[CivilDateTime, datetime],
        tz: Optional[str] = None,
    ) -> List[int]:
        """
        Every instant whose wall clock in ``tz`` reads ``civil``, ascending.

        Empty inside a spring-forward gap, two entries inside a fall-back
        overlap.
        """
        civil = _as_civil(civil)
        tz = self._zone(tz)
        target = civil.naive_seconds()
        match, _ = self._bisect(civil, tz, target)
        return self._occurrences(civil, tz, target, match)

    def classify(
        self,
        civil: Union[CivilDateTime, datetime],
        tz: Optional[str] = None,
    ) -> CivilTimeKind:
        """Whether a wall-clock time is normal, skipped or repeated in ``tz``."""
        count = len(self.occurrences(civil, tz))
        if count == 0:
            return CivilTimeKind.GAP
        if count == 1:
            return CivilTimeKind.NORMAL
        return CivilTimeKind.OVERLAP

    def combine(
        self,
        civil_date: Union[CivilDate, date],
        time_of_day: Union[CivilTimeOfDay, str],
        tz: Optional[str] = None,
    ) -> int:
        """
        Resolve a calendar day plus an ``HH:mm`` time in ``tz`` to an instant.

        This is the picker's "date cell + time input" step.
        """
        if isinstance(civil_date, date):
            civil_date = CivilDate.from_date(civil_date)
        if isinstance(time_of_day, str):
            time_of_day = CivilTimeOfDay.parse(time_of_day)
        return self.civil_to_instant(CivilDateTime.from_parts(civil_date, time_of_day), tz)

    def resolve_range(
        self,
        start: Optional[CivilDateTime],
        end: Optional[CivilDateTime],
        tz: Optional[str] = None,
    ) -> DateTimeRange:
        """Resolve both ends of a selection. Missing ends stay missing."""
        return DateTimeRange(
            start=self.civil_to_instant(start, tz) if start is not None else None,
            end=self.civil_to_instant(end, tz) if end is not None else None,
        )

    def _zone(self, tz: Optional[str]) -> str:
        return tz if tz is not None else self.default_timezone

    def _probe(self, seconds: int, tz: str) -> CivilDateTime:
        return self.oracle.format(seconds * MS_PER_SECOND, tz)

    def _bisect(
        self,
        civil: CivilDateTime,
        tz: str,
        target: int,
    ) -> Tuple[Optional[int], int]:
        """
        Bisect the search window for ``civil``.

        Returns:
            (exact match in ms or None, closest probe in ms)
        """
        low = max(target - self.window_seconds, MIN_PROBE_SECONDS)
        high = min(target + self.window_seconds, MAX_PROBE_SECONDS)
        best: Optional[Tuple[Tuple[int, int], int]] = None

        for _ in range(self.max_iterations):
            if low > high:
                break
            mid = (low + high) // 2
            probed = self._probe(mid, tz)
            if probed == civil:
                return mid * MS_PER_SECOND, mid * MS_PER_SECOND
            best = _closer(best, mid, probed, target)
            if probed < civil:
                low = mid + 1
            else:
                high = mid - 1

        # The search converges on the first second past the target, which
        # has not necessarily been probed yet.
        low = min(low, MAX_PROBE_SECONDS)
        probed = self._probe(low, tz)
        if probed == civil:
            return low * MS_PER_SECOND, low * MS_PER_SECOND
        best = _closer(best, low, probed, target)
        return None, best[1] * MS_PER_SECOND

    def _occurrences(
        self,
        civil: CivilDateTime,
        tz: str,
        target: int,
        match: Optional[int],
    ) -> List[int]:
        """One candidate per distinct offset seen around the target; keep those that read back as ``civil``."""
        edges = [
            max(target - self.window_seconds, MIN_PROBE_SECONDS) * MS_PER_SECOND,
            min(target + self.window_seconds, MAX_PROBE_SECONDS) * MS_PER_SECOND,
        ]
        found = set()
        if match is not None:
            edges.append(match)
            found.add(match)

        offsets = {self.oracle.offset_minutes(edge, tz) for edge in edges}
        for offset in offsets:
            seconds = target - offset * 60
            # Candidates past either end of the calendar cannot be formatted.
            if not MIN_PROBE_SECONDS <= seconds <= MAX_PROBE_SECONDS:
                continue
            candidate = seconds * MS_PER_SECOND
            if self.oracle.format(candidate, tz) == civil:
                found.add(candidate)
        return sorted(found)


def _as_civil(value: Union[CivilDateTime, datetime]) -> CivilDateTime:
    if isinstance(value, CivilDateTime):
        return value
    if isinstance(value, datetime):
        return CivilDateTime.from_datetime(value)
    raise InvalidCivilDateTime(f"Not a civil date-time: {value!r}")


def _closer(
    best: Optional[Tuple[Tuple[int, int], int]],
    seconds: int,
    probed: CivilDateTime,
    target: int,
) -> Tuple[Tuple[int, int], int]:
    """Keep the probe whose wall clock is nearest the target; ties go to the later wall clock."""
    distance = probed.naive_seconds() - target
    key = (abs(distance), 0 if distance > 0 else 1)
    if best is None or key < best[0]:
        return key, seconds
    return best
