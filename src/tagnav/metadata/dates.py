"""Relative date tags.

``#today``, ``#today+3``, ``#month-1`` and ``#week+2`` are rewritten to
calendar dates before a tag is indexed, so documents and range queries can
talk about "next week" without hard-coding the date.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Callable

from loguru import logger

from tagnav.core.config import DateTagConfig

_OFFSET_PATTERN = re.compile(r"^[+-]\d+$")


def _shift_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


class DateTagResolver:
    """Resolve relative date markers into formatted dates.

    Args:
        config: Markers and strftime formats.
        now: Clock, injectable for tests.
    """

    def __init__(self, config: DateTagConfig | None = None, now: Callable[[], datetime] = datetime.now):
        self.config = config or DateTagConfig()
        self._now = now
        self._rules = [
            (self.config.today_tag.lower(), self._today),
            (self.config.month_tag.lower(), self._month),
            (self.config.week_tag.lower(), self._week),
        ]
        # Longest marker first so overlapping markers resolve deterministically
        self._rules.sort(key=lambda rule: len(rule[0]), reverse=True)

    def resolve(self, text: str) -> str:
        """Return the formatted date for a date marker, else ``text`` unchanged."""
        lowered = text.lower()
        for marker, handler in self._rules:
            if not marker or not lowered.startswith(marker):
                continue
            rest = lowered[len(marker):]
            if not rest:
                return self._format(text, handler, 0)
            if rest[0] not in "+-":
                # a different word that merely starts with the marker
                continue
            if not _OFFSET_PATTERN.match(rest):
                logger.warning(f"Invalid date tag offset in {text!r}")
                return text
            return self._format(text, handler, int(rest))
        return text

    def _format(self, text: str, handler: Callable[[int], tuple[date, str]], offset: int) -> str:
        try:
            day, fmt = handler(offset)
            return day.strftime(fmt)
        except (ValueError, OverflowError) as e:
            logger.warning(f"Cannot resolve date tag {text!r}: {e}")
            return text

    def _today(self, offset: int) -> tuple[date, str]:
        return self._now().date() + timedelta(days=offset), self.config.date_format

    def _month(self, offset: int) -> tuple[date, str]:
        return _shift_months(self._now().date(), offset), self.config.month_format

    def _week(self, offset: int) -> tuple[date, str]:
        today = self._now().date()
        start = today - timedelta(days=(today.weekday() - self.config.week_start_day) % 7)
        return start + timedelta(weeks=offset), self.config.week_format
