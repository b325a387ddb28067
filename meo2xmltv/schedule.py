"""Days to request from the guide"""

import logging
from datetime import timedelta

from meo2xmltv import settings
from meo2xmltv.models import DayWindow
from meo2xmltv.utils import today as local_today

logger = logging.getLogger(__name__)


def compute_window(offset, days, max_window=settings.MAX_DAYS, today=None):
    """
    Calculate the days to fetch, clipped to the guide's lookahead window

    Args:
        offset: Days from today to start at (0 is today)
        days: Number of days requested
        max_window: Furthest day, counted from today, the guide serves
        today: Reference date, defaults to today in the guide's timezone

    Returns:
        DayWindow: First day and number of days; a count of 0 means
        there is nothing to fetch
    """
    if offset < 0:
        raise ValueError('offset must be at least 0')

    if offset + days > max_window:
        logger.info('Only %d days of listings are available, clipping the request', max_window)
        days = max_window - offset
    if days < 1:
        days = 0

    first_day = (today or local_today()) + timedelta(days=offset)
    return DayWindow(first_day=first_day, day_count=days)
