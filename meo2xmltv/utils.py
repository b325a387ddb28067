"""Text and date helpers shared by the grabber and the writer"""

import logging
import re
import unicodedata
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from meo2xmltv import settings
from meo2xmltv.exceptions import ResponseParseError

logger = logging.getLogger(__name__)

LOCAL_TZ = ZoneInfo(settings.TIMEZONE)

_WHITESPACE_CONTROLS = re.compile(r'[\t\n\r\v\f]+')


def sanitize(text):
    """Drop non-printable characters, turning line breaks and tabs into spaces"""
    if text is None:
        return ''
    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ResponseParseError(f'Undecodable text in response: {e}') from e
    text = _WHITESPACE_CONTROLS.sub(' ', str(text))
    return ''.join(c for c in text if unicodedata.category(c)[0] != 'C').strip()


def today():
    """Current calendar date in the guide's timezone"""
    return datetime.now(LOCAL_TZ).date()


def parse_clock(value):
    """Parse "H:MM" or "HH:MM" into (hours, minutes)"""
    match = re.fullmatch(r'\s*(\d{1,2}):(\d{2})\s*', value or '')
    if not match:
        raise ResponseParseError(f'Invalid time of day: {value!r}')
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ResponseParseError(f'Invalid time of day: {value!r}')
    return hours, minutes


def make_dates(date_str, start_time, end_time, duration):
    """
    Build the absolute start and stop of a programme

    The stop time is derived from the duration, not from end_time, so that
    programmes running past midnight end on the right day. end_time is only
    compared against the result.

    Args:
        date_str: Broadcast day as DD-MM-YYYY
        start_time: Start as H:MM or HH:MM, local time
        end_time: End as H:MM or HH:MM, local time
        duration: Duration in minutes

    Returns:
        tuple: (start, stop) as aware datetimes in the guide's timezone
    """
    try:
        day = datetime.strptime(date_str.strip(), '%d-%m-%Y')
    except (AttributeError, ValueError) as e:
        raise ResponseParseError(f'Invalid programme date: {date_str!r}') from e
    try:
        minutes = int(duration)
    except (TypeError, ValueError) as e:
        raise ResponseParseError(f'Invalid programme duration: {duration!r}') from e

    hours, mins = parse_clock(start_time)
    start = day.replace(hour=hours, minute=mins, tzinfo=LOCAL_TZ)
    # Add in UTC so that a DST change inside the programme keeps its real length
    stop = (start.astimezone(timezone.utc) + timedelta(minutes=minutes)).astimezone(LOCAL_TZ)

    if end_time:
        try:
            end_hours, end_mins = parse_clock(end_time)
        except ResponseParseError:
            logger.debug('Ignoring unparsable end time %r', end_time)
            return start, stop
        if (stop.hour, stop.minute) != (end_hours, end_mins):
            logger.debug('End time %s disagrees with %s + %d minutes, using duration',
                         end_time, start_time, minutes)
    return start, stop


def format_xmltv_time(dt):
    """Format datetime for XMLTV (YYYYMMDDhhmmss +ZZZZ)"""
    return dt.strftime('%Y%m%d%H%M%S %z')
