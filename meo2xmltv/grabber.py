"""Fetch listings day by day and normalize them into a ScheduleDocument"""

import logging
from dataclasses import dataclass

from meo2xmltv import settings
from meo2xmltv.exceptions import ResponseParseError, StaleChannelsError
from meo2xmltv.models import Channel, Programme, ScheduleDocument
from meo2xmltv.titles import parse_title
from meo2xmltv.utils import make_dates, sanitize

logger = logging.getLogger(__name__)

SERVER_ERROR_CODE = 500


@dataclass(frozen=True)
class Ok:
    channels: list


@dataclass(frozen=True)
class ServerError:
    code: int


def classify_response(payload):
    """Tell a listings payload apart from the API's in-band failure code"""
    code = payload.get('code') if isinstance(payload, dict) else payload
    if isinstance(code, (int, str)) and str(code).strip() == str(SERVER_ERROR_CODE):
        return ServerError(SERVER_ERROR_CODE)

    if not isinstance(payload, dict) or not isinstance(payload.get('channels'), list):
        raise ResponseParseError('Expected an object with a list of channels from the guide')
    return Ok(payload['channels'])


def derive_channel_id(call_letter):
    """Build the XMLTV channel id from the provider's call letter, e.g. "SIC+" -> "sic-plus.meo.pt" """
    channel_id = call_letter.lower()
    channel_id = ''.join(c for c in channel_id if not c.isspace() and c not in '&!')
    channel_id = channel_id.replace('ç', 'c').replace('+', '-plus')
    return channel_id + settings.CHANNEL_ID_SUFFIX


def parse_channel(block):
    """Build the Channel record of one channel block"""
    try:
        call_letter = str(block['sigla'])
        number = block['id']
    except (KeyError, TypeError) as e:
        raise ResponseParseError(f'Malformed channel block: {block!r}') from e

    return Channel(
        id=derive_channel_id(call_letter),
        display_name=sanitize(block.get('name') or call_letter),
        icon_url=settings.CHANNEL_ICON_URL.format(channel_number=number),
    )


def parse_programme(record, channel_id, call_letter):
    """
    Normalize one raw programme record

    Returns:
        Programme, or None when the record has no positive duration
    """
    try:
        raw_title = record['name']
        start, stop = make_dates(record['date'], record['timeIni'],
                                 record.get('timeEnd'), record['duration'])
    except (KeyError, TypeError) as e:
        raise ResponseParseError(f'Malformed programme record on {channel_id}: {record!r}') from e

    if stop.timestamp() <= start.timestamp():
        logger.debug('Skipping %r on %s: no duration', raw_title, channel_id)
        return None

    title, episode_num = parse_title(sanitize(raw_title))

    icon_url = None
    programme_id = record.get('uniqueId')
    if programme_id:
        icon_url = settings.PROGRAMME_ICON_URL.format(call_letter=call_letter,
                                                      programme_id=programme_id)

    return Programme(
        channel_id=channel_id,
        title=title,
        start=start,
        stop=stop,
        description=sanitize(record.get('description')),
        episode_num=episode_num,
        icon_url=icon_url,
    )


def fetch_day(client, channel_ids, day):
    """
    Fetch one day of listings for the given channels

    Returns:
        list: Raw channel blocks of the response

    Raises:
        StaleChannelsError: If the API reports a server-side failure
    """
    payload = client.post(settings.EPG_PATH, {
        'channels': ','.join(channel_ids),
        'date': day.isoformat(),
    })
    result = classify_response(payload)
    if isinstance(result, ServerError):
        raise StaleChannelsError(
            f'The guide answered with error {result.code} for {day.isoformat()}. '
            'The channel list may be out of date, run --configure again.')
    return result.channels


def add_channel_block(document, block):
    """Merge one channel block of a response into the document"""
    channel = document.add_channel(parse_channel(block))
    call_letter = str(block['sigla'])

    added = 0
    for record in block.get('programs') or []:
        programme = parse_programme(record, channel.id, call_letter)
        if programme is not None:
            document.add_programme(programme)
            added += 1
    return added


def fetch_range(client, channel_ids, window, document=None):
    """
    Fetch every day of the window and collect the results

    Programmes that run past midnight come back in both day queries; they
    collapse into one entry because the document keys them on
    (channel, start, stop).

    Args:
        client: ApiClient instance
        channel_ids: Provider channel ids to request
        window: DayWindow to fetch
        document: Optional ScheduleDocument to add to

    Returns:
        ScheduleDocument: Channels and deduplicated programmes
    """
    if document is None:
        document = ScheduleDocument()
    channel_ids = list(channel_ids)

    for index, day in enumerate(window.days(), start=1):
        logger.info('Fetching day %d/%d: %s', index, window.day_count, day.isoformat())
        blocks = fetch_day(client, channel_ids, day)
        added = sum(add_channel_block(document, block) for block in blocks)
        logger.debug('  %d programmes on %d channels', added, len(blocks))

    logger.info('Collected %d channels and %d programmes',
                len(document.channels), len(document.programmes))
    return document
