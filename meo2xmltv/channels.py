"""Catalog of the channels the guide has listings for"""

import logging

from meo2xmltv import settings
from meo2xmltv.exceptions import ResponseParseError
from meo2xmltv.models import Channel
from meo2xmltv.utils import sanitize

logger = logging.getLogger(__name__)


def list_channels(client):
    """
    Fetch every channel the guide knows about

    Returns:
        list: Channel records in catalog order; id is the provider's channel
        id as used in the configuration file
    """
    payload = client.get(settings.CATALOG_PATH)
    if isinstance(payload, dict):
        payload = payload.get('channels')
    if not isinstance(payload, list):
        raise ResponseParseError('Expected a list of channels from the catalog')

    channels = []
    for record in payload:
        try:
            channel_id = str(record['id']).strip()
            name = sanitize(record['name'])
        except (KeyError, TypeError) as e:
            raise ResponseParseError(f'Malformed channel record: {record!r}') from e
        channels.append(Channel(id=channel_id, display_name=name))

    logger.info('Catalog lists %d channels', len(channels))
    return channels
