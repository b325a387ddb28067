"""
Grabber configuration file

The file follows the XMLTV grabber convention: one line per channel,
"channel=ID" when the channel is grabbed and "channel!ID" when it is
known but left out. Lines starting with # are comments.
"""

import logging
import os
import sys

from meo2xmltv.channels import list_channels
from meo2xmltv.exceptions import ConfigError

logger = logging.getLogger(__name__)

ANSWERS = ('yes', 'no', 'all', 'none')


def parse_config(lines):
    """Return the selected channel ids of a configuration, in file order"""
    selected = []
    for number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        if line.startswith('channel='):
            channel_id = line[len('channel='):].strip()
            if channel_id and channel_id not in selected:
                selected.append(channel_id)
        elif line.startswith('channel!'):
            continue
        else:
            raise ConfigError(f'Unknown configuration line {number}: {line!r}')
    return selected


def load_config(path):
    """
    Read the selected channel ids from a configuration file

    Raises:
        ConfigError: If the file cannot be read or selects no channel
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            selected = parse_config(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file '{path}': {e.strerror}. "
                          'Use --configure to configure the grabber.') from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Configuration file '{path}' is not valid UTF-8: {e}") from e

    if not selected:
        raise ConfigError(f"No channels selected in '{path}'. "
                          'Use --configure to choose some.')
    logger.debug('Loaded %d channels from %s', len(selected), path)
    return selected


def save_config(path, channels, selected):
    """Write every catalog channel to the configuration file, marking the selected ones"""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    selected = set(selected)
    with open(path, 'w', encoding='utf-8') as f:
        for channel in channels:
            f.write(f'# {channel.display_name}\n')
            mark = '=' if channel.id in selected else '!'
            f.write(f'channel{mark}{channel.id}\n')
    logger.info('Wrote configuration to %s', path)


def ask(prompt, input_func=None, output=None):
    """Ask a yes/no/all/none question until a valid answer is given; empty means no"""
    input_func = input_func or input
    output = output or sys.stderr
    while True:
        output.write(f'{prompt} [{",".join(ANSWERS)} (default=no)] ')
        output.flush()
        answer = input_func().strip().lower()
        if not answer:
            return 'no'
        for choice in ANSWERS:
            if choice.startswith(answer):
                return choice
        output.write(f'Please answer one of {", ".join(ANSWERS)}\n')


def configure(client, path, input_func=None, output=None):
    """
    Interactively choose the channels to grab and write the configuration

    Args:
        client: ApiClient used to fetch the channel catalog
        path: Configuration file to write
        input_func: Callable reading one answer
        output: Stream the questions are written to

    Returns:
        list: The selected channel ids
    """
    input_func = input_func or input
    output = output or sys.stderr
    channels = list_channels(client)
    selected = []
    bulk = None

    for channel in channels:
        answer = bulk or ask(f'Add channel {channel.display_name} ({channel.id})?',
                             input_func, output)
        if answer in ('all', 'none'):
            bulk = answer
        if answer in ('yes', 'all'):
            selected.append(channel.id)

    save_config(path, channels, selected)
    output.write(f'Selected {len(selected)} of {len(channels)} channels\n')
    return selected
