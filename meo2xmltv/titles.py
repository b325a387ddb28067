"""Season and episode markers in programme titles"""

import re

from meo2xmltv.models import EpisodeNumber

# "Title T2 Ep.5", "Title: T2 - Ep. 5"
SEASON_EPISODE_RE = re.compile(r'[\s:]T(\d+)\s*-?\s*Ep\.\s*(\d+)\s*$')
# "Title Ep.5"
EPISODE_RE = re.compile(r'Ep\.\s*(\d+)\s*$')


def parse_title(title):
    """
    Look for a season/episode marker at the end of a title

    The marker is left in the title.

    Returns:
        tuple: (title, EpisodeNumber or None)
    """
    match = SEASON_EPISODE_RE.search(title)
    if match:
        season, episode = int(match.group(1)), int(match.group(2))
        return title, EpisodeNumber(max(season - 1, 0), max(episode - 1, 0))

    match = EPISODE_RE.search(title)
    if match:
        return title, EpisodeNumber(None, max(int(match.group(1)) - 1, 0))

    return title, None
