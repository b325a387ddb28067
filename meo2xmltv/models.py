"""Channels, programmes and the schedule they are collected into"""

from dataclasses import dataclass, field
from datetime import date, timedelta, timezone
from typing import NamedTuple, Optional


@dataclass(frozen=True)
class Channel:
    id: str
    display_name: str
    icon_url: str = ''


class EpisodeNumber(NamedTuple):
    """Zero-based season and episode; season is None when unknown"""

    season: Optional[int]
    episode: int

    def xmltv_ns(self):
        season = '' if self.season is None else str(self.season)
        return f'{season}.{self.episode}.'


class ProgrammeKey(NamedTuple):
    channel_id: str
    start: object
    stop: object


@dataclass
class Programme:
    channel_id: str
    title: str
    start: object
    stop: object
    description: str = ''
    episode_num: Optional[EpisodeNumber] = None
    icon_url: Optional[str] = None

    @property
    def key(self):
        # UTC, so the repeated hour at the end of summer time gives distinct keys
        return ProgrammeKey(self.channel_id, self.start.astimezone(timezone.utc),
                            self.stop.astimezone(timezone.utc))


@dataclass(frozen=True)
class DayWindow:
    first_day: date
    day_count: int

    def days(self):
        """Calendar days covered by the window, in increasing order"""
        for offset in range(self.day_count):
            yield self.first_day + timedelta(days=offset)


@dataclass
class ScheduleDocument:
    """
    Channels and programmes of one grab

    Channels keep the order they were first seen in. Programmes are keyed by
    (channel, start, stop) so a broadcast returned by two day queries is only
    kept once.
    """

    channels: dict = field(default_factory=dict)
    programmes: dict = field(default_factory=dict)

    def add_channel(self, channel):
        """Register a channel unless one with the same id was seen already"""
        return self.channels.setdefault(channel.id, channel)

    def add_programme(self, programme):
        if programme.channel_id not in self.channels:
            raise KeyError(f'Programme references unknown channel {programme.channel_id!r}')
        self.programmes[programme.key] = programme

    def programmes_for(self, channel_id):
        return [p for key, p in self.programmes.items() if key.channel_id == channel_id]
