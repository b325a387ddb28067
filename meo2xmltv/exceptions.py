"""Exceptions raised while grabbing listings"""


class GrabberError(Exception):
    """Base class for every fatal grabber error"""


class ApiError(GrabberError):
    """The API answered with a non-success HTTP status"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(GrabberError, ValueError):
    """A response body or one of its records could not be parsed"""


class StaleChannelsError(GrabberError):
    """The API rejected the channel list, usually because it is out of date"""


class ConfigError(GrabberError):
    """The configuration file is missing, unreadable or empty"""
