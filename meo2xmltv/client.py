"""HTTP client for the MEO web guide JSON API"""

import json
import logging

import requests

from meo2xmltv import settings
from meo2xmltv.exceptions import ApiError, ResponseParseError

logger = logging.getLogger(__name__)

ERROR_ENVELOPE_FIELDS = ('serverID', 'datetime', 'message', 'code', 'response')


class ApiClient:
    """Client for the MEO guide script service"""

    def __init__(self, base_url=settings.BASE_URL, api_prefix=settings.API_PREFIX,
                 user_agent=settings.DEFAULT_USER_AGENT, timeout=settings.DEFAULT_TIMEOUT,
                 verify=True, session=None):
        self.base_url = base_url.rstrip('/')
        self.api_prefix = api_prefix
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'application/json, text/plain, */*',
            'Accept-Encoding': 'gzip, deflate',
        })
        self.session.verify = verify

    def build_url(self, path):
        """Absolute paths hang off the site root, anything else off the API prefix"""
        if path.startswith('/'):
            return self.base_url + path
        return self.base_url + self.api_prefix + path

    def request(self, method, path, data=None):
        """
        Send a request to the API and return its decoded JSON payload

        Args:
            method: "GET" or "POST"
            path: Absolute path or a path relative to the API prefix
            data: Optional form fields sent as the request body

        Returns:
            The decoded JSON value, without the script service "d" wrapper

        Raises:
            requests.RequestException: If the connection fails
            ApiError: If the API answers with a non-success status
            ResponseParseError: If the body is not valid UTF-8 JSON
        """
        method = method.upper()
        if method not in ('GET', 'POST'):
            raise ValueError(f'Unsupported HTTP method: {method}')

        url = self.build_url(path)
        logger.debug('%s %s %s', method, url, data or '')
        response = self.session.request(method, url, data=data, timeout=self.timeout)

        if not response.ok:
            raise ApiError(self._error_message(response), status_code=response.status_code)

        try:
            data = json.loads(response.content.decode('utf-8'))
        except UnicodeDecodeError as e:
            raise ResponseParseError(f'Response from {url} is not valid UTF-8: {e}') from e
        except json.JSONDecodeError as e:
            raise ResponseParseError(f'Invalid JSON response from {url}: {e}') from e

        if isinstance(data, dict) and list(data) == ['d']:
            return data['d']
        return data

    def get(self, path):
        return self.request('GET', path)

    def post(self, path, data):
        return self.request('POST', path, data=data)

    def close(self):
        self.session.close()

    def _error_message(self, response):
        """Format the error envelope of a failed response, or fall back to the raw body"""
        body = response.content.decode('utf-8', errors='replace')
        content_type = response.headers.get('Content-Type', '')
        envelope = None
        if 'json' in content_type or 'html' in content_type:
            try:
                envelope = json.loads(body)
            except json.JSONDecodeError:
                envelope = None
        if isinstance(envelope, dict) and list(envelope) == ['d']:
            envelope = envelope['d']

        if isinstance(envelope, dict) and all(field in envelope for field in ERROR_ENVELOPE_FIELDS):
            return (f"HTTP {response.status_code}: {envelope['code']} {envelope['message']} "
                    f"(server {envelope['serverID']} at {envelope['datetime']}): "
                    f"{envelope['response']}")
        return f'HTTP {response.status_code}: {body.strip()}'
