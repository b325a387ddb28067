import json

import pytest
import requests


class FakeClient:
    """Stands in for ApiClient, answering from canned payloads"""

    def __init__(self, catalog=None, days=None, default=None):
        self.catalog = catalog
        self.days = days or {}
        self.default = default
        self.posts = []
        self.closed = False

    def get(self, path):
        return self.catalog

    def post(self, path, data):
        self.posts.append((path, data))
        return self.days.get(data['date'], self.default)

    def close(self):
        self.closed = True


def make_response(status_code=200, body=b'', content_type='application/json; charset=utf-8'):
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.headers['Content-Type'] = content_type
    response.url = 'https://www.meo.pt/test'
    return response


def programme(title='Telejornal', date='25-12-2023', start='20:00', end='21:00',
              duration=60, description='Noticias', unique_id='1001'):
    return {
        'uniqueId': unique_id,
        'name': title,
        'description': description,
        'date': date,
        'timeIni': start,
        'timeEnd': end,
        'duration': duration,
    }


def channel_block(sigla='RTP1', number=5, name='RTP 1', programs=None):
    return {
        'id': number,
        'sigla': sigla,
        'name': name,
        'programs': programs if programs is not None else [programme()],
    }


@pytest.fixture
def fake_client():
    return FakeClient(
        catalog=[
            {'id': 'RTP1', 'name': 'RTP 1'},
            {'id': 'RTP2', 'name': 'RTP 2'},
            {'id': 'SIC', 'name': 'SIC'},
            {'id': 'TVI', 'name': 'TVI'},
        ],
        default={'channels': [channel_block()]},
    )
