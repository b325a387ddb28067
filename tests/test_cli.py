import xml.etree.ElementTree as ET
from unittest import mock

import pytest
import requests

from meo2xmltv import cli
from tests.conftest import FakeClient


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, 'setup_logging', lambda **kwargs: None)


@pytest.fixture
def use_client(monkeypatch):
    def install(client):
        monkeypatch.setattr(cli, 'ApiClient', lambda **kwargs: client)
        return client
    return install


def read_tv(path):
    return ET.fromstring(path.read_bytes())


def test_grab_writes_xmltv(fake_client, use_client, tmp_path):
    use_client(fake_client)
    output = tmp_path / 'guide.xml'

    status = cli.main(['--days', '2', '--channel', 'RTP1,SIC', '--output', str(output)])

    assert status == 0
    assert fake_client.closed
    assert [data['channels'] for _, data in fake_client.posts] == ['RTP1,SIC', 'RTP1,SIC']
    tv = read_tv(output)
    assert [c.get('id') for c in tv.findall('channel')] == ['rtp1.meo.pt']
    assert len(tv.findall('programme')) == 1


def test_grab_uses_configuration_file(fake_client, use_client, tmp_path):
    use_client(fake_client)
    config = tmp_path / 'grabber.conf'
    config.write_text('channel=TVI\nchannel!SIC\n', encoding='utf-8')

    status = cli.main(['--days', '1', '--config-file', str(config),
                       '--output', str(tmp_path / 'guide.xml')])

    assert status == 0
    assert fake_client.posts[0][1]['channels'] == 'TVI'


def test_zero_day_window_writes_empty_guide(fake_client, use_client, tmp_path):
    use_client(fake_client)
    output = tmp_path / 'guide.xml'

    status = cli.main(['--offset', '7', '--days', '3', '--channel', 'RTP1',
                       '--output', str(output)])

    assert status == 1
    assert fake_client.posts == []
    tv = read_tv(output)
    assert tv.findall('channel') == []
    assert tv.findall('programme') == []


def test_server_error_writes_nothing(use_client, tmp_path):
    use_client(FakeClient(default={'code': 500}))
    output = tmp_path / 'guide.xml'

    assert cli.main(['--channel', 'RTP1', '--output', str(output)]) == 1
    assert not output.exists()


def test_transport_error(use_client, tmp_path):
    client = use_client(FakeClient())
    client.post = mock.Mock(side_effect=requests.ConnectionError('unreachable'))

    assert cli.main(['--channel', 'RTP1', '--output', str(tmp_path / 'guide.xml')]) == 1
    assert client.closed


def test_missing_configuration(fake_client, use_client, tmp_path):
    use_client(fake_client)
    assert cli.main(['--config-file', str(tmp_path / 'none.conf')]) == 1
    assert fake_client.posts == []


def test_list_channels_to_stdout(fake_client, use_client, capsys):
    use_client(fake_client)

    assert cli.main(['--list-channels']) == 0

    tv = ET.fromstring(capsys.readouterr().out.encode('utf-8'))
    assert [c.get('id') for c in tv.findall('channel')] == [
        'rtp1.meo.pt', 'rtp2.meo.pt', 'sic.meo.pt', 'tvi.meo.pt']
    assert tv.find('channel/display-name').text == 'RTP 1'


def test_configure(fake_client, use_client, tmp_path, monkeypatch):
    use_client(fake_client)
    config = tmp_path / 'grabber.conf'
    monkeypatch.setattr('builtins.input', lambda: 'all')

    assert cli.main(['--configure', '--config-file', str(config)]) == 0
    assert config.read_text(encoding='utf-8').count('channel=') == 4


def test_negative_offset_is_rejected(capsys):
    assert cli.main(['--offset', '-1']) == 1
    assert '--offset' in capsys.readouterr().err


def test_capabilities(capsys):
    assert cli.main(['--capabilities']) == 0
    assert capsys.readouterr().out.split() == ['baseline', 'manualconfig']


def test_modes_are_exclusive():
    with pytest.raises(SystemExit):
        cli.main(['--list-channels', '--configure'])


def test_stdout_is_utf8(use_client, capsysbinary):
    use_client(FakeClient(catalog=[{'id': 'CACA', 'name': 'Caça e Pesca'}]))

    assert cli.main(['--list-channels']) == 0

    out = capsysbinary.readouterr().out
    assert 'Caça e Pesca'.encode('utf-8') in out
    tv = ET.fromstring(out)
    assert tv.find('channel/display-name').text == 'Caça e Pesca'


def test_zero_day_window_needs_no_configuration(fake_client, use_client, tmp_path):
    use_client(fake_client)
    output = tmp_path / 'guide.xml'

    status = cli.main(['--offset', '7', '--config-file', str(tmp_path / 'none.conf'),
                       '--output', str(output)])

    assert status == 1
    assert read_tv(output).findall('channel') == []
