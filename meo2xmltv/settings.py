"""Provider endpoints and grabber defaults"""

import os

from meo2xmltv import __version__

GRABBER_NAME = 'tv_grab_pt_meo'
GENERATOR_NAME = f'meo2xmltv/{__version__}'
DESCRIPTION = 'Portugal (MEO)'

BASE_URL = 'https://www.meo.pt'
API_PREFIX = '/_layouts/15/Ptsi.Isites.GridTv/GridTvMng.asmx/'
CATALOG_PATH = 'getGridAnon'
EPG_PATH = 'getProgramsFromChannels'

SOURCE_INFO_NAME = 'MEO'
SOURCE_INFO_URL = 'https://www.meo.pt/tv/canais-programacao/guia-tv'

CHANNEL_ID_SUFFIX = '.meo.pt'
CHANNEL_ICON_URL = 'https://www.meo.pt/PublishingImages/canais/meo-canal-{channel_number}.png'
PROGRAMME_ICON_URL = ('https://proxycache.online.meo.pt/eemstb/ImageHandler.ashx'
                      '?evTitle=&chCallLetter={call_letter}&progId={programme_id}'
                      '&profile=16_9&width=600')

TIMEZONE = 'Europe/Lisbon'
LANGUAGE = 'pt'

# The web guide never serves more than a week ahead
MAX_DAYS = 7

DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                      '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36')

XMLTV_DIR = os.path.expanduser('~/.xmltv')
DEFAULT_CONFIG_FILE = os.path.join(XMLTV_DIR, f'{GRABBER_NAME}.conf')
