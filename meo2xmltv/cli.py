"""Command line entry point: tv_grab_pt_meo"""

import argparse
import logging
import sys

import requests

from meo2xmltv import __version__, settings
from meo2xmltv.channels import list_channels
from meo2xmltv.client import ApiClient
from meo2xmltv.config import configure, load_config
from meo2xmltv.exceptions import GrabberError
from meo2xmltv.grabber import derive_channel_id, fetch_range
from meo2xmltv.models import Channel, ScheduleDocument
from meo2xmltv.schedule import compute_window
from meo2xmltv.xmltv import build_tree, to_xml_string

logger = logging.getLogger(__name__)

CAPABILITIES = ('baseline', 'manualconfig')


def setup_logging(quiet=False, debug=False):
    """Configure logging on standard error"""
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    if debug:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
        force=True,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog=settings.GRABBER_NAME,
        description='Grab TV listings from the MEO web guide in XMLTV format',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Choose the channels to grab
  %(prog)s --configure

  # Grab the whole week to a file
  %(prog)s --output guide.xml

  # Grab two days starting tomorrow for two channels
  %(prog)s --offset 1 --days 2 --channel RTP1,SIC --output guide.xml
        """
    )

    modes = parser.add_mutually_exclusive_group()
    modes.add_argument('--list-channels', action='store_true',
                       help='Output the channels available in XMLTV format and exit')
    modes.add_argument('--configure', action='store_true',
                       help='Choose the channels to grab and write the configuration file')
    modes.add_argument('--version', action='store_true', help='Show the version and exit')
    modes.add_argument('--description', action='store_true',
                       help='Show the grabber description and exit')
    modes.add_argument('--capabilities', action='store_true',
                       help='Show the XMLTV capabilities and exit')

    grab_group = parser.add_argument_group('Grab options')
    grab_group.add_argument('--days', type=int, default=settings.MAX_DAYS,
                            help=f'Number of days to grab (default: {settings.MAX_DAYS})')
    grab_group.add_argument('--offset', type=int, default=0,
                            help='Start grabbing at today + N days (default: 0)')
    grab_group.add_argument('--channel',
                            help='Comma-separated channel ids to grab instead of the configured ones')
    grab_group.add_argument('--output', help='Output XMLTV file path (default: standard output)')
    grab_group.add_argument('--config-file', default=settings.DEFAULT_CONFIG_FILE,
                            help=f'Configuration file (default: {settings.DEFAULT_CONFIG_FILE})')

    http_group = parser.add_argument_group('HTTP options')
    http_group.add_argument('--timeout', type=int, default=settings.DEFAULT_TIMEOUT,
                            help=f'API request timeout in seconds (default: {settings.DEFAULT_TIMEOUT})')
    http_group.add_argument('--insecure', action='store_true',
                            help='Do not verify the TLS certificate of the guide')

    parser.add_argument('--quiet', action='store_true', help='Only log warnings and errors')
    parser.add_argument('--debug', action='store_true', help='Enable debug output')
    return parser


def selected_channels(args):
    """Channel ids from --channel, or from the configuration file"""
    if args.channel:
        channel_ids = [c.strip() for c in args.channel.split(',') if c.strip()]
        if channel_ids:
            return channel_ids
    return load_config(args.config_file)


def write_output(xml_output, path):
    if path is None or path == '-':
        sys.stdout.flush()
        sys.stdout.buffer.write(xml_output.encode('utf-8'))
        sys.stdout.buffer.flush()
        return
    with open(path, 'w', encoding='utf-8') as f:
        f.write(xml_output)
    logger.info('Wrote XMLTV to %s', path)


def grab(client, args):
    """
    Run a grab and write its output

    Returns:
        int: Exit status, 1 when no programme was fetched
    """
    window = compute_window(args.offset, args.days)

    if window.day_count == 0:
        logger.warning('Nothing to fetch: the guide only serves %d days ahead', settings.MAX_DAYS)
        document = ScheduleDocument()
    else:
        channel_ids = selected_channels(args)
        logger.info('Grabbing %d days from %s for %d channels',
                    window.day_count, window.first_day.isoformat(), len(channel_ids))
        document = fetch_range(client, channel_ids, window)

    write_output(to_xml_string(build_tree(document)), args.output)

    if not document.programmes:
        logger.warning('No programmes were fetched')
        return 1
    return 0


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0
    if args.description:
        print(settings.DESCRIPTION)
        return 0
    if args.capabilities:
        print('\n'.join(CAPABILITIES))
        return 0

    if args.offset < 0:
        print('Error: --offset must be at least 0', file=sys.stderr)
        return 1
    if args.days < 0:
        print('Error: --days must be at least 0', file=sys.stderr)
        return 1
    if args.timeout < 1:
        print('Error: --timeout must be at least 1', file=sys.stderr)
        return 1

    setup_logging(quiet=args.quiet, debug=args.debug)

    client = ApiClient(timeout=args.timeout, verify=not args.insecure)
    try:
        if args.list_channels:
            document = ScheduleDocument()
            # Same ids as the grabbed listings, the catalog id is the call letter
            for channel in list_channels(client):
                document.add_channel(Channel(derive_channel_id(channel.id), channel.display_name))
            write_output(to_xml_string(build_tree(document)), args.output)
            return 0

        if args.configure:
            configure(client, args.config_file)
            return 0

        return grab(client, args)

    except GrabberError as e:
        logger.error('Error: %s', e)
        return 1
    except requests.RequestException as e:
        logger.error('Error: API request failed - %s', e)
        return 1
    except OSError as e:
        logger.error('Error: %s', e)
        return 1
    finally:
        client.close()


if __name__ == '__main__':
    sys.exit(main())
