"""XMLTV output"""

from datetime import datetime, timezone
from xml.dom import minidom
from xml.etree.ElementTree import Element, SubElement, tostring

from meo2xmltv import settings
from meo2xmltv.utils import format_xmltv_time


def build_tree(document, generated_at=None):
    """
    Generate the XMLTV tree of a ScheduleDocument

    Channels come first, then the programmes of each channel in the same
    channel order.
    """
    tv = Element('tv')
    tv.set('date', format_xmltv_time(generated_at or datetime.now(timezone.utc)))
    tv.set('generator-info-name', settings.GENERATOR_NAME)
    tv.set('source-info-name', settings.SOURCE_INFO_NAME)
    tv.set('source-info-url', settings.SOURCE_INFO_URL)

    for channel in document.channels.values():
        channel_elem = SubElement(tv, 'channel')
        channel_elem.set('id', channel.id)

        display_name = SubElement(channel_elem, 'display-name')
        display_name.set('lang', settings.LANGUAGE)
        display_name.text = channel.display_name

        if channel.icon_url:
            icon = SubElement(channel_elem, 'icon')
            icon.set('src', channel.icon_url)

    for channel_id in document.channels:
        for programme in document.programmes_for(channel_id):
            _add_programme(tv, programme)

    return tv


def _add_programme(tv, programme):
    prog_elem = SubElement(tv, 'programme')
    prog_elem.set('start', format_xmltv_time(programme.start))
    prog_elem.set('stop', format_xmltv_time(programme.stop))
    prog_elem.set('channel', programme.channel_id)

    title = SubElement(prog_elem, 'title')
    title.set('lang', settings.LANGUAGE)
    title.text = programme.title

    if programme.description:
        desc = SubElement(prog_elem, 'desc')
        desc.set('lang', settings.LANGUAGE)
        desc.text = programme.description

    if programme.episode_num is not None:
        episode_num = SubElement(prog_elem, 'episode-num')
        episode_num.set('system', 'xmltv_ns')
        episode_num.text = programme.episode_num.xmltv_ns()

    if programme.icon_url:
        icon = SubElement(prog_elem, 'icon')
        icon.set('src', programme.icon_url)


def to_xml_string(tv_element):
    """Convert XML element to formatted string with DOCTYPE"""
    rough_string = tostring(tv_element, encoding='unicode')
    reparsed = minidom.parseString(rough_string)
    formatted = reparsed.documentElement.toprettyxml(indent='  ')

    xml_declaration = '<?xml version="1.0" encoding="UTF-8"?>\n'
    doctype = '<!DOCTYPE tv SYSTEM "xmltv.dtd">\n'
    return xml_declaration + doctype + formatted


def write(document, stream, generated_at=None):
    """Serialize a ScheduleDocument to a text stream"""
    stream.write(to_xml_string(build_tree(document, generated_at)))
