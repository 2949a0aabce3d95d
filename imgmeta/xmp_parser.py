# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
XMP (Extensible Metadata Platform) property extraction

XMP packets are extracted as text by the JPEG and HEIF decoders. This
module flattens the simple properties of such a packet into a
"prefix:Name" -> value mapping.

Copyright 2025 DNAi inc.
"""

import re
import xml.etree.ElementTree as ET
from typing import Dict, Optional

from imgmeta.exceptions import XmpParseError
from imgmeta.log import get_logger

LOGGER = get_logger("xmp_parser")

RDF_NS = 'http://www.w3.org/1999/02/22-rdf-syntax-ns#'

NAMESPACES = {
    'rdf': RDF_NS,
    'x': 'adobe:ns:meta/',
    'xmp': 'http://ns.adobe.com/xap/1.0/',
    'dc': 'http://purl.org/dc/elements/1.1/',
    'photoshop': 'http://ns.adobe.com/photoshop/1.0/',
    'xmpRights': 'http://ns.adobe.com/xap/1.0/rights/',
    'xmpMM': 'http://ns.adobe.com/xap/1.0/mm/',  # Media Management (InstanceID, DocumentID, etc.)
    'stEvt': 'http://ns.adobe.com/xap/1.0/sType/ResourceEvent#',
    'stRef': 'http://ns.adobe.com/xap/1.0/sType/ResourceRef#',
    'tiff': 'http://ns.adobe.com/tiff/1.0/',
    'exif': 'http://ns.adobe.com/exif/1.0/',
    'exifEX': 'http://cipa.jp/exif/1.0/',
    'aux': 'http://ns.adobe.com/exif/1.0/aux/',
    'crs': 'http://ns.adobe.com/camera-raw-settings/1.0/',
    'hdrgm': 'http://ns.adobe.com/hdr-gain-map/1.0/',  # HDR Gain Map
    'GCamera': 'http://ns.google.com/photos/1.0/camera/',  # Google Camera
    'apple_desktop': 'http://ns.apple.com/namespace/1.0/',
    'Iptc4xmpCore': 'http://iptc.org/std/Iptc4xmpCore/1.0/xmlns/',
    'Iptc4xmpExt': 'http://iptc.org/std/Iptc4xmpExt/2008-02-29/',
}

_PREFIXES = {uri: prefix for prefix, uri in NAMESPACES.items()}

# Unknown namespaces are reported under this prefix
DEFAULT_PREFIX = 'XMP'

_XPACKET_RE = re.compile(r'<\?xpacket[^>]*\?>', re.IGNORECASE)
_CONTAINERS = tuple(f'{{{RDF_NS}}}{name}' for name in ('Seq', 'Bag', 'Alt'))


def _split_tag(tag: str) -> str:
    """Turn an ElementTree '{uri}Name' into 'prefix:Name'."""
    if tag.startswith('{'):
        uri, _, local = tag[1:].partition('}')
        return f"{_PREFIXES.get(uri, DEFAULT_PREFIX)}:{local}"
    return tag


def _simple_value(element: ET.Element) -> Optional[str]:
    # rdf:Seq/Bag/Alt -> comma separated rdf:li values
    for child in element:
        if child.tag in _CONTAINERS:
            items = [(li.text or '').strip() for li in child]
            return ', '.join(item for item in items if item)

    resource = element.get(f'{{{RDF_NS}}}resource')
    if resource is not None:
        return resource

    if len(element) == 0:
        return (element.text or '').strip()

    # Nested structures are not flattened
    return None


def parse_xmp_properties(text: str) -> Dict[str, str]:
    """
    Flatten the properties of an XMP packet.

    Attributes and simple-valued children of every rdf:Description become
    entries keyed "prefix:Name". Arrays are joined with ", ". The first
    occurrence of a key wins.

    Args:
        text: XMP packet, with or without <?xpacket?> wrappers

    Returns:
        Dictionary of XMP properties

    Raises:
        XmpParseError: If the packet is not well-formed XML
    """
    # Remove xpacket wrappers to keep XML well-formed
    xml_text = _XPACKET_RE.sub('', text).strip().strip('\x00')
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise XmpParseError(f"Invalid XMP packet: {e}")

    properties: Dict[str, str] = {}

    toolkit = root.get('{adobe:ns:meta/}xmptk')
    if toolkit:
        properties['x:xmptk'] = toolkit.strip()

    for description in root.iter(f'{{{RDF_NS}}}Description'):
        for attr_name, attr_value in description.attrib.items():
            key = _split_tag(attr_name)
            if key.startswith('rdf:'):
                continue
            properties.setdefault(key, attr_value)

        for child in description:
            value = _simple_value(child)
            if value is None:
                LOGGER.debug("Skipping structured XMP property %s", _split_tag(child.tag))
                continue
            properties.setdefault(_split_tag(child.tag), value)

    return properties
