# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG marker segment scanner

This module splits a JPEG file into its marker segments and extracts the
Exif (APP1 "Exif\\0\\0"), XMP (APP1 namespace URI) and comment (COM)
payloads. Entropy-coded scan data following SOS is attached to the SOS
segment.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from imgmeta.byte_reader import ByteReader
from imgmeta.config import DecoderConfig, DEFAULT_CONFIG
from imgmeta.exceptions import UnexpectedMarkerError
from imgmeta.exif_parser import EXIF_HEADER, Tiff, read_exif_section
from imgmeta.log import get_logger

LOGGER = get_logger("jpeg_parser")

# XMP APP1 payloads open with a namespace URI such as
# "http://ns.adobe.com/xap/1.0/\0"
XMP_PREFIX = b'http'


class JpegMarker(IntEnum):
    """Second byte of a JPEG marker"""
    TEM = 0x01

    SOF0 = 0xC0  # Baseline DCT
    SOF1 = 0xC1  # Extended sequential DCT
    SOF2 = 0xC2  # Progressive DCT
    SOF3 = 0xC3  # Lossless
    DHT = 0xC4   # Define Huffman Table
    SOF5 = 0xC5
    SOF6 = 0xC6
    SOF7 = 0xC7
    JPG = 0xC8
    SOF9 = 0xC9
    SOF10 = 0xCA
    SOF11 = 0xCB
    DAC = 0xCC   # Define Arithmetic Coding
    SOF13 = 0xCD
    SOF14 = 0xCE
    SOF15 = 0xCF

    RST0 = 0xD0
    RST1 = 0xD1
    RST2 = 0xD2
    RST3 = 0xD3
    RST4 = 0xD4
    RST5 = 0xD5
    RST6 = 0xD6
    RST7 = 0xD7
    SOI = 0xD8   # Start of Image
    EOI = 0xD9   # End of Image
    SOS = 0xDA   # Start of Scan
    DQT = 0xDB   # Define Quantization Table
    DNL = 0xDC
    DRI = 0xDD   # Define Restart Interval
    DHP = 0xDE
    EXP = 0xDF

    APP0 = 0xE0  # JFIF
    APP1 = 0xE1  # EXIF / XMP
    APP2 = 0xE2  # ICC profile
    APP3 = 0xE3
    APP4 = 0xE4
    APP5 = 0xE5
    APP6 = 0xE6
    APP7 = 0xE7
    APP8 = 0xE8
    APP9 = 0xE9
    APP10 = 0xEA
    APP11 = 0xEB
    APP12 = 0xEC
    APP13 = 0xED  # IPTC
    APP14 = 0xEE  # Adobe
    APP15 = 0xEF

    COM = 0xFE   # Comment


RESTART_MARKERS = range(JpegMarker.RST0, JpegMarker.RST7 + 1)

# Markers without a length field
STANDALONE_MARKERS = frozenset([JpegMarker.TEM, JpegMarker.SOI, *RESTART_MARKERS])


@dataclass
class JpegSection:
    """One marker segment. For SOS the scan data follows the header bytes."""
    marker: int
    data: bytes = field(repr=False)

    @property
    def name(self) -> str:
        try:
            return JpegMarker(self.marker).name
        except ValueError:
            return f"0x{self.marker:02X}"


@dataclass
class Jpeg:
    sections: List[JpegSection] = field(repr=False)
    exif: Optional[Tiff]
    xmp: Optional[str]
    comment: Optional[str]


def _scan_end(data: bytes, start: int) -> int:
    """
    Offset of the first marker after entropy-coded data.

    0xFF followed by 0x00 (a stuffed byte), 0xFF (fill) or a restart
    marker belongs to the scan.
    """
    position = start
    while True:
        index = data.find(b'\xff', position)
        if index == -1 or index + 1 >= len(data):
            return len(data)
        following = data[index + 1]
        if following in (0x00, 0xFF) or following in RESTART_MARKERS:
            position = index + 1
            continue
        return index


def get_jpeg_sections(data: bytes) -> List[JpegSection]:
    """
    Split a JPEG file into marker segments.

    Scanning starts after the SOI marker and stops at EOI or when two bytes
    or fewer remain.

    Args:
        data: Whole JPEG file

    Returns:
        Segments in file order

    Raises:
        UnexpectedMarkerError: A segment does not start with 0xFF
        TruncatedInputError: A segment runs past the end of the data
    """
    reader = ByteReader(data)
    reader.seek(min(2, len(data)))
    sections: List[JpegSection] = []

    while reader.remaining > 2:
        offset = reader.position
        lead = reader.read_u8()
        if lead != 0xFF:
            raise UnexpectedMarkerError(offset, lead)
        marker = reader.read_u8()

        if marker == 0xFF:
            # Fill byte before the real marker
            reader.seek(offset + 1)
            continue
        if marker == JpegMarker.EOI:
            break
        if marker in STANDALONE_MARKERS:
            sections.append(JpegSection(marker, b''))
            continue

        length = reader.read_u16()
        payload = reader.read_bytes(length - 2)

        if marker == JpegMarker.SOS:
            end = _scan_end(data, reader.position)
            LOGGER.debug("Scan data at offset %d, %d bytes", reader.position,
                         end - reader.position)
            payload += reader.read_bytes(end - reader.position)

        sections.append(JpegSection(marker, payload))

    LOGGER.debug("Found %d JPEG segment(s)", len(sections))
    return sections


def _first_app1(sections: List[JpegSection], prefix: bytes) -> Optional[bytes]:
    for section in sections:
        if section.marker == JpegMarker.APP1 and section.data.startswith(prefix):
            return section.data
    return None


def parse_xmp_section(data: bytes) -> str:
    """XMP packet of an APP1 payload, without its namespace identifier."""
    _, separator, packet = data.partition(b'\x00')
    if not separator:
        packet = data
    return packet.decode('utf-8', errors='replace')


def read_jpeg(data: bytes, config: Optional[DecoderConfig] = None) -> Jpeg:
    """
    Decode the metadata segments of a JPEG file.

    Args:
        data: Whole JPEG file
        config: Optional decoder limits

    Returns:
        Jpeg with the segment list and the first Exif, XMP and comment payloads

    Raises:
        MetadataReadError: If the segments are malformed or the Exif segment
            cannot be decoded
    """
    config = config or DEFAULT_CONFIG
    sections = get_jpeg_sections(data)

    exif = None
    exif_data = _first_app1(sections, EXIF_HEADER)
    if exif_data is not None:
        exif = read_exif_section(exif_data, config)

    xmp = None
    xmp_data = _first_app1(sections, XMP_PREFIX)
    if xmp_data is not None:
        xmp = parse_xmp_section(xmp_data)

    comment = None
    for section in sections:
        if section.marker == JpegMarker.COM:
            comment = section.data.decode('utf-8', errors='replace')
            break

    return Jpeg(sections=sections, exif=exif, xmp=xmp, comment=comment)
