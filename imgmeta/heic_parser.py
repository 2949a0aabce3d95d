# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
HEIC/HEIF (High Efficiency Image Format) metadata parser

This module handles reading metadata from HEIC/HEIF files.
HEIC is a container format whose metadata lives in items: the meta box
lists them (iinf) and says where their bytes are (iloc). The Exif item
holds a TIFF structure and XMP is stored as a "mime" item.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from imgmeta.byte_reader import ByteReader
from imgmeta.config import DecoderConfig, DEFAULT_CONFIG
from imgmeta.exif_parser import EXIF_HEADER, Tiff, read_exif_section, read_tiff
from imgmeta.heic_boxes import (
    Box,
    IinfBox,
    IlocBox,
    ItemInfoV2V3,
    ItemLocation,
    MetaBox,
    PitmBox,
    read_boxes,
)
from imgmeta.log import get_logger

LOGGER = get_logger("heic_parser")

EXIF_ITEM_TYPE = "Exif"
XMP_ITEM_TYPE = "mime"


@dataclass
class Heif:
    """Decoded HEIF container: the box tree and its metadata items."""
    boxes: List[Box] = field(repr=False)
    exif: Optional[Tiff]
    xmp: Optional[str]

    @property
    def meta(self) -> Optional[MetaBox]:
        return find_meta(self.boxes)

    @property
    def primary_item_id(self) -> Optional[int]:
        meta = self.meta
        pitm = meta.find_child(PitmBox) if meta else None
        return pitm.item_id if pitm else None


def find_meta(boxes: List[Box]) -> Optional[MetaBox]:
    for box in boxes:
        if isinstance(box, MetaBox):
            return box
    return None


def find_item_location(boxes: List[Box], item_type: str) -> Optional[ItemLocation]:
    """
    Locate the first item of a given type.

    Args:
        boxes: Top-level boxes of the file
        item_type: Four-character item type, e.g. "Exif" or "mime"

    Returns:
        The iloc entry of the first version 2/3 infe with that type, or None
        when the meta, iinf or iloc box or a matching entry is missing
    """
    meta = find_meta(boxes)
    if meta is None:
        return None
    iinf = meta.find_child(IinfBox)
    iloc = meta.find_child(IlocBox)
    if iinf is None or iloc is None:
        return None

    item_id = None
    for entry in iinf.entries:
        if isinstance(entry.value, ItemInfoV2V3) and entry.value.item_type == item_type:
            item_id = entry.value.item_id
            break
    if item_id is None:
        return None

    for item in iloc.items:
        if item.item_id == item_id:
            return item
    return None


class HEICParser:
    """
    Parser for HEIC/HEIF metadata held in memory.

    HEIC files use the ISO Base Media File Format (ISOBMFF) container,
    which is similar to MP4. Metadata is stored in items addressed by the
    meta box.
    """

    def __init__(self, file_data: bytes, config: Optional[DecoderConfig] = None):
        """
        Initialize HEIC parser.

        Args:
            file_data: HEIC file data bytes
            config: Decoder limits, defaults when None
        """
        self.reader = ByteReader(file_data)
        self.config = config or DEFAULT_CONFIG
        self.boxes: List[Box] = []

    def parse(self) -> Heif:
        """
        Parse the box tree and resolve the Exif and XMP items.

        Returns:
            Heif result; exif and xmp are None when the file has no such item

        Raises:
            MetadataReadError: If a box is malformed or the Exif item is
                present but cannot be decoded
        """
        self.boxes = read_boxes(self.reader.data)
        LOGGER.debug("Decoded %d top-level box(es)", len(self.boxes))

        return Heif(boxes=self.boxes, exif=self.get_exif(), xmp=self.get_xmp())

    def read_item_data(self, item_type: str) -> Optional[bytes]:
        """
        Bytes of the first item with the given type.

        Only the first extent is read. Its offset is relative to the
        item's base_offset, which is 0 for most encoders.
        """
        location = find_item_location(self.boxes, item_type)
        if location is None:
            LOGGER.debug("No %r item", item_type)
            return None
        if not location.extents:
            LOGGER.debug("%r item %d has no extents", item_type, location.item_id)
            return None
        if len(location.extents) > 1:
            LOGGER.debug("%r item %d has %d extents, reading the first",
                         item_type, location.item_id, len(location.extents))

        extent = location.extents[0]
        return self.reader.slice(location.base_offset + extent.extent_offset, extent.extent_length)

    def get_exif(self) -> Optional[Tiff]:
        """
        Decode the Exif item.

        The item opens with a big-endian u32 giving the distance from the
        end of that field to the TIFF header. Encoders usually write 6 and
        put "Exif\\0\\0" in between; an identifier found at the target is
        also accepted.
        """
        data = self.read_item_data(EXIF_ITEM_TYPE)
        if data is None:
            return None
        reader = ByteReader(data)
        tiff_header_offset = reader.read_u32()
        reader.skip(tiff_header_offset)
        payload = data[reader.position:]
        LOGGER.debug("Exif item TIFF header offset %d", tiff_header_offset)
        if payload.startswith(EXIF_HEADER):
            return read_exif_section(payload, self.config)
        return read_tiff(payload, self.config)

    def get_xmp(self) -> Optional[str]:
        data = self.read_item_data(XMP_ITEM_TYPE)
        if data is None:
            return None
        return data.decode('utf-8', errors='replace')


def read_heif(data: bytes, config: Optional[DecoderConfig] = None) -> Heif:
    """
    Decode a HEIF/HEIC buffer.

    Args:
        data: Whole file contents
        config: Optional decoder limits

    Returns:
        Decoded Heif
    """
    return HEICParser(data, config).parse()
