# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
imgmeta - EXIF, XMP and item-map reader for HEIF, JPEG and TIFF

A pure Python decoder for the metadata containers of still images:
ISOBMFF/HEIF boxes, JPEG marker segments and TIFF/EXIF directories.
All parsing is done by directly reading binary file structures.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from imgmeta.config import DecoderConfig
from imgmeta.core import decode, decode_file
from imgmeta.exceptions import (
    ImgMetaError,
    MetadataReadError,
    TruncatedInputError,
    BadMagicError,
    UnexpectedMarkerError,
    UnrecognizedValueTypeError,
    TypeMismatchError,
    ArityMismatchError,
    UnexpectedChildTypeError,
    FieldWidthOutOfRangeError,
    UnsupportedVersionError,
    XmpParseError,
    UnsupportedFormatError,
)
from imgmeta.exif_parser import Rational, Tiff, TiffTag, read_tiff
from imgmeta.format_detector import FileKind, classify
from imgmeta.heic_parser import Heif, find_item_location, read_heif
from imgmeta.jpeg_parser import Jpeg, JpegSection, read_jpeg
from imgmeta.xmp_parser import parse_xmp_properties

__all__ = [
    "DecoderConfig",
    "decode",
    "decode_file",
    "ImgMetaError",
    "MetadataReadError",
    "TruncatedInputError",
    "BadMagicError",
    "UnexpectedMarkerError",
    "UnrecognizedValueTypeError",
    "TypeMismatchError",
    "ArityMismatchError",
    "UnexpectedChildTypeError",
    "FieldWidthOutOfRangeError",
    "UnsupportedVersionError",
    "XmpParseError",
    "UnsupportedFormatError",
    "Rational",
    "Tiff",
    "TiffTag",
    "read_tiff",
    "FileKind",
    "classify",
    "Heif",
    "find_item_location",
    "read_heif",
    "Jpeg",
    "JpegSection",
    "read_jpeg",
    "parse_xmp_properties",
]
