# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core decode entry points

This module classifies a buffer and hands it to the matching container
decoder: HEIF, JPEG or a bare TIFF structure.

Copyright 2025 DNAi inc.
"""

from pathlib import Path
from typing import Optional, Union

from imgmeta.config import DecoderConfig
from imgmeta.exceptions import UnsupportedFormatError
from imgmeta.exif_parser import Tiff, read_tiff
from imgmeta.format_detector import FileKind, classify
from imgmeta.heic_parser import Heif, read_heif
from imgmeta.jpeg_parser import Jpeg, read_jpeg
from imgmeta.log import get_logger

LOGGER = get_logger("core")

DecodeResult = Union[Heif, Jpeg, Tiff]


def decode(data: bytes, config: Optional[DecoderConfig] = None) -> DecodeResult:
    """
    Decode the metadata of an in-memory image file.

    Args:
        data: Whole file contents
        config: Optional decoder limits

    Returns:
        Heif, Jpeg or Tiff depending on the detected format

    Raises:
        UnsupportedFormatError: If the format is PNG or unknown
        MetadataReadError: If the file is malformed
    """
    kind = classify(data)
    LOGGER.debug("Detected format %s", kind.value if kind else None)

    if kind is FileKind.HEIF:
        return read_heif(data, config)
    if kind is FileKind.JPEG:
        return read_jpeg(data, config)
    if kind is FileKind.TIFF:
        return read_tiff(data, config)
    if kind is FileKind.PNG:
        raise UnsupportedFormatError("PNG files are recognized but not decoded")
    raise UnsupportedFormatError("Unknown or unsupported file type")


def decode_file(file_path: Union[str, Path], config: Optional[DecoderConfig] = None) -> DecodeResult:
    """
    Read a whole file and decode it.

    Args:
        file_path: Path to the image file
        config: Optional decoder limits

    Raises:
        FileNotFoundError: If the file does not exist
    """
    file_path = Path(file_path)
    with open(file_path, 'rb') as f:
        data = f.read()
    LOGGER.debug("Read %d bytes from %s", len(data), file_path)
    return decode(data, config)
