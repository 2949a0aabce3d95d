# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
File format detector

This module classifies a buffer as JPEG, PNG, TIFF or HEIF from its
leading bytes.

Copyright 2025 DNAi inc.
"""

import struct
from enum import Enum
from typing import Dict, Optional


class FileKind(Enum):
    JPEG = 'JPEG'
    PNG = 'PNG'
    TIFF = 'TIFF'
    HEIF = 'HEIF'


# Format signatures (magic numbers)
FORMAT_SIGNATURES: Dict[bytes, FileKind] = {
    b'\xff\xd8\xff': FileKind.JPEG,
    b'\x89PNG\r\n\x1a\n': FileKind.PNG,
    b'II*\x00': FileKind.TIFF,
    b'MM\x00*': FileKind.TIFF,
}

# ftyp brands of HEIF-family files (HEIC, HEIF image/sequence, AVIF)
HEIF_BRANDS = frozenset([
    b'heic', b'heix', b'heim', b'heis',
    b'hevc', b'hevx', b'hevm', b'hevs',
    b'mif1', b'msf1', b'mif2',
    b'avif', b'avis',
])


def _is_heif(data: bytes) -> bool:
    """
    Check for a leading ftyp box naming a HEIF brand.

    Plain MP4/MOV files also start with ftyp, so the brands decide.
    """
    if len(data) < 12 or data[4:8] != b'ftyp':
        return False

    box_size = struct.unpack('>I', data[0:4])[0]
    # Size 0/1 are special; fall back to scanning what is there
    if box_size < 16 or box_size > len(data):
        box_size = min(len(data), 64)

    if data[8:12] in HEIF_BRANDS:
        return True
    for offset in range(16, box_size - 3, 4):
        if data[offset:offset + 4] in HEIF_BRANDS:
            return True
    return False


def classify(data: bytes) -> Optional[FileKind]:
    """
    Detect the kind of a file from its signature.

    Args:
        data: File data (at least the first few dozen bytes)

    Returns:
        FileKind or None if not recognized
    """
    for signature, kind in FORMAT_SIGNATURES.items():
        if data.startswith(signature):
            return kind
    if _is_heif(data):
        return FileKind.HEIF
    return None
