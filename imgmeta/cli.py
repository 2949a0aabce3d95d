# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for imgmeta

Decodes one file and prints its metadata structure as indented text.

Copyright 2025 DNAi inc.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from imgmeta.config import DecoderConfig
from imgmeta.core import DecodeResult, decode_file
from imgmeta.exceptions import ImgMetaError, XmpParseError
from imgmeta.exif_parser import Tiff
from imgmeta.heic_boxes import (
    Box,
    DinfBox,
    IinfBox,
    IlocBox,
    IrefBox,
    MetaBox,
    UnknownBox,
)
from imgmeta.heic_parser import Heif
from imgmeta.jpeg_parser import Jpeg
from imgmeta.log import configure_logging, get_logger
from imgmeta.xmp_parser import parse_xmp_properties

LOGGER = get_logger("cli")
INDENT = "  "


def _format_tiff(tiff: Tiff, depth: int) -> List[str]:
    pad = INDENT * depth
    lines = [f"{pad}Byte order: {tiff.endianness.name.lower()}-endian"]
    for tag in tiff.tags:
        if tag.is_unknown:
            entry = tag.entry
            lines.append(f"{pad}{entry.name} ({entry.value_type.name}): {entry.values}")
        else:
            lines.append(f"{pad}{tag.name}: {tag.value}")
    return lines


def _format_xmp(xmp: str, depth: int) -> List[str]:
    pad = INDENT * depth
    try:
        properties = parse_xmp_properties(xmp)
    except XmpParseError as e:
        LOGGER.warning("Could not parse XMP packet: %s", e)
        return [f"{pad}{line}" for line in xmp.splitlines()]
    return [f"{pad}{key}: {value}" for key, value in properties.items()]


def _format_box(box: Box, depth: int) -> List[str]:
    pad = INDENT * depth
    lines = [f"{pad}[{box.name}] {box.size} bytes"]
    inner = INDENT * (depth + 1)

    if isinstance(box, MetaBox):
        for child in box.children:
            lines.extend(_format_box(child, depth + 1))
    elif isinstance(box, IinfBox):
        lines.append(f"{inner}{len(box.entries)} item(s)")
        for entry in box.entries:
            lines.append(f"{inner}{entry.value}")
    elif isinstance(box, IlocBox):
        lines.append(f"{inner}{len(box.items)} location(s)")
        for item in box.items:
            extents = ", ".join(f"{e.extent_offset}+{e.extent_length}" for e in item.extents)
            lines.append(f"{inner}item {item.item_id}: {extents}")
    elif isinstance(box, IrefBox):
        for reference in box.references:
            lines.append(f"{inner}{reference.reference_type} {reference.from_item_id} -> "
                         f"{reference.to_item_ids}")
    elif isinstance(box, DinfBox):
        lines.extend(_format_box(box.dref, depth + 1))
    elif not isinstance(box, UnknownBox):
        lines.append(f"{inner}{box}")
    return lines


def format_result(result: DecodeResult) -> str:
    """
    Render a decode result as indented text.

    Args:
        result: Heif, Jpeg or Tiff

    Returns:
        Multi-line string
    """
    lines: List[str] = []
    if isinstance(result, Heif):
        lines.append("HEIF")
        lines.append(f"{INDENT}Boxes:")
        for box in result.boxes:
            lines.extend(_format_box(box, 2))
    elif isinstance(result, Jpeg):
        lines.append("JPEG")
        lines.append(f"{INDENT}Segments: " + ", ".join(s.name for s in result.sections))
        if result.comment is not None:
            lines.append(f"{INDENT}Comment: {result.comment}")
    else:
        lines.append("TIFF")
        lines.extend(_format_tiff(result, 1))
        return "\n".join(lines)

    if result.exif is not None:
        lines.append(f"{INDENT}Exif:")
        lines.extend(_format_tiff(result.exif, 2))
    else:
        lines.append(f"{INDENT}Exif: none")

    if result.xmp is not None:
        lines.append(f"{INDENT}XMP:")
        lines.extend(_format_xmp(result.xmp, 2))
    else:
        lines.append(f"{INDENT}XMP: none")
    return "\n".join(lines)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imgmeta",
        description="Print the EXIF, XMP and container metadata of a HEIF, JPEG or TIFF file",
    )
    parser.add_argument("file", type=Path, help="Image file to decode")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code: 0 on success, 1 on any decode or I/O error
    """
    args = create_parser().parse_args(argv)

    try:
        config = DecoderConfig.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    configure_logging(config.log_level)

    try:
        result = decode_file(args.file, config)
    except (ImgMetaError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
