# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF/EXIF directory decoder

This module decodes the TIFF structure shared by standalone TIFF files,
JPEG APP1 Exif segments and HEIF Exif items. It walks the IFD chain,
decodes every typed entry (inline or offset-indirected), follows the Exif
and GPS sub-directory pointers and projects raw entries into named tags.

Copyright 2025 DNAi inc.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from imgmeta.byte_reader import ByteReader, BIG_ENDIAN, LITTLE_ENDIAN
from imgmeta.config import DecoderConfig, DEFAULT_CONFIG
from imgmeta.exceptions import (
    ArityMismatchError,
    BadMagicError,
    TruncatedInputError,
    TypeMismatchError,
    UnrecognizedValueTypeError,
)
from imgmeta.exif_tags import (
    COLOR_SPACE_VALUES,
    COMPRESSION_VALUES,
    CONTRAST_VALUES,
    CUSTOM_RENDERED_VALUES,
    EXPOSURE_MODE_VALUES,
    EXPOSURE_PROGRAM_VALUES,
    FLASH_VALUES,
    GAIN_CONTROL_VALUES,
    GPS_ALTITUDE_REF_VALUES,
    LIGHT_SOURCE_VALUES,
    METERING_MODE_VALUES,
    RESOLUTION_UNIT_VALUES,
    SATURATION_VALUES,
    SCENE_CAPTURE_TYPE_VALUES,
    SCENE_TYPE_VALUES,
    SENSING_METHOD_VALUES,
    SHARPNESS_VALUES,
    SUBJECT_DISTANCE_RANGE_VALUES,
    USER_COMMENT_ENCODINGS,
    WHITE_BALANCE_VALUES,
    YCBCR_POSITIONING_VALUES,
    get_tag_name,
)
from imgmeta.log import get_logger

LOGGER = get_logger("exif_parser")


class TiffValueType(IntEnum):
    """TIFF 6.0 field types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12


# TIFF field sizes in bytes
TAG_SIZES = {
    TiffValueType.BYTE: 1,
    TiffValueType.ASCII: 1,
    TiffValueType.SHORT: 2,
    TiffValueType.LONG: 4,
    TiffValueType.RATIONAL: 8,
    TiffValueType.SBYTE: 1,
    TiffValueType.UNDEFINED: 1,
    TiffValueType.SSHORT: 2,
    TiffValueType.SLONG: 4,
    TiffValueType.SRATIONAL: 8,
    TiffValueType.FLOAT: 4,
    TiffValueType.DOUBLE: 8,
}

_BYTE_TYPES = (TiffValueType.BYTE, TiffValueType.ASCII, TiffValueType.UNDEFINED)
_RATIONAL_TYPES = (TiffValueType.RATIONAL, TiffValueType.SRATIONAL)
_REAL_TYPES = (
    TiffValueType.RATIONAL,
    TiffValueType.SRATIONAL,
    TiffValueType.FLOAT,
    TiffValueType.DOUBLE,
)

EXIF_HEADER = b'Exif\x00\x00'


class Endianness(Enum):
    """Byte order declared by a TIFF header"""
    LITTLE = LITTLE_ENDIAN
    BIG = BIG_ENDIAN


class Rational(NamedTuple):
    """A RATIONAL or SRATIONAL value, kept exact."""
    numerator: int
    denominator: int

    def __float__(self) -> float:
        if self.denominator == 0:
            # IEEE semantics, matching a float division by zero in C
            if self.numerator == 0:
                return math.nan
            return math.copysign(math.inf, self.numerator)
        return self.numerator / self.denominator

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


@dataclass
class IFDEntry:
    """One raw (tag, type, values) record from an Image File Directory."""
    tag: int
    value_type: TiffValueType
    values: List[Any]

    @property
    def name(self) -> str:
        return get_tag_name(self.tag)

    def single_value(self) -> Any:
        if len(self.values) != 1:
            raise ArityMismatchError(self.tag, 1, len(self.values))
        return self.values[0]


@dataclass
class TiffTag:
    """
    A semantically decoded tag.

    Tags without a projection have the name "Unknown" and carry the raw
    IFDEntry as their value.
    """
    name: str
    value: Any
    entry: IFDEntry = field(repr=False)

    @property
    def tag_id(self) -> int:
        return self.entry.tag

    @property
    def is_unknown(self) -> bool:
        return self.name == UNKNOWN_TAG


UNKNOWN_TAG = "Unknown"


@dataclass
class Tiff:
    """Decoded TIFF/EXIF directory data, in directory-visit order."""
    tags: List[TiffTag]
    endianness: Endianness

    def get(self, name: str, default: Any = None) -> Any:
        """Value of the first tag with this name, or default."""
        return get_tag_value(self.tags, name, default)

    def get_all(self, name: str) -> List[Any]:
        """Values of every tag with this name (ids may repeat across directories)."""
        return [tag.value for tag in self.tags if tag.name == name]

    def as_dict(self) -> Dict[str, Any]:
        """
        Flatten known tags to a name -> value mapping.

        The first occurrence of a name wins. Unknown tags are keyed by
        their display name or hex id.
        """
        result: Dict[str, Any] = {}
        for tag in self.tags:
            if tag.is_unknown:
                key = tag.entry.name
                value = tag.entry.values
            else:
                key = tag.name
                value = tag.value
            result.setdefault(key, value)
        return result


def get_tag_value(tags: List[TiffTag], name: str, default: Any = None) -> Any:
    """Return the value of the first tag called name, or default."""
    for tag in tags:
        if tag.name == name:
            return tag.value
    return default


# ============================================================
# Semantic projection
# ============================================================

def _require_types(entry: IFDEntry, allowed: Tuple[TiffValueType, ...], expected: str) -> None:
    if entry.value_type not in allowed:
        raise TypeMismatchError(entry.tag, expected, entry.value_type.name)


def _ascii(entry: IFDEntry) -> str:
    _require_types(entry, (TiffValueType.ASCII,), "ASCII")
    return bytes(entry.values).rstrip(b'\x00').decode('utf-8', errors='replace')


def _raw_bytes(entry: IFDEntry) -> bytes:
    _require_types(entry, _BYTE_TYPES, "BYTE/ASCII/UNDEFINED")
    return bytes(entry.values)


def _byte(entry: IFDEntry) -> int:
    _require_types(entry, (TiffValueType.BYTE,), "BYTE")
    return entry.single_value()


def _short(entry: IFDEntry) -> int:
    _require_types(entry, (TiffValueType.SHORT,), "SHORT")
    return entry.single_value()


def _long(entry: IFDEntry) -> int:
    _require_types(entry, (TiffValueType.LONG,), "LONG")
    return entry.single_value()


def _short_or_long(entry: IFDEntry) -> int:
    _require_types(entry, (TiffValueType.SHORT, TiffValueType.LONG), "SHORT/LONG")
    return entry.single_value()


def _real(entry: IFDEntry) -> float:
    _require_types(entry, _REAL_TYPES, "RATIONAL/SRATIONAL/FLOAT/DOUBLE")
    return float(entry.single_value())


def _real_triple(entry: IFDEntry) -> Tuple[float, float, float]:
    _require_types(entry, _REAL_TYPES, "RATIONAL/SRATIONAL/FLOAT/DOUBLE")
    if len(entry.values) != 3:
        raise ArityMismatchError(entry.tag, 3, len(entry.values))
    return tuple(float(v) for v in entry.values)


def _byte_quad(entry: IFDEntry) -> Tuple[int, int, int, int]:
    data = _raw_bytes(entry)
    if len(data) != 4:
        raise ArityMismatchError(entry.tag, 4, len(data))
    return tuple(data)


def _rational_repr(entry: IFDEntry) -> str:
    _require_types(entry, _RATIONAL_TYPES, "RATIONAL/SRATIONAL")
    return str(entry.single_value())


def _undefined_string(entry: IFDEntry) -> str:
    _require_types(entry, (TiffValueType.UNDEFINED,), "UNDEFINED")
    return bytes(entry.values).decode('utf-8', errors='replace')


def user_comment_encoding(data: bytes) -> str:
    """Character code declared by the 8-byte UserComment prefix."""
    return USER_COMMENT_ENCODINGS.get(bytes(data[:8]), 'unknown')


def _user_comment(entry: IFDEntry) -> str:
    data = _raw_bytes(entry)
    if len(data) < 8:
        raise ArityMismatchError(entry.tag, 8, len(data))

    encoding = user_comment_encoding(data)
    if encoding in ('jis', 'unicode'):
        # TODO: decode JIS and UCS-2 comments instead of reading them as UTF-8
        LOGGER.debug("UserComment declares %s encoding, rendering as UTF-8", encoding)
    return data[8:].rstrip(b'\x00').decode('utf-8', errors='replace')


def _enum(table: Dict[int, str], fallback: str = "Invalid") -> Callable[[IFDEntry], str]:
    def decode(entry: IFDEntry) -> str:
        return table.get(_short(entry), fallback)
    return decode


def _enum_undefined(table: Dict[int, str], fallback: str = "Invalid") -> Callable[[IFDEntry], str]:
    def decode(entry: IFDEntry) -> str:
        _require_types(entry, (TiffValueType.UNDEFINED, TiffValueType.BYTE), "UNDEFINED/BYTE")
        return table.get(entry.single_value(), fallback)
    return decode


def _gps_altitude_ref(entry: IFDEntry) -> str:
    return GPS_ALTITUDE_REF_VALUES.get(_byte(entry), "Invalid")


# tag id -> (tag name, decoder)
TAG_DECODERS: Dict[int, Tuple[str, Callable[[IFDEntry], Any]]] = {
    # GPS IFD
    0: ("GPSVersionID", _byte_quad),
    1: ("GPSLatitudeRef", _ascii),
    2: ("GPSLatitude", _real_triple),
    3: ("GPSLongitudeRef", _ascii),
    4: ("GPSLongitude", _real_triple),
    5: ("GPSAltitudeRef", _gps_altitude_ref),
    6: ("GPSAltitude", _real),
    7: ("GPSTimeStamp", _real_triple),
    8: ("GPSSatellites", _ascii),
    9: ("GPSStatus", _ascii),
    16: ("GPSImgDirectionRef", _ascii),
    17: ("GPSImgDirection", _real),
    18: ("GPSMapDatum", _ascii),
    29: ("GPSDateStamp", _ascii),

    # IFD0
    256: ("ImageWidth", _short_or_long),
    257: ("ImageLength", _short_or_long),
    259: ("Compression", _enum(COMPRESSION_VALUES, "Invalid/Unknown")),
    270: ("ImageDescription", _ascii),
    271: ("Make", _ascii),
    272: ("Model", _ascii),
    274: ("Orientation", _short),
    282: ("XResolution", _real),
    283: ("YResolution", _real),
    296: ("ResolutionUnit", _enum(RESOLUTION_UNIT_VALUES, "invalid")),
    305: ("Software", _ascii),
    306: ("DateTime", _ascii),
    315: ("Artist", _ascii),
    531: ("YCbCrPositioning", _enum(YCBCR_POSITIONING_VALUES)),
    33432: ("Copyright", _ascii),
    34665: ("ExifIfdPointer", _long),
    34853: ("GpsIfdPointer", _long),

    # Exif IFD
    33434: ("ExposureTime", _rational_repr),
    33437: ("FNumber", _rational_repr),
    34850: ("ExposureProgram", _enum(EXPOSURE_PROGRAM_VALUES)),
    36864: ("ExifVersion", _undefined_string),
    36867: ("DateTimeOriginal", _ascii),
    36868: ("DateTimeDigitized", _ascii),
    36880: ("OffsetTime", _ascii),
    36881: ("OffsetTimeOriginal", _ascii),
    36882: ("OffsetTimeDigitized", _ascii),
    37122: ("CompressedBitsPerPixel", _rational_repr),
    37377: ("ShutterSpeedValue", _rational_repr),
    37378: ("ApertureValue", _rational_repr),
    37379: ("BrightnessValue", _rational_repr),
    37380: ("ExposureBiasValue", _rational_repr),
    37381: ("MaxApertureValue", _rational_repr),
    37383: ("MeteringMode", _enum(METERING_MODE_VALUES)),
    37384: ("LightSource", _enum(LIGHT_SOURCE_VALUES)),
    37385: ("Flash", _enum(FLASH_VALUES)),
    37386: ("FocalLength", _rational_repr),
    37500: ("MakerNote", _raw_bytes),
    37510: ("UserComment", _user_comment),
    37520: ("SubsecTime", _ascii),
    37521: ("SubsecTimeOriginal", _ascii),
    37522: ("SubsecTimeDigitized", _ascii),
    40960: ("FlashpixVersion", _undefined_string),
    40961: ("ColorSpace", _enum(COLOR_SPACE_VALUES)),
    40962: ("PixelXDimension", _short_or_long),
    40963: ("PixelYDimension", _short_or_long),
    41486: ("FocalPlaneXResolution", _rational_repr),
    41487: ("FocalPlaneYResolution", _rational_repr),
    41488: ("FocalPlaneResolutionUnit", _enum(RESOLUTION_UNIT_VALUES, "invalid")),
    41495: ("SensingMethod", _enum(SENSING_METHOD_VALUES)),
    41729: ("SceneType", _enum_undefined(SCENE_TYPE_VALUES)),
    41985: ("CustomRendered", _enum(CUSTOM_RENDERED_VALUES)),
    41986: ("ExposureMode", _enum(EXPOSURE_MODE_VALUES)),
    41987: ("WhiteBalance", _enum(WHITE_BALANCE_VALUES)),
    41988: ("DigitalZoomRatio", _rational_repr),
    41989: ("FocalLengthIn35mmFilm", _short),
    41990: ("SceneCaptureType", _enum(SCENE_CAPTURE_TYPE_VALUES)),
    41991: ("GainControl", _enum(GAIN_CONTROL_VALUES)),
    41992: ("Contrast", _enum(CONTRAST_VALUES)),
    41993: ("Saturation", _enum(SATURATION_VALUES)),
    41994: ("Sharpness", _enum(SHARPNESS_VALUES)),
    41996: ("SubjectDistanceRange", _enum(SUBJECT_DISTANCE_RANGE_VALUES)),
    42035: ("LensMake", _ascii),
    42036: ("LensModel", _ascii),
}

SUB_IFD_POINTERS = ("ExifIfdPointer", "GpsIfdPointer")


def project_entry(entry: IFDEntry) -> TiffTag:
    """
    Project a raw entry through TAG_DECODERS.

    Raises:
        TypeMismatchError: The entry's value type does not fit the tag
        ArityMismatchError: The entry holds the wrong number of values
    """
    known = TAG_DECODERS.get(entry.tag)
    if known is None:
        return TiffTag(UNKNOWN_TAG, entry, entry)
    name, decode = known
    return TiffTag(name, decode(entry), entry)


# ============================================================
# Directory decoding
# ============================================================

class ExifParser:
    """
    Parser for a TIFF structure held in memory.

    Offsets inside the structure are relative to the start of file_data,
    so callers hand over the TIFF header slice, not the enclosing file.
    """

    def __init__(self, file_data: bytes, config: Optional[DecoderConfig] = None):
        """
        Initialize the parser.

        Args:
            file_data: Bytes starting with the II/MM byte-order mark
            config: Decoder limits, defaults when None
        """
        self.reader = ByteReader(file_data)
        self.config = config or DEFAULT_CONFIG
        self.endianness: Optional[Endianness] = None

    def read(self) -> Tiff:
        """
        Decode the whole structure.

        Returns:
            Tiff with the main chain's tags followed by Exif/GPS sub-IFD tags

        Raises:
            MetadataReadError: On any malformed header, entry or projection
        """
        self._read_header()

        entries: List[IFDEntry] = []
        visited = set()
        while True:
            offset = self.reader.read_u32()
            # Offset of zero means no more IFDs
            if offset == 0:
                break
            if offset in visited:
                LOGGER.warning("IFD chain loops back to offset %d, stopping", offset)
                break
            if len(visited) >= self.config.max_ifd_chain:
                LOGGER.warning("IFD chain longer than %d directories, stopping",
                               self.config.max_ifd_chain)
                break
            visited.add(offset)

            self.reader.seek(offset)
            entries.extend(self._read_ifd())

        tags = [project_entry(entry) for entry in entries]

        sub_entries: List[IFDEntry] = []
        for tag in tags:
            if tag.name in SUB_IFD_POINTERS:
                LOGGER.debug("Following %s to offset %d", tag.name, tag.value)
                self.reader.seek(tag.value)
                sub_entries.extend(self._read_ifd())
        tags.extend(project_entry(entry) for entry in sub_entries)

        LOGGER.debug("Decoded %d TIFF tags (%s-endian)", len(tags),
                     'big' if self.endianness is Endianness.BIG else 'little')
        return Tiff(tags=tags, endianness=self.endianness)

    def _read_header(self) -> None:
        byte_order = self.reader.read_bytes(2)
        if byte_order == b'MM':
            self.endianness = Endianness.BIG
        elif byte_order == b'II':
            self.endianness = Endianness.LITTLE
        else:
            raise BadMagicError(
                f"Expected MM or II but got {byte_order.decode('latin-1')!r} instead"
            )
        self.reader.endian = self.endianness.value

        magic_number = self.reader.read_u16()
        if magic_number != 42:
            raise BadMagicError(
                f"Expected magic number to be 42, but got {magic_number} instead"
            )

    def _read_ifd(self) -> List[IFDEntry]:
        """Read one directory; leaves the cursor on its next-IFD offset."""
        entry_count = self.reader.read_u16()
        return [self._read_entry() for _ in range(entry_count)]

    def _read_entry(self) -> IFDEntry:
        tag = self.reader.read_u16()
        type_code = self.reader.read_u16()
        count = self.reader.read_u32()

        try:
            value_type = TiffValueType(type_code)
        except ValueError:
            raise UnrecognizedValueTypeError(type_code, tag)

        field_position = self.reader.position
        total_size = count * TAG_SIZES[value_type]

        # Values larger than the 4-byte field live elsewhere in the buffer
        if total_size > 4:
            self.reader.seek(self.reader.read_u32())

        if total_size > self.reader.remaining:
            raise TruncatedInputError(self.reader.position, total_size, self.reader.remaining)
        values = self._read_values(value_type, count)

        self.reader.seek(field_position + 4)
        return IFDEntry(tag=tag, value_type=value_type, values=values)

    def _read_values(self, value_type: TiffValueType, count: int) -> List[Any]:
        reader = self.reader
        if value_type in _BYTE_TYPES:
            return list(reader.read_bytes(count))
        if value_type == TiffValueType.SBYTE:
            return [reader.read_i8() for _ in range(count)]
        if value_type == TiffValueType.SHORT:
            return [reader.read_u16() for _ in range(count)]
        if value_type == TiffValueType.SSHORT:
            return [reader.read_i16() for _ in range(count)]
        if value_type == TiffValueType.LONG:
            return [reader.read_u32() for _ in range(count)]
        if value_type == TiffValueType.SLONG:
            return [reader.read_i32() for _ in range(count)]
        if value_type == TiffValueType.RATIONAL:
            return [Rational(reader.read_u32(), reader.read_u32()) for _ in range(count)]
        if value_type == TiffValueType.SRATIONAL:
            return [Rational(reader.read_i32(), reader.read_i32()) for _ in range(count)]
        if value_type == TiffValueType.FLOAT:
            return [reader.read_f32() for _ in range(count)]
        return [reader.read_f64() for _ in range(count)]


def read_tiff(data: bytes, config: Optional[DecoderConfig] = None) -> Tiff:
    """
    Decode a TIFF/EXIF structure.

    This is also the entry point for TIFF files at the top level.

    Args:
        data: Bytes starting with the TIFF header
        config: Optional decoder limits

    Returns:
        Decoded Tiff
    """
    return ExifParser(data, config).read()


def read_exif_section(data: bytes, config: Optional[DecoderConfig] = None) -> Tiff:
    """
    Decode an Exif payload that starts with the "Exif\\0\\0" identifier.

    Raises:
        BadMagicError: The identifier is missing
    """
    if data[:len(EXIF_HEADER)] != EXIF_HEADER:
        raise BadMagicError(f"Expected 'Exif\\0\\0' but got {bytes(data[:6])!r} instead")
    return read_tiff(data[len(EXIF_HEADER):], config)
