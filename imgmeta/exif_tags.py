# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag definitions

Display names for tag ids and the code-to-description tables used when
projecting enumerated EXIF fields. The projection itself lives in
exif_parser.TAG_DECODERS.

Copyright 2025 DNAi inc.
"""

# Tag ids are not namespaced per directory, so GPS ids are kept apart from
# the IFD0/Exif ids they collide with.
EXIF_TAG_NAMES = {
    # ============================================================
    # IFD0 (Image) Tags
    # ============================================================
    0x00FE: "SubfileType",
    0x0100: "ImageWidth",
    0x0101: "ImageLength",
    0x0102: "BitsPerSample",
    0x0103: "Compression",
    0x0106: "PhotometricInterpretation",
    0x010E: "ImageDescription",
    0x010F: "Make",
    0x0110: "Model",
    0x0111: "StripOffsets",
    0x0112: "Orientation",
    0x0115: "SamplesPerPixel",
    0x0116: "RowsPerStrip",
    0x0117: "StripByteCounts",
    0x011A: "XResolution",
    0x011B: "YResolution",
    0x011C: "PlanarConfiguration",
    0x0128: "ResolutionUnit",
    0x0131: "Software",
    0x0132: "DateTime",
    0x013B: "Artist",
    0x013C: "HostComputer",
    0x0142: "TileWidth",
    0x0143: "TileLength",
    0x0201: "JPEGInterchangeFormat",
    0x0202: "JPEGInterchangeFormatLength",
    0x0211: "YCbCrCoefficients",
    0x0212: "YCbCrSubSampling",
    0x0213: "YCbCrPositioning",
    0x0214: "ReferenceBlackWhite",
    0x02BC: "ApplicationNotes",
    0x8298: "Copyright",
    0x8769: "ExifIfdPointer",
    0x8825: "GpsIfdPointer",
    0x8773: "InterColorProfile",

    # ============================================================
    # Exif IFD Tags
    # ============================================================
    0x829A: "ExposureTime",
    0x829D: "FNumber",
    0x8822: "ExposureProgram",
    0x8824: "SpectralSensitivity",
    0x8827: "ISOSpeedRatings",
    0x8830: "SensitivityType",
    0x9000: "ExifVersion",
    0x9003: "DateTimeOriginal",
    0x9004: "DateTimeDigitized",
    0x9010: "OffsetTime",
    0x9011: "OffsetTimeOriginal",
    0x9012: "OffsetTimeDigitized",
    0x9101: "ComponentsConfiguration",
    0x9102: "CompressedBitsPerPixel",
    0x9201: "ShutterSpeedValue",
    0x9202: "ApertureValue",
    0x9203: "BrightnessValue",
    0x9204: "ExposureBiasValue",
    0x9205: "MaxApertureValue",
    0x9206: "SubjectDistance",
    0x9207: "MeteringMode",
    0x9208: "LightSource",
    0x9209: "Flash",
    0x920A: "FocalLength",
    0x9214: "SubjectArea",
    0x927C: "MakerNote",
    0x9286: "UserComment",
    0x9290: "SubsecTime",
    0x9291: "SubsecTimeOriginal",
    0x9292: "SubsecTimeDigitized",
    0xA000: "FlashpixVersion",
    0xA001: "ColorSpace",
    0xA002: "PixelXDimension",
    0xA003: "PixelYDimension",
    0xA004: "RelatedSoundFile",
    0xA005: "InteroperabilityIfdPointer",
    0xA20E: "FocalPlaneXResolution",
    0xA20F: "FocalPlaneYResolution",
    0xA210: "FocalPlaneResolutionUnit",
    0xA215: "ExposureIndex",
    0xA217: "SensingMethod",
    0xA300: "FileSource",
    0xA301: "SceneType",
    0xA302: "CFAPattern",
    0xA401: "CustomRendered",
    0xA402: "ExposureMode",
    0xA403: "WhiteBalance",
    0xA404: "DigitalZoomRatio",
    0xA405: "FocalLengthIn35mmFilm",
    0xA406: "SceneCaptureType",
    0xA407: "GainControl",
    0xA408: "Contrast",
    0xA409: "Saturation",
    0xA40A: "Sharpness",
    0xA40C: "SubjectDistanceRange",
    0xA420: "ImageUniqueID",
    0xA430: "CameraOwnerName",
    0xA431: "BodySerialNumber",
    0xA432: "LensSpecification",
    0xA433: "LensMake",
    0xA434: "LensModel",
    0xA435: "LensSerialNumber",
}

GPS_TAG_NAMES = {
    0x0000: "GPSVersionID",
    0x0001: "GPSLatitudeRef",
    0x0002: "GPSLatitude",
    0x0003: "GPSLongitudeRef",
    0x0004: "GPSLongitude",
    0x0005: "GPSAltitudeRef",
    0x0006: "GPSAltitude",
    0x0007: "GPSTimeStamp",
    0x0008: "GPSSatellites",
    0x0009: "GPSStatus",
    0x000A: "GPSMeasureMode",
    0x000B: "GPSDOP",
    0x000C: "GPSSpeedRef",
    0x000D: "GPSSpeed",
    0x000E: "GPSTrackRef",
    0x000F: "GPSTrack",
    0x0010: "GPSImgDirectionRef",
    0x0011: "GPSImgDirection",
    0x0012: "GPSMapDatum",
    0x0013: "GPSDestLatitudeRef",
    0x0014: "GPSDestLatitude",
    0x0015: "GPSDestLongitudeRef",
    0x0016: "GPSDestLongitude",
    0x0017: "GPSDestBearingRef",
    0x0018: "GPSDestBearing",
    0x0019: "GPSDestDistanceRef",
    0x001A: "GPSDestDistance",
    0x001B: "GPSProcessingMethod",
    0x001C: "GPSAreaInformation",
    0x001D: "GPSDateStamp",
    0x001E: "GPSDifferential",
    0x001F: "GPSHPositioningError",
}


def get_tag_name(tag_id: int) -> str:
    """
    Best-effort display name for a raw tag id.

    GPS ids win only where no IFD0/Exif name exists, since most ids below
    0x20 that appear in practice come from the GPS directory.
    """
    if tag_id in EXIF_TAG_NAMES:
        return EXIF_TAG_NAMES[tag_id]
    if tag_id in GPS_TAG_NAMES:
        return GPS_TAG_NAMES[tag_id]
    return f"0x{tag_id:04X}"


# ============================================================
# Enumerated values
# ============================================================

GPS_ALTITUDE_REF_VALUES = {
    0: "Above sea level",
    1: "Below sea level",
}

COMPRESSION_VALUES = {
    1: "No compression",
    2: "CCITT modified Huffman RLE",
    3: "CCITT Group 3 fax encoding",
    4: "CCITT Group 4 fax encoding",
    5: "LZW",
    6: "JPEG (old-style)",
    7: "JPEG (new-style)",
    8: "Deflate",
    32773: "PackBits",
}

RESOLUTION_UNIT_VALUES = {
    1: "none",
    2: "inch",
    3: "centimeter",
}

YCBCR_POSITIONING_VALUES = {
    1: "Centered",
    2: "Co-sited",
}

EXPOSURE_PROGRAM_VALUES = {
    0: "Not defined",
    1: "Manual",
    2: "Normal program",
    3: "Aperture priority",
    4: "Shutter priority",
    5: "Creative program (biased toward depth of field)",
    6: "Action program (biased toward fast shutter speed)",
    7: "Portrait mode (for closeup photos with the background out of focus)",
    8: "Landscape mode (for landscape photos with the background in focus)",
}

METERING_MODE_VALUES = {
    0: "Unknown",
    1: "Average",
    2: "CenterWeightedAverage",
    3: "Spot",
    4: "MultiSpot",
    5: "Pattern",
    6: "Partial",
    255: "Other",
}

LIGHT_SOURCE_VALUES = {
    0: "Unknown",
    1: "Daylight",
    2: "Fluorescent",
    3: "Tungsten (incandescent light)",
    4: "Flash",
    9: "Fine weather",
    10: "Cloudy weather",
    11: "Shade",
    12: "Daylight fluorescent (D 5700 - 7100K)",
    13: "Day white fluorescent (N 4600 - 5400K)",
    14: "Cool white fluorescent (W 3900 - 4500K)",
    15: "White fluorescent (WW 3200 - 3700K)",
    17: "Standard light A",
    18: "Standard light B",
    19: "Standard light C",
    20: "D55",
    21: "D65",
    22: "D75",
    23: "D50",
    24: "ISO studio tungsten",
    255: "Other light source",
}

FLASH_VALUES = {
    0x0000: "Flash did not fire",
    0x0001: "Flash fired",
    0x0005: "Strobe return light not detected",
    0x0007: "Strobe return light detected",
    0x0009: "Flash fired, compulsory flash mode",
    0x000D: "Flash fired, compulsory flash mode, return light not detected",
    0x000F: "Flash fired, compulsory flash mode, return light detected",
    0x0010: "Flash did not fire, compulsory flash mode",
    0x0018: "Flash did not fire, auto mode",
    0x0019: "Flash fired, auto mode",
    0x001D: "Flash fired, auto mode, return light not detected",
    0x001F: "Flash fired, auto mode, return light detected",
    0x0020: "No flash function",
    0x0041: "Flash fired, red-eye reduction mode",
    0x0045: "Flash fired, red-eye reduction mode, return light not detected",
    0x0047: "Flash fired, red-eye reduction mode, return light detected",
    0x0049: "Flash fired, compulsory flash mode, red-eye reduction mode",
    0x004D: "Flash fired, compulsory flash mode, red-eye reduction mode, return light not detected",
    0x004F: "Flash fired, compulsory flash mode, red-eye reduction mode, return light detected",
    0x0059: "Flash fired, auto mode, red-eye reduction mode",
    0x005D: "Flash fired, auto mode, return light not detected, red-eye reduction mode",
    0x005F: "Flash fired, auto mode, return light detected, red-eye reduction mode",
}

COLOR_SPACE_VALUES = {
    1: "sRGB",
    0xFFFF: "Uncalibrated",
}

SENSING_METHOD_VALUES = {
    1: "Not defined",
    2: "One-chip color area sensor",
    3: "Two-chip color area sensor",
    4: "Three-chip color area sensor",
    5: "Color sequential area sensor",
    7: "Trilinear sensor",
    8: "Color sequential linear sensor",
}

SCENE_TYPE_VALUES = {
    1: "Directly photographed",
}

CUSTOM_RENDERED_VALUES = {
    0: "Normal process",
    1: "Custom process",
}

EXPOSURE_MODE_VALUES = {
    0: "Auto exposure",
    1: "Manual exposure",
    2: "Auto bracket",
}

WHITE_BALANCE_VALUES = {
    0: "Auto white balance",
    1: "Manual white balance",
}

SCENE_CAPTURE_TYPE_VALUES = {
    0: "Standard",
    1: "Landscape",
    2: "Portrait",
    3: "Night scene",
}

GAIN_CONTROL_VALUES = {
    0: "None",
    1: "Low gain up",
    2: "High gain up",
    3: "Low gain down",
    4: "High gain down",
}

CONTRAST_VALUES = {
    0: "Normal",
    1: "Soft",
    2: "Hard",
}

SATURATION_VALUES = {
    0: "Normal",
    1: "Low saturation",
    2: "High saturation",
}

SHARPNESS_VALUES = CONTRAST_VALUES

SUBJECT_DISTANCE_RANGE_VALUES = {
    0: "Unknown",
    1: "Macro",
    2: "Close view",
    3: "Distant view",
}

# UserComment character code prefixes (8 bytes, NUL padded)
USER_COMMENT_ENCODINGS = {
    b'ASCII\x00\x00\x00': 'ascii',
    b'JIS\x00\x00\x00\x00\x00': 'jis',
    b'UNICODE\x00': 'unicode',
}
