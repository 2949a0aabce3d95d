"""Tests for the JPEG marker scanner."""

import pytest

from imgmeta.exceptions import BadMagicError, TruncatedInputError, UnexpectedMarkerError
from imgmeta.exif_parser import Endianness
from imgmeta.jpeg_parser import JpegMarker, JpegSection, get_jpeg_sections, read_jpeg

from helpers import build_jpeg, build_tiff, jpeg_segment

JFIF = b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
XMP_NAMESPACE = b'http://ns.adobe.com/xap/1.0/\x00'


def _gimp_exif():
    tiff = build_tiff(
        [(0x0131, 2, "GIMP 2.4.5")],
        exif=[(0xA002, 3, [88]), (0xA003, 3, [100])],
        endian='<',
    )
    return b'Exif\x00\x00' + tiff


def test_gimp_exif_segment():
    data = build_jpeg(
        [(0xE0, JFIF), (0xE1, _gimp_exif()), (0xDB, b'\x00' * 65)],
        scan=b'\x01\x02\x03',
    )
    jpeg = read_jpeg(data)
    assert jpeg.exif.endianness is Endianness.LITTLE
    assert jpeg.exif.get("Software") == "GIMP 2.4.5"
    assert jpeg.exif.get("PixelXDimension") == 88
    assert jpeg.exif.get("PixelYDimension") == 100
    assert [s.name for s in jpeg.sections] == ['APP0', 'APP1', 'DQT', 'SOS']


def test_comment_only():
    data = build_jpeg([(0xE0, JFIF), (0xFE, b'Created with GIMP')])
    jpeg = read_jpeg(data)
    assert jpeg.exif is None
    assert jpeg.xmp is None
    assert jpeg.comment == "Created with GIMP"


def test_scan_data_absorbs_stuffing_and_restarts():
    """0xFF00 and RSTn stay in the scan; the next real marker is read normally."""
    scan = b'\x12\xff\x00\x34\xff\xd0\x56\xff\xd7\x78'
    sos_header = b'\x01\x01\x00\x00\x3f\x00'
    data = (b'\xff\xd8' + jpeg_segment(0xDA, sos_header) + scan
            + jpeg_segment(0xFE, b'after scan') + b'\xff\xd9')
    sections = get_jpeg_sections(data)
    assert [s.marker for s in sections] == [JpegMarker.SOS, JpegMarker.COM]
    assert sections[0].data == sos_header + scan
    assert sections[1].data == b'after scan'


def test_scan_fill_bytes_before_marker():
    scan = b'\xaa\xff\xff'
    data = b'\xff\xd8' + jpeg_segment(0xDA, b'\x00') + scan + b'\xd9'
    sections = get_jpeg_sections(data)
    assert sections[0].data == b'\x00\xaa\xff'


def test_standalone_markers_have_no_length():
    data = b'\xff\xd8\xff\x01' + jpeg_segment(0xFE, b'hi') + b'\xff\xd9'
    sections = get_jpeg_sections(data)
    assert sections == [JpegSection(JpegMarker.TEM, b''), JpegSection(JpegMarker.COM, b'hi')]


def test_fill_bytes_between_segments():
    data = b'\xff\xd8\xff' + jpeg_segment(0xFE, b'padded') + b'\xff\xd9'
    assert read_jpeg(data).comment == "padded"


def test_scanning_stops_at_eoi():
    data = build_jpeg([(0xFE, b'first')]) + jpeg_segment(0xFE, b'trailing')
    sections = get_jpeg_sections(data)
    assert [s.data for s in sections] == [b'first']


def test_unexpected_marker():
    with pytest.raises(UnexpectedMarkerError) as excinfo:
        get_jpeg_sections(b'\xff\xd8\x00\x01\x02\x03')
    assert excinfo.value.offset == 2
    assert excinfo.value.byte == 0x00


def test_truncated_segment():
    data = b'\xff\xd8\xff\xfe\x00\x40short'
    with pytest.raises(TruncatedInputError):
        get_jpeg_sections(data)


def test_xmp_segment_namespace_is_removed():
    packet = b'<x:xmpmeta xmlns:x="adobe:ns:meta/"/>'
    data = build_jpeg([(0xE1, XMP_NAMESPACE + packet), (0xE1, _gimp_exif())])
    jpeg = read_jpeg(data)
    assert jpeg.xmp == packet.decode()
    assert jpeg.exif.get("Software") == "GIMP 2.4.5"


def test_malformed_exif_segment_propagates():
    data = build_jpeg([(0xE1, b'Exif\x00\x00XX*\x00\x08\x00\x00\x00')])
    with pytest.raises(BadMagicError):
        read_jpeg(data)


def test_unrecognized_app1_is_ignored():
    data = build_jpeg([(0xE1, b'FLIR\x00\x01')])
    jpeg = read_jpeg(data)
    assert jpeg.exif is None
    assert jpeg.xmp is None


def test_section_names():
    assert JpegSection(0xE1, b'').name == 'APP1'
    assert JpegSection(0x02, b'').name == '0x02'
