"""Tests for file kind classification."""

import struct

import pytest

from imgmeta.format_detector import FileKind, classify

from helpers import box, build_tiff, ftyp_box


@pytest.mark.parametrize("data, kind", [
    (b'\xff\xd8\xff\xe0\x00\x10JFIF', FileKind.JPEG),
    (b'\x89PNG\r\n\x1a\n\x00\x00\x00\x0dIHDR', FileKind.PNG),
    (b'II*\x00\x08\x00\x00\x00', FileKind.TIFF),
    (b'MM\x00*\x00\x00\x00\x08', FileKind.TIFF),
])
def test_signatures(data, kind):
    assert classify(data) is kind


def test_heif_major_brand():
    assert classify(ftyp_box('heic', []) + box('mdat')) is FileKind.HEIF


def test_heif_compatible_brand():
    """A generic major brand is HEIF when a compatible brand says so."""
    assert classify(ftyp_box('isom', ['iso8', 'mif1'])) is FileKind.HEIF


def test_avif_is_heif_family():
    assert classify(ftyp_box('avif', ['mif1', 'miaf'])) is FileKind.HEIF


def test_mp4_is_not_heif():
    assert classify(ftyp_box('isom', ['iso2', 'avc1', 'mp41'])) is None


def test_ftyp_with_size_zero():
    data = struct.pack('>I', 0) + b'ftyp' + b'mp42' + b'\x00' * 4 + b'heic'
    assert classify(data) is FileKind.HEIF


@pytest.mark.parametrize("data", [b'', b'\xff\xd8', b'GIF89a', b'hello world, not an image'])
def test_unknown(data):
    assert classify(data) is None


def test_built_tiff_is_classified():
    assert classify(build_tiff([(0x0131, 2, "x")])) is FileKind.TIFF
    assert classify(build_tiff([(0x0131, 2, "x")], endian='>')) is FileKind.TIFF
