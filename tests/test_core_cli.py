"""Tests for the decode facade and the command line entry point."""

import pytest

from imgmeta import __version__, decode, decode_file
from imgmeta.cli import format_result, main
from imgmeta.exceptions import BadMagicError, UnsupportedFormatError
from imgmeta.exif_parser import Tiff
from imgmeta.heic_parser import Heif
from imgmeta.jpeg_parser import Jpeg

from helpers import build_gps_tiff, build_heic, build_jpeg, build_tiff

XMP_PACKET = (
    b'<x:xmpmeta xmlns:x="adobe:ns:meta/"><rdf:RDF '
    b'xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">'
    b'<rdf:Description xmlns:xmp="http://ns.adobe.com/xap/1.0/" xmp:Rating="5"/>'
    b'</rdf:RDF></x:xmpmeta>'
)


def test_version():
    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_decode_dispatches_by_format():
    assert isinstance(decode(build_heic(exif_tiff=build_gps_tiff(), item_count=2)), Heif)
    assert isinstance(decode(build_jpeg([(0xFE, b'x')])), Jpeg)
    assert isinstance(decode(build_tiff([(0x0131, 2, "GIMP 2.4.5")])), Tiff)


def test_decode_rejects_png():
    with pytest.raises(UnsupportedFormatError, match="PNG"):
        decode(b'\x89PNG\r\n\x1a\n' + b'\x00' * 16)


def test_decode_rejects_unknown():
    with pytest.raises(UnsupportedFormatError):
        decode(b'GIF89a\x01\x00\x01\x00')


def test_decode_file(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(build_jpeg([(0xFE, b'Created with GIMP')]))
    assert decode_file(path).comment == "Created with GIMP"
    assert decode_file(str(path)).comment == "Created with GIMP"


def test_format_result_heif():
    heif = decode(build_heic(exif_tiff=build_gps_tiff(), xmp=XMP_PACKET, item_count=3))
    text = format_result(heif)
    assert text.startswith("HEIF")
    assert "[meta]" in text
    assert "3 item(s)" in text
    assert "GPSLatitudeRef: N" in text
    assert "xmp:Rating: 5" in text


def test_format_result_tiff_unknown_tag():
    text = format_result(decode(build_tiff([(0x4746, 3, [4])])))
    assert "0x4746 (SHORT): [4]" in text


def test_main_prints_structure(tmp_path, capsys):
    path = tmp_path / "gimp.jpg"
    path.write_bytes(build_jpeg([(0xE1, b'Exif\x00\x00' + build_tiff([(0x0131, 2, "GIMP 2.4.5")]))]))
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "JPEG" in out
    assert "Software: GIMP 2.4.5" in out
    assert "XMP: none" in out


def test_main_reports_decode_errors(tmp_path, capsys):
    path = tmp_path / "broken.tif"
    path.write_bytes(b'II\x2b\x00\x08\x00\x00\x00')
    assert main([str(path)]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.heic")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_main_requires_a_path():
    with pytest.raises(SystemExit):
        main([])


def test_decode_errors_are_metadata_errors():
    with pytest.raises(BadMagicError):
        decode(build_jpeg([(0xE1, b'Exif\x00\x00MM\x00\x2b\x00\x00\x00\x08')]))
