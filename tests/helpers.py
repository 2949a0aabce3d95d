"""Builders for synthetic TIFF, JPEG and HEIF test files."""

import struct
from typing import List, Optional, Sequence, Tuple

# (tag, TIFF type code, values)
Entry = Tuple[int, int, object]

_PACK_CODES = {3: 'H', 4: 'I', 6: 'b', 8: 'h', 9: 'i', 11: 'f', 12: 'd'}


def encode_values(endian: str, value_type: int, values) -> Tuple[int, bytes]:
    """Return (count, raw bytes) for an IFD entry value."""
    if value_type == 2:
        raw = values.encode('utf-8') + b'\x00' if isinstance(values, str) else bytes(values)
        return len(raw), raw
    if value_type in (1, 7):
        return len(values), bytes(values)
    if value_type in (5, 10):
        code = 'II' if value_type == 5 else 'ii'
        raw = b''.join(struct.pack(endian + code, n, d) for n, d in values)
        return len(values), raw
    code = _PACK_CODES[value_type]
    raw = b''.join(struct.pack(endian + code, v) for v in values)
    return len(values), raw


def _ifd_size(count: int) -> int:
    return 2 + 12 * count + 4


def build_tiff(
    ifd0: Sequence[Entry],
    exif: Optional[Sequence[Entry]] = None,
    gps: Optional[Sequence[Entry]] = None,
    endian: str = '<',
) -> bytes:
    """
    Lay out a TIFF structure: header, IFD0, Exif IFD, GPS IFD, value area.

    Exif/GPS pointer entries are appended to IFD0 automatically.
    """
    ifd0 = list(ifd0)
    ifd0_count = len(ifd0) + (exif is not None) + (gps is not None)

    exif_offset = 8 + _ifd_size(ifd0_count)
    gps_offset = exif_offset + (_ifd_size(len(exif)) if exif is not None else 0)
    data_offset = gps_offset + (_ifd_size(len(gps)) if gps is not None else 0)

    if exif is not None:
        ifd0.append((0x8769, 4, [exif_offset]))
    if gps is not None:
        ifd0.append((0x8825, 4, [gps_offset]))

    value_area = bytearray()

    def write_ifd(entries: Sequence[Entry]) -> bytes:
        out = struct.pack(endian + 'H', len(entries))
        for tag, value_type, values in entries:
            count, raw = encode_values(endian, value_type, values)
            if len(raw) <= 4:
                value_field = raw.ljust(4, b'\x00')
            else:
                value_field = struct.pack(endian + 'I', data_offset + len(value_area))
                value_area.extend(raw)
            out += struct.pack(endian + 'HHI', tag, value_type, count) + value_field
        return out + struct.pack(endian + 'I', 0)

    body = write_ifd(ifd0)
    if exif is not None:
        body += write_ifd(exif)
    if gps is not None:
        body += write_ifd(gps)

    byte_order = b'II' if endian == '<' else b'MM'
    header = byte_order + struct.pack(endian + 'HI', 42, 8)
    return header + body + bytes(value_area)


GPS_ENTRIES: List[Entry] = [
    (0, 1, [2, 2, 0, 0]),
    (1, 2, "N"),
    (2, 5, [(35, 1), (39, 1), (4446, 100)]),
    (3, 2, "W"),
    (4, 5, [(82, 1), (30, 1), (2156, 100)]),
    (5, 1, [0]),
    (6, 5, [(834755, 777)]),
]


def build_gps_tiff(endian: str = '>') -> bytes:
    return build_tiff(
        [(0x010F, 2, "Apple"), (0x0110, 2, "iPhone XR")],
        exif=[(0x9003, 2, "2020:01:02 03:04:05")],
        gps=GPS_ENTRIES,
        endian=endian,
    )


# ============================================================
# JPEG
# ============================================================

def jpeg_segment(marker: int, payload: bytes) -> bytes:
    return b'\xff' + bytes([marker]) + struct.pack('>H', len(payload) + 2) + payload


def build_jpeg(segments: Sequence[Tuple[int, bytes]], scan: Optional[bytes] = None) -> bytes:
    """SOI, the given segments, an optional SOS with scan data, EOI."""
    out = b'\xff\xd8'
    for marker, payload in segments:
        out += jpeg_segment(marker, payload)
    if scan is not None:
        out += jpeg_segment(0xDA, b'\x01\x01\x00\x00\x3f\x00') + scan
    return out + b'\xff\xd9'


# ============================================================
# ISOBMFF / HEIF
# ============================================================

def box(name: str, payload: bytes = b'') -> bytes:
    return struct.pack('>I', 8 + len(payload)) + name.encode('latin-1') + payload


def full_box(name: str, version: int, payload: bytes = b'', flags: int = 0) -> bytes:
    return box(name, bytes([version]) + flags.to_bytes(3, 'big') + payload)


def ftyp_box(major: str = 'heic', brands: Sequence[str] = ('mif1', 'heic')) -> bytes:
    payload = major.encode('latin-1') + struct.pack('>I', 0)
    payload += b''.join(b.encode('latin-1') for b in brands)
    return box('ftyp', payload)


def infe_v2(item_id: int, item_type: str, name: str = '', content_type: Optional[str] = None) -> bytes:
    payload = struct.pack('>HH', item_id, 0) + item_type.encode('latin-1') + name.encode() + b'\x00'
    if content_type is not None:
        payload += content_type.encode() + b'\x00'
    return full_box('infe', 2, payload)


def iinf_box(entries: Sequence[bytes]) -> bytes:
    return full_box('iinf', 0, struct.pack('>H', len(entries)) + b''.join(entries))


def iloc_v1(locations: Sequence[Tuple[int, int, int]]) -> bytes:
    """iloc v1 with 4-byte offsets/lengths, one extent per (id, offset, length)."""
    payload = bytes([(4 << 4) | 4, 0]) + struct.pack('>H', len(locations))
    for item_id, offset, length in locations:
        payload += struct.pack('>HHHH', item_id, 0, 0, 1)
        payload += struct.pack('>II', offset, length)
    return full_box('iloc', 1, payload)


def hdlr_box(handler: str = 'pict') -> bytes:
    payload = struct.pack('>I', 0) + handler.encode('latin-1') + b'\x00' * 12 + b'\x00'
    return full_box('hdlr', 0, payload)


def build_heic(exif_tiff: Optional[bytes] = None, xmp: Optional[bytes] = None,
               item_count: int = 53, exif_header: bool = True) -> bytes:
    """
    A HEIC with item_count items. The last items are Exif and mime (XMP)
    when those payloads are given; the rest are image tiles.

    The Exif item is laid out the way cameras write it: a u32 offset of 6,
    "Exif\\0\\0", then the TIFF header. With exif_header=False the offset
    is 0 and the TIFF header follows it directly.
    """
    payloads = []
    types = []
    if exif_tiff is not None:
        types.append(('Exif', None))
        if exif_header:
            payloads.append(struct.pack('>I', 6) + b'Exif\x00\x00' + exif_tiff)
        else:
            payloads.append(struct.pack('>I', 0) + exif_tiff)
    if xmp is not None:
        types.append(('mime', 'application/rdf+xml'))
        payloads.append(xmp)
    tiles = item_count - len(types)
    types = [('hvc1', None)] * tiles + types
    payloads = [b'\x00\x00\x00\x10tile'] * tiles + payloads

    def build_meta(mdat_start: int) -> bytes:
        entries = [infe_v2(i + 1, t, content_type=ct) for i, (t, ct) in enumerate(types)]
        locations = []
        offset = mdat_start
        for i, payload in enumerate(payloads):
            locations.append((i + 1, offset, len(payload)))
            offset += len(payload)
        children = (hdlr_box() + full_box('pitm', 0, struct.pack('>H', 1))
                    + iinf_box(entries) + iloc_v1(locations))
        return full_box('meta', 0, children)

    ftyp = ftyp_box()
    # Offsets do not change the meta box size, so measure with a placeholder
    meta_size = len(build_meta(0))
    mdat_start = len(ftyp) + meta_size + 8
    return ftyp + build_meta(mdat_start) + box('mdat', b''.join(payloads))
