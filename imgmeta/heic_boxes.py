# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
ISOBMFF/HEIF box decoders

HEIF files use the ISO Base Media File Format container, a tree of
length-prefixed boxes. Only the boxes needed to locate metadata items are
decoded: ftyp at the top level and hdlr, dinf/dref, pitm, iinf/infe, iref
and iloc inside meta. Every other box is kept as an UnknownBox holding its
payload so that the tree still accounts for every byte.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

from imgmeta.byte_reader import ByteReader
from imgmeta.exceptions import (
    FieldWidthOutOfRangeError,
    TruncatedInputError,
    UnexpectedChildTypeError,
    UnsupportedVersionError,
)
from imgmeta.log import get_logger

LOGGER = get_logger("heic_boxes")

# iloc offset/length/base/index widths
VALID_FIELD_WIDTHS = (0, 4, 8)
DREF_ENTRY_TYPES = ("alis", "rsrc", "url ")


@dataclass
class BoxHeader:
    """Size and type of a box, plus where it sits in the buffer."""
    name: str
    size: int
    offset: int
    header_size: int

    @property
    def end(self) -> int:
        return self.offset + self.size

    @property
    def payload_size(self) -> int:
        return self.size - self.header_size


def read_fourcc(reader: ByteReader) -> str:
    return reader.read_bytes(4).decode('utf-8', errors='replace')


def read_box_header(reader: ByteReader, limit: Optional[int] = None) -> BoxHeader:
    """
    Read a box header at the current position.

    A size of 0 means the box runs to the end of the buffer, a size of 1
    means a 64-bit size follows the type.

    Args:
        reader: Big-endian reader positioned on the header
        limit: End of the enclosing box, defaults to the end of the buffer

    Returns:
        Decoded BoxHeader

    Raises:
        TruncatedInputError: The header is short, or the box does not fit
            inside its header or its parent
    """
    if limit is None:
        limit = reader.length

    offset = reader.position
    size = reader.read_u32()
    name = read_fourcc(reader)
    header_size = 8

    if size == 0:
        size = reader.length - offset
    elif size == 1:
        size = reader.read_u64()
        header_size = 16

    if size < header_size:
        raise TruncatedInputError(offset, header_size, size)
    if offset + size > limit:
        raise TruncatedInputError(offset, size, max(limit - offset, 0))

    return BoxHeader(name=name, size=size, offset=offset, header_size=header_size)


def read_version_and_flags(reader: ByteReader) -> Tuple[int, int]:
    """Read the 8-bit version and 24-bit flags that open every full box."""
    version = reader.read_u8()
    flags = int.from_bytes(reader.read_bytes(3), 'big')
    return version, flags


# ============================================================
# Box types
# ============================================================

@dataclass
class Box:
    name: str
    size: int


@dataclass
class UnknownBox(Box):
    """A box kept as its raw payload."""
    data: bytes = field(repr=False)


@dataclass
class FtypBox(Box):
    major_brand: str
    minor_version: int
    compatible_brands: List[str]

    @property
    def brands(self) -> List[str]:
        return [self.major_brand] + self.compatible_brands


@dataclass
class FullBox(Box):
    version: int
    flags: int


BoxT = TypeVar('BoxT', bound=Box)


@dataclass
class MetaBox(FullBox):
    children: List[Box]

    def find_child(self, box_type: Type[BoxT]) -> Optional[BoxT]:
        """First direct child of the given box class, or None."""
        for child in self.children:
            if isinstance(child, box_type):
                return child
        return None


@dataclass
class HdlrBox(FullBox):
    pre_defined: int
    handler_type: str
    reserved: Tuple[int, int, int]
    handler_name: str


@dataclass
class DrefEntryBox(FullBox):
    """An alis, rsrc or url data reference."""
    location: str


@dataclass
class DrefBox(FullBox):
    entries: List[DrefEntryBox]


@dataclass
class DinfBox(Box):
    dref: DrefBox


@dataclass
class PitmBox(FullBox):
    item_id: int


@dataclass
class ItemInfoV0V1:
    item_id: int
    item_protection_index: int
    item_name: str
    content_type: str
    content_encoding: Optional[str] = None
    extension_type: Optional[int] = None
    extension: Optional[bytes] = None


@dataclass
class ItemInfoV2V3:
    item_id: int
    item_protection_index: int
    item_type: str
    item_name: str
    content_type: Optional[str] = None
    content_encoding: Optional[str] = None
    item_uri_type: Optional[str] = None


@dataclass
class ItemInfoUnknown:
    """Payload of an infe box with a version this decoder does not know."""
    data: str


ItemInfo = Union[ItemInfoV0V1, ItemInfoV2V3, ItemInfoUnknown]


@dataclass
class InfeBox(FullBox):
    value: ItemInfo

    @property
    def item_id(self) -> Optional[int]:
        return getattr(self.value, 'item_id', None)

    @property
    def item_type(self) -> Optional[str]:
        return getattr(self.value, 'item_type', None)


@dataclass
class IinfBox(FullBox):
    entries: List[InfeBox]


@dataclass
class ItemReference:
    reference_type: str
    from_item_id: int
    to_item_ids: List[int]


@dataclass
class IrefBox(FullBox):
    references: List[ItemReference]


@dataclass
class ItemLocationExtent:
    extent_index: Optional[int]
    extent_offset: int
    extent_length: int


@dataclass
class ItemLocation:
    item_id: int
    reserved: Optional[int]
    construction_method: Optional[int]
    data_reference_index: int
    base_offset: int
    extents: List[ItemLocationExtent]


@dataclass
class IlocBox(FullBox):
    offset_size: int
    length_size: int
    base_offset_size: int
    index_size: Optional[int]
    items: List[ItemLocation]


# ============================================================
# Box decoders
# ============================================================

BoxDecoder = Callable[[ByteReader, BoxHeader, str], Box]


def _read_unknown(reader: ByteReader, header: BoxHeader, path: str) -> UnknownBox:
    data = reader.read_bytes(header.end - reader.position)
    return UnknownBox(name=header.name, size=header.size, data=data)


def _read_ftyp(reader: ByteReader, header: BoxHeader, path: str) -> FtypBox:
    major_brand = read_fourcc(reader)
    minor_version = reader.read_u32()
    compatible_brands = []
    while reader.position + 4 <= header.end:
        compatible_brands.append(read_fourcc(reader))
    return FtypBox(
        name=header.name,
        size=header.size,
        major_brand=major_brand,
        minor_version=minor_version,
        compatible_brands=compatible_brands,
    )


def _read_meta(reader: ByteReader, header: BoxHeader, path: str) -> MetaBox:
    version, flags = read_version_and_flags(reader)
    children = []
    while reader.position < header.end:
        children.append(read_sub_box(reader, path, header.end))
    return MetaBox(name=header.name, size=header.size, version=version, flags=flags,
                   children=children)


def _read_hdlr(reader: ByteReader, header: BoxHeader, path: str) -> HdlrBox:
    version, flags = read_version_and_flags(reader)
    pre_defined = reader.read_u32()
    handler_type = read_fourcc(reader)
    reserved = (reader.read_u32(), reader.read_u32(), reader.read_u32())
    handler_name = reader.read_sized_string(header.end - reader.position)
    return HdlrBox(
        name=header.name,
        size=header.size,
        version=version,
        flags=flags,
        pre_defined=pre_defined,
        handler_type=handler_type,
        reserved=reserved,
        handler_name=handler_name,
    )


def _read_dinf(reader: ByteReader, header: BoxHeader, path: str) -> DinfBox:
    child = read_sub_box(reader, path, header.end)
    if not isinstance(child, DrefBox):
        raise UnexpectedChildTypeError(path, child.name, "dref")
    return DinfBox(name=header.name, size=header.size, dref=child)


def _read_dref(reader: ByteReader, header: BoxHeader, path: str) -> DrefBox:
    version, flags = read_version_and_flags(reader)
    entry_count = reader.read_u32()
    entries = []
    for _ in range(entry_count):
        child = read_sub_box(reader, path, header.end)
        if not isinstance(child, DrefEntryBox):
            raise UnexpectedChildTypeError(path, child.name, "|".join(DREF_ENTRY_TYPES))
        entries.append(child)
    return DrefBox(name=header.name, size=header.size, version=version, flags=flags,
                   entries=entries)


def _read_dref_entry(reader: ByteReader, header: BoxHeader, path: str) -> DrefEntryBox:
    version, flags = read_version_and_flags(reader)
    location = reader.read_sized_string(header.end - reader.position)
    return DrefEntryBox(name=header.name, size=header.size, version=version, flags=flags,
                        location=location)


def _read_pitm(reader: ByteReader, header: BoxHeader, path: str) -> PitmBox:
    version, flags = read_version_and_flags(reader)
    item_id = reader.read_u16() if version == 0 else reader.read_u32()
    return PitmBox(name=header.name, size=header.size, version=version, flags=flags,
                   item_id=item_id)


def _read_iinf(reader: ByteReader, header: BoxHeader, path: str) -> IinfBox:
    version, flags = read_version_and_flags(reader)
    entry_count = reader.read_u16() if version == 0 else reader.read_u32()
    entries = []
    for _ in range(entry_count):
        child = read_sub_box(reader, path, header.end)
        if not isinstance(child, InfeBox):
            raise UnexpectedChildTypeError(path, child.name, "infe")
        entries.append(child)
    LOGGER.debug("iinf lists %d item(s)", len(entries))
    return IinfBox(name=header.name, size=header.size, version=version, flags=flags,
                   entries=entries)


def _read_optional_c_string(reader: ByteReader, end: int) -> Optional[str]:
    if reader.position < end:
        return reader.read_c_string(end)
    return None


def _read_infe(reader: ByteReader, header: BoxHeader, path: str) -> InfeBox:
    version, flags = read_version_and_flags(reader)
    end = header.end

    if version in (0, 1):
        item_id = reader.read_u16()
        protection_index = reader.read_u16()
        item_name = reader.read_c_string(end)
        content_type = reader.read_c_string(end)
        value = ItemInfoV0V1(
            item_id=item_id,
            item_protection_index=protection_index,
            item_name=item_name,
            content_type=content_type,
            content_encoding=_read_optional_c_string(reader, end),
        )
        if version == 1 and reader.position < end:
            value.extension_type = reader.read_u32()
            value.extension = reader.read_bytes(end - reader.position)
    elif version in (2, 3):
        item_id = reader.read_u16() if version == 2 else reader.read_u32()
        protection_index = reader.read_u16()
        item_type = read_fourcc(reader)
        value = ItemInfoV2V3(
            item_id=item_id,
            item_protection_index=protection_index,
            item_type=item_type,
            item_name=reader.read_c_string(end),
        )
        if item_type == "mime":
            value.content_type = reader.read_c_string(end)
            value.content_encoding = _read_optional_c_string(reader, end)
        elif item_type == "uri ":
            value.item_uri_type = reader.read_c_string(end)
    else:
        LOGGER.debug("infe version %d kept as an opaque payload", version)
        value = ItemInfoUnknown(reader.read_bytes(end - reader.position)
                                .decode('utf-8', errors='replace'))

    return InfeBox(name=header.name, size=header.size, version=version, flags=flags,
                   value=value)


def _read_iref(reader: ByteReader, header: BoxHeader, path: str) -> IrefBox:
    version, flags = read_version_and_flags(reader)
    if version not in (0, 1):
        raise UnsupportedVersionError(header.name, version)
    id_width = 2 if version == 0 else 4

    references = []
    while reader.position < header.end:
        sub_header = read_box_header(reader, header.end)
        from_item_id = reader.read_uint(id_width)
        reference_count = reader.read_u16()
        to_item_ids = [reader.read_uint(id_width) for _ in range(reference_count)]
        _finish_box(reader, sub_header)
        references.append(ItemReference(
            reference_type=sub_header.name,
            from_item_id=from_item_id,
            to_item_ids=to_item_ids,
        ))
    return IrefBox(name=header.name, size=header.size, version=version, flags=flags,
                   references=references)


def _check_width(field_name: str, width: int) -> None:
    if width not in VALID_FIELD_WIDTHS:
        raise FieldWidthOutOfRangeError(field_name, width)


def _read_iloc(reader: ByteReader, header: BoxHeader, path: str) -> IlocBox:
    version, flags = read_version_and_flags(reader)
    if version not in (0, 1, 2):
        raise UnsupportedVersionError(header.name, version)

    sizes = reader.read_u8()
    offset_size = sizes >> 4
    length_size = sizes & 0x0F
    sizes = reader.read_u8()
    base_offset_size = sizes >> 4
    # Low nibble is reserved in version 0
    index_size = (sizes & 0x0F) if version in (1, 2) else None

    _check_width("offset_size", offset_size)
    _check_width("length_size", length_size)
    _check_width("base_offset_size", base_offset_size)
    if index_size is not None:
        _check_width("index_size", index_size)

    item_count = reader.read_u32() if version == 2 else reader.read_u16()
    items = []
    for _ in range(item_count):
        item_id = reader.read_u32() if version == 2 else reader.read_u16()

        reserved = None
        construction_method = None
        if version in (1, 2):
            packed = reader.read_u16()
            reserved = packed >> 4
            construction_method = packed & 0x0F

        data_reference_index = reader.read_u16()
        base_offset = reader.read_uint(base_offset_size)

        extent_count = reader.read_u16()
        extents = []
        for _ in range(extent_count):
            extent_index = reader.read_uint(index_size) if index_size is not None else None
            extents.append(ItemLocationExtent(
                extent_index=extent_index,
                extent_offset=reader.read_uint(offset_size),
                extent_length=reader.read_uint(length_size),
            ))

        items.append(ItemLocation(
            item_id=item_id,
            reserved=reserved,
            construction_method=construction_method,
            data_reference_index=data_reference_index,
            base_offset=base_offset,
            extents=extents,
        ))

    LOGGER.debug("iloc v%d locates %d item(s)", version, len(items))
    return IlocBox(
        name=header.name,
        size=header.size,
        version=version,
        flags=flags,
        offset_size=offset_size,
        length_size=length_size,
        base_offset_size=base_offset_size,
        index_size=index_size,
        items=items,
    )


# Keyed by the dotted path from the top-level box
TOP_LEVEL_DECODERS: Dict[str, BoxDecoder] = {
    "ftyp": _read_ftyp,
    "meta": _read_meta,
}

SUB_BOX_DECODERS: Dict[str, BoxDecoder] = {
    "meta.hdlr": _read_hdlr,
    "meta.dinf": _read_dinf,
    "meta.dinf.dref": _read_dref,
    "meta.dinf.dref.alis": _read_dref_entry,
    "meta.dinf.dref.rsrc": _read_dref_entry,
    "meta.dinf.dref.url ": _read_dref_entry,
    "meta.pitm": _read_pitm,
    "meta.iinf": _read_iinf,
    "meta.iinf.infe": _read_infe,
    "meta.iref": _read_iref,
    "meta.iloc": _read_iloc,
}


def _finish_box(reader: ByteReader, header: BoxHeader) -> None:
    if reader.position > header.end:
        raise TruncatedInputError(header.offset, reader.position - header.offset, header.size)
    reader.seek(header.end)


def _decode(reader: ByteReader, header: BoxHeader, decoder: BoxDecoder, path: str) -> Box:
    box = decoder(reader, header, path)
    _finish_box(reader, header)
    return box


def read_sub_box(reader: ByteReader, parent_path: str, limit: int) -> Box:
    """
    Decode one box nested under parent_path.

    Args:
        reader: Reader positioned on the child's header
        parent_path: Dotted path of the parent, e.g. "meta.iinf"
        limit: End offset of the parent box

    Returns:
        The typed box, or an UnknownBox when the path is not in the table
    """
    header = read_box_header(reader, limit)
    path = f"{parent_path}.{header.name}"
    return _decode(reader, header, SUB_BOX_DECODERS.get(path, _read_unknown), path)


def read_top_box(reader: ByteReader) -> Box:
    """Decode the top-level box at the current position."""
    header = read_box_header(reader)
    LOGGER.debug("Box %r at offset %d, %d bytes", header.name, header.offset, header.size)
    decoder = TOP_LEVEL_DECODERS.get(header.name, _read_unknown)
    return _decode(reader, header, decoder, header.name)


def read_boxes(data: bytes) -> List[Box]:
    """
    Decode every top-level box of an ISOBMFF buffer.

    Raises:
        MetadataReadError: On any malformed box
    """
    reader = ByteReader(data)
    boxes = []
    while reader.remaining > 0:
        boxes.append(read_top_box(reader))
    return boxes
