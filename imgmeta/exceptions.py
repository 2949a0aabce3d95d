# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for imgmeta

Every decode failure is raised as a subclass of MetadataReadError so that
callers can either catch one specific condition or treat any malformed
input the same way.

Copyright 2025 DNAi inc.
"""

from typing import Optional


class ImgMetaError(Exception):
    """
    Base exception for all imgmeta errors.

    All imgmeta exceptions inherit from this class, allowing
    catch-all error handling for any imgmeta-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(ImgMetaError):
    """
    Raised when metadata cannot be decoded from a buffer.

    This is the common parent of every structured decode failure below.
    """
    pass


class TruncatedInputError(MetadataReadError):
    """
    Raised when a read runs past the end of the buffer or of the
    enclosing box.
    """
    def __init__(self, offset: int, expected: int, available: int):
        self.offset = offset
        self.expected = expected
        self.available = available
        super().__init__(
            f"Truncated input at offset {offset}: "
            f"expected {expected} bytes, {available} available"
        )


class BadMagicError(MetadataReadError):
    """Raised when the TIFF byte-order mark or magic number 42 is wrong."""
    pass


class UnexpectedMarkerError(MetadataReadError):
    """Raised when a JPEG marker does not start with 0xFF."""
    def __init__(self, offset: int, byte: int):
        self.offset = offset
        self.byte = byte
        super().__init__(f"Expected 0xFF at offset {offset} but got 0x{byte:02X}")


class UnrecognizedValueTypeError(MetadataReadError):
    """Raised when an IFD entry declares a value type outside 1-12."""
    def __init__(self, value_type: int, tag: Optional[int] = None):
        self.value_type = value_type
        self.tag = tag
        where = f"[Tag {tag}] " if tag is not None else ""
        super().__init__(f"{where}Encountered unknown TIFF value type: {value_type}")


class TypeMismatchError(MetadataReadError):
    """
    Raised when a tag projection expected one TIFF value type
    (e.g. ASCII, SHORT, RATIONAL) but the entry holds another.
    """
    def __init__(self, tag: int, expected: str, actual: str):
        self.tag = tag
        self.expected = expected
        self.actual = actual
        super().__init__(f"[Tag {tag}] Expected value to be {expected} (got {actual})")


class ArityMismatchError(MetadataReadError):
    """Raised when a tag projection expected a different number of values."""
    def __init__(self, tag: int, expected: int, actual: int):
        self.tag = tag
        self.expected = expected
        self.actual = actual
        super().__init__(f"[Tag {tag}] Expected exactly {expected} value(s) (got {actual})")


class UnexpectedChildTypeError(MetadataReadError):
    """Raised when a box contains a sub-box that is not valid in that context."""
    def __init__(self, parent: str, name: str, expected: str):
        self.parent = parent
        self.name = name
        self.expected = expected
        super().__init__(
            f"Encountered box '{name}' inside '{parent}' (expected {expected})"
        )


class FieldWidthOutOfRangeError(MetadataReadError):
    """Raised when an iloc nibble-coded field width is not one of 0, 4 or 8."""
    def __init__(self, field: str, width: int):
        self.field = field
        self.width = width
        super().__init__(f"Invalid value for iloc {field} encountered: {width}")


class UnsupportedVersionError(MetadataReadError):
    """Raised when a full box carries a version its layout does not define."""
    def __init__(self, box: str, version: int):
        self.box = box
        self.version = version
        super().__init__(f"Unsupported version for '{box}' box encountered: {version}")


class XmpParseError(MetadataReadError):
    """Raised when an XMP packet is not well-formed XML."""
    pass


class UnsupportedFormatError(ImgMetaError):
    """
    Raised when the file format is not supported.

    This exception is raised when:
    - File signature does not match any known format
    - Format is recognized but never decoded (PNG)
    """
    pass
