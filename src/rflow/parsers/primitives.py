"""Big-endian primitive readers.

Each reader takes a bytes-like buffer and returns the decoded value
together with a zero-copy view of the bytes that follow it. A buffer
shorter than the field raises InsufficientBytesError; no other error
originates here.
"""

import struct

from rflow.common.exceptions import InsufficientBytesError

_U8 = struct.Struct("!B")
_U16 = struct.Struct("!H")
_U32 = struct.Struct("!I")

Buffer = bytes | bytearray | memoryview


def _view(data: Buffer) -> memoryview:
    if isinstance(data, memoryview):
        return data
    return memoryview(data)


def _read(fmt: struct.Struct, data: Buffer) -> tuple[int, memoryview]:
    view = _view(data)
    if len(view) < fmt.size:
        raise InsufficientBytesError(fmt.size, len(view))
    (value,) = fmt.unpack_from(view)
    return value, view[fmt.size:]


def read_u8(data: Buffer) -> tuple[int, memoryview]:
    """Read an unsigned 8-bit integer."""
    return _read(_U8, data)


def read_u16(data: Buffer) -> tuple[int, memoryview]:
    """Read a big-endian unsigned 16-bit integer."""
    return _read(_U16, data)


def read_u32(data: Buffer) -> tuple[int, memoryview]:
    """Read a big-endian unsigned 32-bit integer."""
    return _read(_U32, data)


def skip(data: Buffer, width: int) -> memoryview:
    """Consume ``width`` bytes of padding.

    Args:
        data: Buffer to consume from.
        width: Number of bytes to drop.

    Returns:
        View of the bytes after the padding.

    Raises:
        InsufficientBytesError: If fewer than ``width`` bytes remain.
    """
    view = _view(data)
    if len(view) < width:
        raise InsufficientBytesError(width, len(view))
    return view[width:]
