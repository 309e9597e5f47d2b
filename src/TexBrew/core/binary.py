"""Fixed-size binary layouts for container headers."""

import struct
from typing import Dict, Sequence

from .errors import TextureContractError


class BinaryLayout:
    """Pair a `struct` format with the attribute names it packs.

    Pad bytes (``x``) in the format have no matching name and are written
    as zeros.
    """

    def __init__(self, fmt: str, fields: Sequence[str]):
        self._struct = struct.Struct(fmt)
        self.fields = tuple(fields)
        expected = len(self._struct.unpack(bytes(self._struct.size)))
        if expected != len(self.fields):
            raise ValueError(
                f"Layout '{fmt}' packs {expected} values but names "
                f"{len(self.fields)} fields"
            )

    @property
    def size(self) -> int:
        return self._struct.size

    @property
    def format(self) -> str:
        return self._struct.format

    def pack(self, obj) -> bytes:
        """Pack the named attributes of ``obj`` in layout order.

        A value the field cannot hold (such as a dimension past a 16-bit
        field) raises `TextureContractError`.
        """
        values = [getattr(obj, name) for name in self.fields]
        try:
            return self._struct.pack(*values)
        except struct.error as exc:
            raise TextureContractError(
                f"Cannot pack {type(obj).__name__} with '{self.format}': {exc}"
            ) from exc

    def unpack(self, data: bytes, offset: int = 0) -> Dict[str, object]:
        """Read one record from ``data`` at ``offset`` into a dict."""
        if len(data) - offset < self.size:
            raise ValueError(
                f"Need {self.size} bytes at offset {offset}, "
                f"got {max(0, len(data) - offset)}"
            )
        values = self._struct.unpack_from(data, offset)
        return dict(zip(self.fields, values))


def fourcc(code: str) -> bytes:
    """Return a four-character code as its 4 ASCII bytes."""
    raw = code.encode("ascii")
    if len(raw) != 4:
        raise ValueError(f"FourCC must be 4 characters, got {code!r}")
    return raw
