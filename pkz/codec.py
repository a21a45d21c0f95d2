from __future__ import annotations

from .constants import ENTRY_XOR_KEY


_XOR_TABLE = bytes(b ^ ENTRY_XOR_KEY for b in range(256))


def encode(data: bytes) -> bytes:
    """Mask entry bytes so generic archive browsers cannot render them.

    This is obfuscation only and provides no confidentiality.
    """
    return bytes(data).translate(_XOR_TABLE)


# XOR with a fixed key is its own inverse
decode = encode
