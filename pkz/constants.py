import uuid
import zipfile


# Reserved entry holding the encoded Archive tree
INFO_ENTRY_NAME = "PKZ-INFO"

# Every stored byte is XOR'ed with this key
ENTRY_XOR_KEY = 0xAA

ENTRY_COMPRESSION = zipfile.ZIP_DEFLATED
DEFAULT_COMPRESS_LEVEL = 6

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


def new_entry_token() -> str:
    return str(uuid.uuid4())
