"""
PKZ: single-file packaging for comic libraries.

A PKZ container is a ZIP archive whose entries are deflate-compressed and
masked with a fixed XOR byte transform:

- One entry per cover, author avatar and picture, named by a random token.
- A reserved ``PKZ-INFO`` entry holding the JSON-encoded Archive tree
  (archive -> comics -> volumes -> chapters -> pictures) with aggregate counts
  and the entry token of every stored asset.

Containers are built by walking a ComicLoader (pkz.writer.write_pkz) and read
back entry by entry (pkz.reader.read_entry / read_metadata). The XOR mask only
keeps generic archive browsers from showing images; it is not encryption.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "codec",
    "entities",
    "errors",
    "loader",
    "writer",
    "reader",
]

# Programmatic API: pkz.writer.write_pkz, pkz.reader.read_entry/read_metadata
# and the CLI functions in pkz.cli (cmd_pack/cmd_extract) which take normal parameters.
