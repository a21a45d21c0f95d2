from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import List, Optional

from pkz.constants import DEFAULT_COMPRESS_LEVEL
from pkz.errors import ContainerIOError, DecodeError, NotFoundError, PkzError
from pkz.loader import ComicLoader
from pkz.reader import PkzReader
from pkz.writer import write_pkz


def _load_loader(ref: str) -> ComicLoader:
    """Instantiate a ComicLoader from a ``module:attr`` reference.

    ``attr`` may be a ComicLoader subclass or any zero-argument factory
    returning a ComicLoader.
    """
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"loader must be given as module:attr, got {ref!r}")
    module = importlib.import_module(module_name)
    factory = module
    for part in attr.split("."):
        factory = getattr(factory, part)
    loader = factory()
    if not isinstance(loader, ComicLoader):
        raise ValueError(f"{ref} did not produce a ComicLoader")
    return loader


def cmd_info(archive: str) -> bool:
    """Show archive metadata and aggregate counts.

    Args:
        archive: Path to a .pkz file.
    """
    with PkzReader(archive) as r:
        meta = r.metadata()
        entries = len(r.names())
    print(f"Archive: {archive}")
    print(f"  Name: {meta.name}")
    print(f"  Author: {meta.author}")
    if meta.description:
        print(f"  Description: {meta.description}")
    print(f"  Comics: {meta.comic_count}")
    print(f"  Volumes: {meta.volumes_count}")
    print(f"  Chapters: {meta.chapter_count}")
    print(f"  Pictures: {meta.picture_count}")
    print(f"  Entries: {entries}")
    return True


def cmd_list(archive: str) -> bool:
    """Print the comic tree with the entry token of every stored asset."""
    with PkzReader(archive) as r:
        meta = r.metadata()
    if meta.cover_path:
        print(f"cover\t{meta.cover_path}")
    if meta.author_avatar_path:
        print(f"avatar\t{meta.author_avatar_path}")
    for comic in meta.comics:
        print(f"comic\t{comic.idx}\t{comic.title}\t{comic.cover_path or '-'}")
        for volume in comic.volumes:
            print(f"  volume\t{volume.idx}\t{volume.title}\t{volume.cover_path or '-'}")
            for chapter in volume.chapters:
                print(f"    chapter\t{chapter.idx}\t{chapter.title}\t{chapter.cover_path or '-'}")
                for picture in chapter.pictures:
                    print(f"      picture\t{picture.idx}\t{picture.format}\t{picture.width}x{picture.height}\t{picture.picture_path}")
    return True


def cmd_extract(archive: str, entry: str, *, output: Optional[str] = None) -> bool:
    """Write one decoded entry to ``output`` (stdout when omitted)."""
    with PkzReader(archive) as r:
        if output:
            r.extract(entry, output)
            print(f"Extracted {entry} -> {output}")
        else:
            sys.stdout.buffer.write(r.read(entry))
            sys.stdout.buffer.flush()
    return True


def cmd_pack(output: str, loader_ref: str, *, compresslevel: int = DEFAULT_COMPRESS_LEVEL, quiet: bool = False) -> bool:
    """Build a .pkz from a ComicLoader referenced as ``module:attr``."""
    loader = _load_loader(loader_ref)
    meta = write_pkz(output, loader, compresslevel=compresslevel)
    if not quiet:
        print(
            f"Packed {meta.comic_count} comics, {meta.volumes_count} volumes, "
            f"{meta.chapter_count} chapters, {meta.picture_count} pictures -> {output}"
        )
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="pkz",
        description="PKZ comic archive tool",
    )
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_info = sub.add_parser("info", help="Show archive information")
    ap_info.add_argument("archive", help="Archive path")

    ap_list = sub.add_parser("list", help="List comics, volumes, chapters and pictures")
    ap_list.add_argument("archive", help="Archive path")

    ap_extract = sub.add_parser("extract", help="Extract one entry by name")
    ap_extract.add_argument("archive", help="Archive path")
    ap_extract.add_argument("entry", help="Entry name (token from 'pkz list', or PKZ-INFO)")
    ap_extract.add_argument("--output", "-o", help="Destination file (default: stdout)")

    ap_pack = sub.add_parser("pack", help="Build an archive from a comic loader")
    ap_pack.add_argument("output", help="Output .pkz path")
    ap_pack.add_argument("--loader", required=True, help="Loader factory as module:attr")
    ap_pack.add_argument("--level", type=int, default=DEFAULT_COMPRESS_LEVEL, help="Deflate level 0-9 (default 6)")
    ap_pack.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    try:
        if args.cmd == "info":
            cmd_info(args.archive)
        elif args.cmd == "list":
            cmd_list(args.archive)
        elif args.cmd == "extract":
            cmd_extract(args.archive, args.entry, output=args.output)
        elif args.cmd == "pack":
            cmd_pack(args.output, args.loader, compresslevel=args.level, quiet=args.quiet)
        else:
            raise RuntimeError("Unknown command")
    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except DecodeError as e:
        print(f"Error: archive metadata is unreadable: {e}", file=sys.stderr)
        sys.exit(2)
    except ContainerIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (PkzError, OSError, ImportError, AttributeError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
