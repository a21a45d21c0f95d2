from __future__ import annotations

import json
import unittest

from pkz.entities import (
    Archive,
    Chapter,
    Comic,
    ComicInfo,
    Picture,
    PictureInfo,
    Volume,
)
from pkz.errors import DecodeError


def _archive() -> Archive:
    picture = Picture(id="p", title="page", width=10, height=20, format="png", idx=0, picture_path="tok-p")
    chapter = Chapter(id="ch", title="chapter", updated_at=3, created_at=2, idx=0, picture_count=1, pictures=[picture])
    volume = Volume(id="v", title="volume", idx=0, chapter_count=1, picture_count=1, chapters=[chapter])
    comic = Comic(
        id="c",
        title="漫画",
        categories=["a"],
        tags=["t1", "t2"],
        finished=True,
        updated_at=(1 << 63) - 1,
        created_at=-(1 << 63),
        idx=0,
        cover_path="tok-c",
        volumes_count=1,
        chapter_count=1,
        picture_count=1,
        volumes=[volume],
    )
    return Archive(
        name="lib",
        comic_count=1,
        volumes_count=1,
        chapter_count=1,
        picture_count=1,
        comics=[comic],
    )


class EntityTests(unittest.TestCase):
    def test_json_field_names_and_order(self):
        data = json.loads(_archive().to_json())
        self.assertEqual(
            [
                "name", "author", "description", "cover_path", "author_avatar_path",
                "comic_count", "volumes_count", "chapter_count", "picture_count", "comics",
            ],
            list(data),
        )
        comic = data["comics"][0]
        self.assertIs(True, comic["finished"])
        self.assertEqual("漫画", comic["title"])
        self.assertEqual(["idx", "picture_path"], list(comic["volumes"][0]["chapters"][0]["pictures"][0])[-2:])

    def test_json_roundtrip_keeps_utf8_and_int64(self):
        archive = _archive()
        text = archive.to_json()
        self.assertEqual(archive, Archive.from_json(text))

    def test_json_escapes_non_ascii_text(self):
        archive = _archive()
        archive.name = b"caf\xe9".decode("utf-8", "surrogateescape")
        text = archive.to_json()
        # lone surrogates must survive the utf-8 encode done by the writer
        text.encode("ascii")
        loaded = Archive.from_json(text)
        self.assertEqual(archive.name, loaded.name)
        self.assertEqual("漫画", loaded.comics[0].title)

    def test_from_info_copies_fields(self):
        info = ComicInfo(id="x", title="T", categories=["c"], tags=["t"], author="A", finished=True)
        comic = Comic.from_info(info, 4)
        self.assertEqual(4, comic.idx)
        self.assertEqual(["c"], comic.categories)
        self.assertEqual(["t"], comic.tags)
        self.assertTrue(comic.finished)
        self.assertEqual("", comic.cover_path)
        self.assertEqual([], comic.volumes)
        info.categories.append("later")
        self.assertEqual(["c"], comic.categories)

        picture = Picture.from_info(PictureInfo(id="p", width=1, height=2, format="webp"), 7)
        self.assertEqual((7, "", 1, 2, "webp"), (picture.idx, picture.picture_path, picture.width, picture.height, picture.format))

    def test_invalid_json(self):
        with self.assertRaises(DecodeError):
            Archive.from_json("{not json")
        with self.assertRaises(DecodeError):
            Archive.from_json("[]")
        with self.assertRaises(DecodeError):
            Archive.from_json("[" * 100000 + "]" * 100000)

    def test_schema_mismatches(self):
        good = _archive().to_dict()

        def broken(mutate):
            data = json.loads(json.dumps(good))
            mutate(data)
            return data

        cases = [
            lambda d: d.pop("comic_count"),
            lambda d: d.__setitem__("name", 5),
            lambda d: d.__setitem__("picture_count", "1"),
            lambda d: d.__setitem__("picture_count", True),
            lambda d: d.__setitem__("picture_count", 1.5),
            lambda d: d.__setitem__("volumes_count", 1 << 63),
            lambda d: d.__setitem__("comics", {}),
            lambda d: d["comics"][0].__setitem__("finished", 1),
            lambda d: d["comics"][0].__setitem__("tags", ["ok", 2]),
            lambda d: d["comics"][0]["volumes"][0]["chapters"][0].pop("pictures"),
            lambda d: d["comics"][0]["volumes"][0]["chapters"][0]["pictures"].append("nope"),
        ]
        for mutate in cases:
            with self.assertRaises(DecodeError):
                Archive.from_dict(broken(mutate))

    def test_unknown_keys_ignored(self):
        data = _archive().to_dict()
        data["extra"] = {"anything": 1}
        self.assertEqual(_archive(), Archive.from_dict(data))


if __name__ == "__main__":
    unittest.main()
