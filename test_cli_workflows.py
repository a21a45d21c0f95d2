from __future__ import annotations

import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

from pkz.reader import read_entry, read_metadata


class CLIIntegrationTests(unittest.TestCase):
    def run_cli(self, args, *, expect: int | None = 0, cwd: Path | None = None):
        cmd = [sys.executable, "-m", "pkz.cli"] + list(args)
        env = os.environ.copy()
        repo_root = Path(__file__).resolve().parent
        existing = env.get("PYTHONPATH", "")
        env["PYTHONPATH"] = str(repo_root) if not existing else f"{repo_root}{os.pathsep}{existing}"
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=env,
        )
        if expect is not None and proc.returncode != expect:
            raise AssertionError(
                f"CLI exited {proc.returncode}, expected {expect}\nCommand: {' '.join(cmd)}\n"
                f"STDOUT:\n{proc.stdout.decode(errors='replace')}\nSTDERR:\n{proc.stderr.decode(errors='replace')}"
            )
        return proc

    def test_pack_info_list_extract(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            archive = root / "library.pkz"

            pack = self.run_cli(["pack", str(archive), "--loader", "test_pkz:sample_loader"])
            self.assertIn(b"Packed 2 comics, 3 volumes, 3 chapters, 4 pictures", pack.stdout)

            info = self.run_cli(["info", str(archive)])
            self.assertIn(b"Name: Library", info.stdout)
            self.assertIn(b"Pictures: 4", info.stdout)

            listing = self.run_cli(["list", str(archive)]).stdout.decode("utf-8")
            meta = read_metadata(str(archive))
            self.assertIn(f"cover\t{meta.cover_path}", listing)
            for comic in meta.comics:
                self.assertIn(f"comic\t{comic.idx}\t{comic.title}", listing)
            picture = meta.comics[1].volumes[0].chapters[0].pictures[0]
            self.assertIn(picture.picture_path, listing)

            out_file = root / "out" / "page.bin"
            self.run_cli(["extract", str(archive), picture.picture_path, "--output", str(out_file)])
            self.assertEqual(read_entry(str(archive), picture.picture_path), out_file.read_bytes())
            self.assertEqual("ページ".encode("utf-8") * 10, out_file.read_bytes())

            to_stdout = self.run_cli(["extract", str(archive), meta.comics[0].cover_path])
            self.assertEqual(b"comic-0-cover", to_stdout.stdout)

    def test_errors_exit_with_status_2(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            archive = root / "library.pkz"
            self.run_cli(["pack", str(archive), "--loader", "test_pkz:sample_loader", "--quiet"])

            missing = self.run_cli(["extract", str(archive), "no-such-entry"], expect=2)
            self.assertIn(b"entry not found", missing.stderr)

            self.run_cli(["info", str(root / "absent.pkz")], expect=2)
            self.run_cli(["pack", str(root / "x.pkz"), "--loader", "not-a-reference"], expect=2)
            self.run_cli(["pack", str(root / "y.pkz"), "--loader", "test_pkz:no_such_attr"], expect=2)
            self.assertFalse((root / "x.pkz").exists())


if __name__ == "__main__":
    unittest.main()
