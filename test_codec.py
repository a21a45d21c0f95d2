from __future__ import annotations

import os
import unittest

from pkz.codec import decode, encode


class EntryCodecTests(unittest.TestCase):
    def test_self_inverse(self):
        for data in (b"", b"\x00", b"\xaa", bytes(range(256)), os.urandom(4096)):
            self.assertEqual(data, decode(encode(data)))
            self.assertEqual(len(data), len(encode(data)))

    def test_xor_key(self):
        self.assertEqual(b"\xaa\x00\x55\xff", encode(b"\x00\xaa\xff\x55"))
        self.assertEqual(b"", encode(b""))

    def test_accepts_bytearray_and_memoryview(self):
        self.assertEqual(encode(b"abc"), encode(bytearray(b"abc")))
        self.assertEqual(encode(b"abc"), encode(memoryview(b"abc")))
        self.assertIsInstance(encode(bytearray(b"abc")), bytes)


if __name__ == "__main__":
    unittest.main()
