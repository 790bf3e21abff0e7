import unittest

import numpy as np

from md5crypt.md5 import md5_bytes
from md5crypt.password import ITOA64, PERMUTATION, hash_to_string, permute


def rederive_permuted_bytes(encoded: str) -> bytes:
    # map characters back to 6-bit values and reassemble the byte groups
    values = [ITOA64.index(ch) for ch in encoded]
    out = bytearray()
    for i in range(0, 20, 4):
        v = values[i] | (values[i + 1] << 6) | (values[i + 2] << 12) | (values[i + 3] << 18)
        out += v.to_bytes(3, 'little')
    out.append(values[20] | (values[21] << 6))
    return bytes(out)


class TestHashToString(unittest.TestCase):
    def test_permutation_is_a_reordering(self):
        self.assertEqual(sorted(PERMUTATION), list(range(16)))
        self.assertEqual(permute(bytes(range(16))), bytes(PERMUTATION))

    def test_alphabet(self):
        self.assertEqual(len(ITOA64), 64)
        self.assertEqual(len(set(ITOA64)), 64)
        self.assertEqual(ITOA64[:12], './0123456789')

    def test_zero_digest(self):
        self.assertEqual(hash_to_string(bytes(16)), '.' * 22)

    def test_all_ones_digest(self):
        # 21 full 6-bit groups, then the two leftover bits of the last byte
        self.assertEqual(hash_to_string(b'\xff' * 16), 'z' * 21 + '1')

    def test_bit_order_of_first_group(self):
        digest = bytearray(16)
        digest[12] = 0x01           # first permuted byte, lowest bit
        self.assertEqual(hash_to_string(bytes(digest))[:4], '/...')
        digest[12] = 0x40           # bit 6 spills into the second character
        self.assertEqual(hash_to_string(bytes(digest))[:4], './..')

    def test_rederived_values_reconstruct_permuted_digest(self):
        rng = np.random.default_rng(1321)
        digests = [md5_bytes(b'abc'), bytes(range(16)), b'\xff' * 16]
        digests += [rng.integers(0, 256, size = 16, dtype = np.uint8).tobytes() for _ in range(20)]

        for digest in digests:
            with self.subTest(digest = digest.hex()):
                encoded = hash_to_string(digest)
                self.assertEqual(len(encoded), 22)
                self.assertEqual(rederive_permuted_bytes(encoded), permute(digest))


if __name__ == '__main__':
    unittest.main(verbosity=1)
