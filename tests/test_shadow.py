import tempfile
import unittest
from pathlib import Path

from cracker.shadow import ShadowError, ShadowRecord, load_records, parse_record

HASH = 'BdQSCjbq.8WiVgf8izCML.'


class TestParseRecord(unittest.TestCase):
    def test_full_shadow_line(self):
        record = parse_record(f'alice:$1$3azHgidD${HASH}:19000:0:99999:7:::\n')
        self.assertEqual(record, ShadowRecord('alice', '3azHgidD', HASH))
        self.assertEqual(record.crypted, f'$1$3azHgidD${HASH}')

    def test_minimal_line(self):
        self.assertEqual(parse_record(f'bob:$1$ab./${HASH}'), ShadowRecord('bob', 'ab./', HASH))

    def test_empty_salt(self):
        self.assertEqual(parse_record(f'carol:$1$${HASH}:'), ShadowRecord('carol', '', HASH))

    def test_rejects_other_crypt_ids(self):
        with self.assertRaises(ShadowError):
            parse_record(f'dave:$6$saltsalt${HASH}:')

    def test_rejects_long_salt(self):
        with self.assertRaises(ShadowError):
            parse_record(f'erin:$1$abcdefghi${HASH}:')

    def test_rejects_bad_salt_characters(self):
        with self.assertRaises(ShadowError):
            parse_record(f'frank:$1$ab-c${HASH}:')

    def test_rejects_bad_hash(self):
        with self.assertRaises(ShadowError):
            parse_record('gina:$1$salt$tooshort:')
        with self.assertRaises(ShadowError):
            parse_record(f'gina:$1$salt${HASH[:-1]}-:')

    def test_rejects_bad_username(self):
        with self.assertRaises(ShadowError):
            parse_record(f'user1:$1$salt${HASH}:')
        with self.assertRaises(ShadowError):
            parse_record(f'{"a" * 33}:$1$salt${HASH}:')

    def test_error_names_line(self):
        with self.assertRaises(ShadowError) as cm:
            parse_record('nonsense', 7)
        self.assertIn('line 7', str(cm.exception))


class TestLoadRecords(unittest.TestCase):
    def test_load_records_skips_blank_lines(self):
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / 'shadow-00.txt'
            p.write_text(
                f'alice:$1$3azHgidD${HASH}:19000:0:99999:7:::\n'
                '\n'
                f'bob:$1$abcdefgh${HASH}:19000:0:99999:7:::\n',
                encoding = 'utf-8',
            )
            records = load_records(p)

        self.assertEqual([r.username for r in records], ['alice', 'bob'])
        self.assertEqual(records[1].salt, 'abcdefgh')

    def test_invalid_utf8_names_line(self):
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / 'shadow-00.txt'
            p.write_bytes(f'alice:$1$3azHgidD${HASH}:\n'.encode() + b'b\xf6b:$1$ab$x:\n')
            with self.assertRaises(ShadowError) as cm:
                load_records(p)

        self.assertIn('line 2', str(cm.exception))


if __name__ == '__main__':
    unittest.main(verbosity=1)
