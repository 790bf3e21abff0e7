import tempfile
import unittest
from pathlib import Path

import yaml

from cracker.dictionary import DictionaryError, load_words, validate_word


class TestDictionary(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name: str, text: str) -> Path:
        p = self.dir / name
        p.write_bytes(text.encode('utf-8'))
        return p

    def test_load_text_words(self):
        p = self.write('dictionary-00.txt', 'password1\nhello\nletmein\n')
        self.assertEqual(load_words(p), ['password1', 'hello', 'letmein'])

    def test_last_line_without_newline_is_kept(self):
        p = self.write('dictionary.txt', 'one\ntwo')
        self.assertEqual(load_words(p), ['one', 'two'])

    def test_blank_lines_are_skipped(self):
        p = self.write('dictionary.txt', 'one\n\ntwo\n\n')
        self.assertEqual(load_words(p), ['one', 'two'])

    def test_inner_whitespace_is_malformed(self):
        p = self.write('dictionary.txt', 'one\ntw o\n')
        with self.assertRaises(DictionaryError) as cm:
            load_words(p)
        self.assertIn(':2:', str(cm.exception))

    def test_carriage_return_is_malformed(self):
        p = self.write('dictionary.txt', 'one\r\ntwo\r\n')
        with self.assertRaises(DictionaryError):
            load_words(p)

    def test_word_longer_than_15_is_malformed(self):
        p = self.write('dictionary.txt', 'a' * 15 + '\n' + 'b' * 16 + '\n')
        with self.assertRaises(DictionaryError):
            load_words(p)

    def test_word_length_counts_utf8_bytes(self):
        p = self.write('dictionary.txt', 'é' * 7 + '\n' + 'é' * 9 + '\npassword1\n')
        with self.assertRaises(DictionaryError) as cm:
            load_words(p)
        self.assertIn(':2:', str(cm.exception))
        self.assertIn('15 bytes', str(cm.exception))

    def test_invalid_utf8_is_malformed(self):
        p = self.dir / 'dictionary.txt'
        p.write_bytes(b'hello\ncaf\xe9\npassword1\n')
        with self.assertRaises(DictionaryError) as cm:
            load_words(p)
        self.assertIn(':2:', str(cm.exception))
        self.assertIn('UTF-8', str(cm.exception))

    def test_word_limit(self):
        p = self.write('dictionary.txt', ''.join(f'w{i}\n' for i in range(4)))
        self.assertEqual(len(load_words(p, limit = 4)), 4)
        with self.assertRaises(DictionaryError) as cm:
            load_words(p, limit = 3)
        self.assertIn('Too many dictionary words', str(cm.exception))

    def test_yaml_list_and_mapping(self):
        listed = self.dir / 'words.yaml'
        listed.write_text(yaml.dump(['alpha', 'beta', 1234]), encoding = 'utf-8')
        self.assertEqual(load_words(listed), ['alpha', 'beta', '1234'])

        mapped = self.dir / 'words.yml'
        mapped.write_text(yaml.dump({'passwords': ['gamma']}), encoding = 'utf-8')
        self.assertEqual(load_words(mapped), ['gamma'])

    def test_validate_word(self):
        self.assertEqual(validate_word('fine'), 'fine')
        with self.assertRaises(DictionaryError):
            validate_word('tab\there')
        with self.assertRaises(DictionaryError):
            validate_word('toolong', max_length = 3)
        with self.assertRaises(DictionaryError):
            validate_word('ééé', max_length = 5)


if __name__ == '__main__':
    unittest.main(verbosity=1)
