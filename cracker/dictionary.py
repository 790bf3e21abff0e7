from pathlib import Path

from cracker.fileio import FileIO
from cracker.config import DICTIONARY_LIMIT
from md5crypt.password import PW_LIMIT


class DictionaryError(ValueError):
    '''malformed dictionary file'''


def validate_word(word: str, max_length: int = PW_LIMIT) -> str:
    '''
    Check a single dictionary word.

    Parameters:
    -----------
    word : str
        Candidate password, without its terminating newline.

    max_length : int
        Longest accepted word, in UTF-8 bytes (the engine's unit).

    Returns:
    --------
    str
        The word, unchanged.
    '''
    if not isinstance(word, str):
        raise DictionaryError(f'Invalid dictionary word: expected text, got {type(word).__name__}')
    if any(ch.isspace() for ch in word):
        raise DictionaryError(f'Invalid dictionary word: {word!r} contains whitespace')
    if len(word.encode('utf-8')) > max_length:
        raise DictionaryError(f'Invalid dictionary word: {word!r} is longer than {max_length} bytes')
    return word


def load_words(path: str | Path, /, *, limit: int = DICTIONARY_LIMIT, max_length: int = PW_LIMIT) -> list[str]:
    '''
    Load the dictionary of candidate passwords.

    Accepts `.yaml`/`.yml` holding either a list of words or a mapping with a
    "passwords" list, or plain text with one word per line. Blank lines are
    skipped; every other line must be a valid word.

    Parameters:
    -----------
    path : str | Path
        Dictionary file.

    limit : int, default 1000
        Maximum number of words.

    max_length : int, default 15
        Longest accepted word.

    Returns:
    --------
    list[str]
        Words in file order.

    Raises:
    -------
    DictionaryError
        On an invalid word or too many words; the message names the line.
    '''
    p = FileIO.resolve(path)

    if p.suffix.lower() in ('.yaml', '.yml'):
        try:
            data = FileIO.load_yaml(p)
        except UnicodeDecodeError:
            raise DictionaryError(f'{p}: Invalid dictionary file: not valid UTF-8') from None
        if isinstance(data, dict):
            data = data.get('passwords', [])
        if not isinstance(data, list):
            raise DictionaryError(f'{p}: expected a list of words')
        entries = [str(w) if isinstance(w, (int, float)) else w for w in data]
    else:
        try:
            entries = FileIO.load_txt(p)
        except UnicodeDecodeError as e:
            lineno = e.object[:e.start].count(b'\n') + 1
            raise DictionaryError(f'{p}:{lineno}: Invalid dictionary word: not valid UTF-8') from None

    words = []
    for lineno, word in enumerate(entries, 1):
        if word == '':
            continue
        try:
            words.append(validate_word(word, max_length))
        except DictionaryError as e:
            raise DictionaryError(f'{p}:{lineno}: {e}') from None

        if len(words) > limit:
            raise DictionaryError(f'{p}:{lineno}: Too many dictionary words (max {limit})')

    return words
