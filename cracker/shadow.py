'''
Parsing of shadow-style password records.

    username:$1$salt$hash:last_change:min:max:warn:inactive:expire:reserved

Only the first two fields are used. The username is letters only, the crypt
id must be "$1$", the salt is at most 8 characters of [A-Za-z0-9./] and the
hash is the 22-character MD5-crypt encoding.
'''

import re
from pathlib import Path
from typing import NamedTuple

from cracker.fileio import FileIO
from cracker.config import USERNAME_LIMIT
from md5crypt.password import MAGIC, ITOA64, SALT_LIMIT, PW_HASH_LENGTH


USERNAME_RE = re.compile(r'[A-Za-z]+')
SALT_RE = re.compile(r'[A-Za-z0-9./]*')


class ShadowError(ValueError):
    '''malformed shadow file entry'''


class ShadowRecord(NamedTuple):
    username: str
    salt: str
    hash: str

    @property
    def crypted(self) -> str:
        return f'{MAGIC}{self.salt}${self.hash}'


def parse_record(line: str, lineno: int | None = None, /, *, username_limit: int = USERNAME_LIMIT) -> ShadowRecord:
    '''
    Parse one shadow line into a ShadowRecord.

    Parameters:
    -----------
    line : str
        A single record, with or without its trailing newline.

    lineno : int | None
        Line number used in error messages.

    username_limit : int, default 32
        Longest accepted username.

    Returns:
    --------
    ShadowRecord

    Raises:
    -------
    ShadowError
        If any field is missing or malformed.
    '''
    where = f'line {lineno}: ' if lineno is not None else ''

    def invalid(reason: str) -> ShadowError:
        return ShadowError(f'Invalid shadow file entry ({where}{reason}): {line.rstrip()!r}')

    fields = line.rstrip('\r\n').split(':')
    if len(fields) < 2:
        raise invalid('expected username:password fields')

    username, crypted = fields[0], fields[1]

    if not USERNAME_RE.fullmatch(username):
        raise invalid('username must be letters only')
    if len(username) > username_limit:
        raise invalid(f'username longer than {username_limit} characters')

    if not crypted.startswith(MAGIC):
        raise invalid(f'crypt id must be {MAGIC}')

    salt, sep, hashed = crypted[len(MAGIC):].partition('$')
    if not sep:
        raise invalid('missing $ after salt')
    if not SALT_RE.fullmatch(salt):
        raise invalid('salt has characters outside [A-Za-z0-9./]')
    if len(salt) > SALT_LIMIT:
        raise invalid(f'salt longer than {SALT_LIMIT} characters')

    if len(hashed) != PW_HASH_LENGTH or any(ch not in ITOA64 for ch in hashed):
        raise invalid(f'hash must be {PW_HASH_LENGTH} characters of the crypt alphabet')

    return ShadowRecord(username, salt, hashed)


def load_records(path: str | Path, /, *, username_limit: int = USERNAME_LIMIT) -> list[ShadowRecord]:
    '''
    Read every record of a shadow file, in file order. Blank lines are skipped.
    '''
    try:
        lines = FileIO.load_txt(path)
    except UnicodeDecodeError as e:
        lineno = e.object[:e.start].count(b'\n') + 1
        raise ShadowError(f'Invalid shadow file entry (line {lineno}: not valid UTF-8)') from None

    records = []
    for lineno, line in enumerate(lines, 1):
        if not line.strip():
            continue
        records.append(parse_record(line, lineno, username_limit = username_limit))
    return records
