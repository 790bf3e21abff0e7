'''
MD5-crypt ($1$) password hashing on top of the single-block MD5 engine.

    hash_password(pw, salt)
        alternate hash      md5(pw + salt + pw)
        first intermediate  md5(pw + "$1$" + salt + alt[:len(pw)] + bit-walk suffix)
        1000 rounds         md5(...) alternating on iteration parity, % 3 and % 7
        encoding            permute 16 bytes → 22 characters of ITOA64

The engine only supports passwords of up to 15 bytes and salts of up to
8 bytes; longer inputs raise CapacityExceeded.
'''

from md5crypt.block import Block, CapacityExceeded
from md5crypt.md5 import md5, MD5_DIGEST_SIZE


MAGIC = '$1$'   # crypt identifier for MD5-crypt
ITOA64 = './0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz'

# byte order of the final digest before it is rendered as text
PERMUTATION = (12, 6, 0, 13, 7, 1, 14, 8, 2, 15, 9, 3, 5, 10, 4, 11)

SALT_LIMIT = 8
PW_LIMIT = 15           # just to simplify things; real crypt passwords are unbounded
PW_HASH_LENGTH = 22
PW_ITERATIONS = 1000

# bit of the password length that selects a 0x00 byte in the first intermediate hash
ZERO_BYTE_FLAG = 1

SIX_BITS = 0x3f


def _as_bytes(s: str | bytes) -> bytes:
    return s.encode('utf-8') if isinstance(s, str) else bytes(s)


def compute_alternate_hash(pw: bytes, salt: bytes) -> bytes:
    '''
    Digest of password + salt + password.
    '''
    block = Block()
    block.append_string(pw)
    block.append_string(salt)
    block.append_string(pw)
    return md5(block)


def compute_first_intermediate(pw: bytes, salt: bytes, alt_hash: bytes) -> bytes:
    '''
    Compute the first intermediate hash.

        password + "$1$" + salt + first len(pw) bytes of the alternate hash,
        followed by one byte per bit of len(pw) (low bit first):
            bit set   → 0x00
            bit clear → the block's first data byte

    The first data byte is read from the block being built, exactly
    as the reference crypt implementation does.

    Parameters:
    -----------
    pw : bytes
        Encoded password.

    salt : bytes
        Encoded salt.

    alt_hash : bytes
        16-byte alternate hash.

    Returns:
    --------
    bytes
        16-byte first intermediate hash.
    '''
    block = Block()

    block.append_string(pw)
    block.append_string(MAGIC)
    block.append_string(salt)
    block.append_string(alt_hash[:len(pw)])

    n = len(pw)
    while n:
        if n & 1 == ZERO_BYTE_FLAG:
            block.append_byte(0x00)
        else:
            block.append_byte(block[0])
        n >>= 1

    return md5(block)


def compute_next_intermediate(pw: bytes, salt: bytes, inum: int, int_hash: bytes) -> bytes:
    '''
    Compute intermediate hash number `inum` + 1 from the previous one.

        even inum:  hash + [salt] + [pw] + pw
        odd inum:   pw + [salt] + [pw] + hash

    where [salt] is only added when inum % 3 != 0
    and [pw] only when inum % 7 != 0.
    '''
    block = Block()

    if inum % 2 == 0:
        block.append_string(int_hash)
    else:
        block.append_string(pw)

    if inum % 3 != 0:
        block.append_string(salt)

    if inum % 7 != 0:
        block.append_string(pw)

    if inum % 2 == 0:
        block.append_string(pw)
    else:
        block.append_string(int_hash)

    return md5(block)


def permute(digest: bytes) -> bytes:
    '''reorder a 16-byte digest through PERMUTATION'''
    assert len(digest) == MD5_DIGEST_SIZE
    return bytes(digest[p] for p in PERMUTATION)


def hash_to_string(digest: bytes) -> str:
    '''
    Render a 16-byte digest as 22 characters of the crypt alphabet.

    The permuted bytes are consumed in five groups of three and one final
    single byte. Each 3-byte group is read least significant bit first and
    cut into four 6-bit values:

        b0[0:6)   b0[6:8) | b1[0:4)   b1[4:8) | b2[0:2)   b2[2:8)

    The final byte gives two values: bits [0:6) and [6:8).

    Parameters:
    -----------
    digest : bytes
        Final 16-byte intermediate hash.

    Returns:
    --------
    str
        22-character encoded hash.
    '''
    rearr = permute(digest)
    result = []

    for i in range(0, 15, 3):
        b0, b1, b2 = rearr[i], rearr[i + 1], rearr[i + 2]
        result.append(ITOA64[b0 & SIX_BITS])
        result.append(ITOA64[((b0 >> 6) | (b1 << 2)) & SIX_BITS])
        result.append(ITOA64[((b1 >> 4) | (b2 << 4)) & SIX_BITS])
        result.append(ITOA64[(b2 >> 2) & SIX_BITS])

    # leftover byte: 6 bits, then the top 2
    last = rearr[15]
    result.append(ITOA64[last & SIX_BITS])
    result.append(ITOA64[last >> 6])

    return ''.join(result)


def hash_password(password: str | bytes, salt: str | bytes) -> str:
    '''
    Hash a password with MD5-crypt.

    Parameters:
    -----------
    password : str | bytes
        Password of at most 15 bytes (UTF-8 for str).

    salt : str | bytes
        Salt of at most 8 bytes, normally from [A-Za-z0-9./].

    Returns:
    --------
    str
        The 22-character encoded hash (without the "$1$salt$" prefix).

    Raises:
    -------
    CapacityExceeded
        If the password or salt is longer than supported.

    Example:
    --------
    >>> hash_password('Xr4ilOzQ', '3azHgidD')
    'BdQSCjbq.8WiVgf8izCML.'
    '''
    pw = _as_bytes(password)
    salt = _as_bytes(salt)

    if len(pw) > PW_LIMIT:
        raise CapacityExceeded(f'password is {len(pw)} bytes long (max {PW_LIMIT})')
    if len(salt) > SALT_LIMIT:
        raise CapacityExceeded(f'salt is {len(salt)} bytes long (max {SALT_LIMIT})')

    alt_hash = compute_alternate_hash(pw, salt)
    int_hash = compute_first_intermediate(pw, salt, alt_hash)

    # the following is supposed to make things run slower
    for inum in range(PW_ITERATIONS):
        int_hash = compute_next_intermediate(pw, salt, inum, int_hash)

    return hash_to_string(int_hash)


def split_crypt(crypted: str) -> tuple[str, str]:
    '''
    Split a "$1$salt$hash" string into (salt, hash).

    Raises ValueError if the identifier is not "$1$".
    '''
    if not crypted.startswith(MAGIC):
        raise ValueError(f'not an MD5-crypt string: {crypted!r}')

    salt, sep, hashed = crypted[len(MAGIC):].partition('$')
    if not sep:
        raise ValueError(f'missing hash field: {crypted!r}')
    return salt, hashed


def crypt_password(password: str | bytes, salt: str) -> str:
    '''
    Full crypt(3)-style string: "$1$" + salt + "$" + hash.

    Takes care of the magic string if present; anything after
    a second "$" in the salt is ignored.
    '''
    if salt.startswith(MAGIC):
        salt = salt[len(MAGIC):]
    salt = salt.split('$', 1)[0]

    return MAGIC + salt + '$' + hash_password(password, salt)


def verify_password(password: str | bytes, crypted: str) -> bool:
    '''check a password against a "$1$salt$hash" string'''
    salt, hashed = split_crypt(crypted)
    return hash_password(password, salt) == hashed
