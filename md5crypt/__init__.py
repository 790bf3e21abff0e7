from md5crypt.block import Block, BLOCK_SIZE, HashError, CapacityExceeded
from md5crypt.md5 import md5, md5_bytes, hex_digest
from md5crypt.password import (
    ITOA64,
    MAGIC,
    hash_password,
    hash_to_string,
    crypt_password,
    split_crypt,
    verify_password,
)

__all__ = [
    'Block',
    'BLOCK_SIZE',
    'HashError',
    'CapacityExceeded',
    'md5',
    'md5_bytes',
    'hex_digest',
    'ITOA64',
    'MAGIC',
    'hash_password',
    'hash_to_string',
    'crypt_password',
    'split_crypt',
    'verify_password',
]
