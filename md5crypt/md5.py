'''
NOTE: REFRESHERS
----------------
    Boolean Operations:
        &   →   AND
        |   →   OR
        ^   →   XOR (exclusive OR)
        ~   →   NOT (bitwise complement)
        <<  →   shift bits left; fill w/ 0s
        >>  →   shift bits right; fill w/ 0s

CONCEPTUAL FLOW
    Block → padding → message words (16 × 32 bit) → compression → final digest

    Only single-block messages are handled: every input the crypt hasher
    builds is at most 54 bytes, so padding always fits in one 64-byte block.

COMPRESSION LOGIC
    Each of the 64 steps uses a nonlinear Boolean function, an additive constant, a message word, and a bit rotation.

DATAFLOW VISUALIZATION
    The four state registers `(A, B, C, D)` rotate each step.
    After all 64 steps, the initial values are _added back_ to produce the digest.
'''

from enum import IntEnum
import numpy as np

from md5crypt.block import Block, BLOCK_SIZE, CapacityExceeded


# predefined left-rotation amounts for each of the 64 MD5 steps
# each group of 16 corresponds to one "round" of MD5 operations
shift = (7, 12, 17, 22, 7, 12, 17, 22, 7, 12, 17, 22, 7, 12, 17, 22,
         5,  9, 14, 20, 5,  9, 14, 20, 5,  9, 14, 20, 5,  9, 14, 20,
         4, 11, 16, 23, 4, 11, 16, 23, 4, 11, 16, 23, 4, 11, 16, 23,
         6, 10, 15, 21, 6, 10, 15, 21, 6, 10, 15, 21, 6, 10, 15, 21)


# MD5 needs 64 additive "noise" constants (one per step)
# constants derived from the sine function makes them "hard-to-predict" constants
sines = np.abs(np.sin(np.arange(64) + 1))                       # absolute sine values for integers 1..64
noise = tuple(int(x) for x in np.floor(2 ** 32 * sines))        # scales each sine value (0–1) to the 32-bit range


# initial 128-bit state values per RFC 1321
INIT_A = 0x67452301
INIT_B = 0xefcdab89
INIT_C = 0x98badcfe
INIT_D = 0x10325476

# standard MD5 digest size (in bytes)
MD5_DIGEST_SIZE = 16

# steps per round, and the length field / padding limits of the final block
STEPS_PER_ROUND = 16
LENGTH_FIELD_SIZE = 8
PADDING_LIMIT = BLOCK_SIZE - LENGTH_FIELD_SIZE       # 56: zero-pad up to here
MAX_MESSAGE_SIZE = PADDING_LIMIT - 1                 # 55: room left for the 0x80 marker

MASK_32 = 0xffffffff


def left_rotate(x: int, y: int) -> int:
    '''
    Rotates the bits of a 32-bit integer `x` left by `y` positions.

        Moves bits to the left
        the bits that fall off left end
        wrap around to right end
        (keeps all bits; no data loss)

    Parameters:
    -----------
    x : int
        The 32-bit integer to rotate.
    y : int
        Number of bits to rotate by (0–31).

    Returns:
    --------
    int
        The left-rotated 32-bit integer.

    Example:
    --------
    >>> hex(left_rotate(0x80000001, 1))
    '0x3'
    '''

    # shift x left by y bits, bring the overflowed bits around to the right side
    # '& 0xffffffff' ensures the result fits in 32 bits (since Python ints are unbounded)
    x &= MASK_32
    return ((x << (y & 31)) | (x >> (32 - (y & 31)))) & MASK_32


def bit_not(x: int) -> int:
    '''
    Bitwise NOT for a 32-bit integer.

    Since ~x in Python returns an infinite-precision (negative) integer,
    32-bit behavior is emulated by subtracting from 2^32-1.
    '''
    return MASK_32 - (x & MASK_32)   # equivalent to (~x) & 0xffffffff


class Round(IntEnum):
    '''
    The four MD5 rounds, 16 steps each.

    Every round pairs a nonlinear mixing function over (B, C, D) with a rule
    that picks which of the 16 message words feeds step i.

        round   mixing function             message word
        -----   -------------------------   ------------
        F       (B & C) | (~B & D)          i
        G       (B & D) | (C & ~D)          (5i + 1) % 16
        H       B ^ C ^ D                   (3i + 5) % 16
        I       C ^ (B | ~D)                (7i) % 16
    '''
    F = 0
    G = 1
    H = 2
    I = 3

    @classmethod
    def for_step(cls, i: int) -> 'Round':
        '''round that step i (0–63) belongs to'''
        if not 0 <= i < BLOCK_SIZE:
            raise ValueError(f'invalid step index: {i}')
        return cls(i // STEPS_PER_ROUND)


    def mix(self, b: int, c: int, d: int) -> int:
        '''
        Apply this round's nonlinear function to three 32-bit words.
        '''
        if self is Round.F:
            # selects bits from c if b = 1, otherwise from d
            return (b & c) | (bit_not(b) & d)
        elif self is Round.G:
            # selects bits from b if d = 1, otherwise from c
            return (b & d) | (c & bit_not(d))
        elif self is Round.H:
            # flips bits if an odd number of inputs have that bit set
            return b ^ c ^ d
        else:
            return c ^ (b | bit_not(d))


    def word_index(self, i: int) -> int:
        '''
        Index of the message word used at step i.
        '''
        if self is Round.F:
            return i
        elif self is Round.G:
            return (5 * i + 1) % 16
        elif self is Round.H:
            return (3 * i + 5) % 16
        else:
            return (7 * i) % 16


# map each of the 64 steps to its round, and to the message word it reads
round_for_step = tuple(Round.for_step(i) for i in range(BLOCK_SIZE))
msg_idx_for_step = tuple(rnd.word_index(i) for i, rnd in enumerate(round_for_step))


def pad_block(block: Block) -> None:
    '''
    Adds MD5 padding and message length to the block, in place.

        Appends a single '1' bit (0x80), followed by '0' bytes
        until the block holds 56 bytes, then the message length
        in bits as a 64-bit little-endian integer (64 bytes total).

    Parameters:
    -----------
    block : Block
        Block holding at most 55 bytes of message data.

    Raises:
    -------
    CapacityExceeded
        If the message does not leave room for padding in a single block.
    '''
    if len(block) > MAX_MESSAGE_SIZE:
        raise CapacityExceeded(
            f'message of {len(block)} bytes does not fit in a single block (max {MAX_MESSAGE_SIZE})'
        )

    # message length in *bits*, recorded before any padding is added
    bit_len_64 = (len(block) * 8) % (2 ** 64)

    # append 1 bit (0x80), then zeros up to the length field
    block.append_byte(0b10000000)
    while len(block) < PADDING_LIMIT:
        block.append_byte(0x00)

    # least significant byte first
    for i in range(LENGTH_FIELD_SIZE):
        block.append_byte((bit_len_64 >> (8 * i)) & 0xff)


def message_words(block: Block) -> list[int]:
    '''
    Split a padded 64-byte block into sixteen 32-bit words.

        Word i covers bytes [4i, 4i + 3]; byte 4i is the least significant.
    '''
    assert len(block) == BLOCK_SIZE

    data = block.data
    words = []
    for i in range(STEPS_PER_ROUND):
        w = 0
        # walk from the most significant byte down to the least
        for j in range(4 * i + 3, 4 * i - 1, -1):
            w = (w << 8) | data[j]
        words.append(w)

    assert len(words) == 16
    return words


def md5_step(msg_words: list[int], a: int, b: int, c: int, d: int, i: int) -> tuple[int, int, int, int]:
    '''
    Perform one of the 64 MD5 steps.

    Parameters:
    -----------
    msg_words : list[int]
        The sixteen message words of the block.
    a, b, c, d : int
        Current state registers.
    i : int
        Step index (0–63).

    Returns:
    --------
    tuple[int, int, int, int]
        The rotated state (D, newA, B, C).
    '''
    rnd = round_for_step[i]         # F, G, H or I

    # -- MAIN OPERATION --
    # combine previous state with message + constant
    a = (a + rnd.mix(b, c, d) + msg_words[msg_idx_for_step[i]] + noise[i]) % (2 ** 32)
    # rotate bits left by shift[i]
    a = left_rotate(a, shift[i])
    # add to next state variable
    a = (a + b) % (2 ** 32)
    # cyclically rotate the state variables (a → d, b → a, etc)
    return d, a, b, c


def md5(block: Block) -> bytes:
    '''
    Pad the block and compute its 16-byte MD5 digest.

    The block is consumed: it holds the padded 64 bytes afterwards
    and should not be reused.

    Parameters:
    -----------
    block : Block
        Message of at most 55 bytes.

    Returns:
    --------
    bytes
        16-byte MD5 digest.

    Raises:
    -------
    CapacityExceeded
        If the message is longer than 55 bytes.
    '''
    pad_block(block)
    msg_ints = message_words(block)

    a, b, c, d = INIT_A, INIT_B, INIT_C, INIT_D

    # perform 64 steps of mixing
    for i in range(BLOCK_SIZE):     # BLOCK_SIZE == 64 == number of steps
        a, b, c, d = md5_step(msg_ints, a, b, c, d, i)

    # add back in the initialization values (mod 2^32)
    state = (
        (a + INIT_A) % (2 ** 32),
        (b + INIT_B) % (2 ** 32),
        (c + INIT_C) % (2 ** 32),
        (d + INIT_D) % (2 ** 32),
    )

    # concatenate the four state words as 16 little-endian bytes
    return b''.join(x.to_bytes(length = 4, byteorder = 'little') for x in state)


def md5_bytes(s: str | bytes) -> bytes:
    '''
    Compute the MD5 digest of a short string or bytes object.

    Example:
    --------
    >>> md5_bytes(b'abc').hex()
    '900150983cd24fb0d6963f7d28e17f72'
    '''
    block = Block()
    block.append_string(s)
    return md5(block)


def hex_digest(digest: bytes) -> str:
    '''32-character hexadecimal rendering of a digest'''
    return digest.hex()


if __name__ == '__main__':
    import hashlib

    text = b'message digest'

    text_hashlib = hashlib.md5(text).hexdigest()
    text_scratch = hex_digest(md5_bytes(text))

    print('text: ', text)
    print(f'hashlib: {text_hashlib}')
    print(f'scratch: {text_scratch}')
