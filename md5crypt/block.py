'''
Bounded byte buffer used to assemble a single MD5 input block.

A Block owns exactly 64 bytes of storage and a fill counter. Every MD5 call in
the engine builds a fresh Block, appends its input, and hands it to md5(),
which pads it in place to a full 64-byte block.
'''

# standard MD5 block size (in bytes)
BLOCK_SIZE = 64


class HashError(ValueError):
    '''
    Base class for every error raised by the md5crypt engine.
    '''


class CapacityExceeded(HashError):
    '''
    Raised when an append would push a Block past BLOCK_SIZE bytes,
    or when a password / salt is longer than the engine supports.
    '''


class Block:
    '''
    A (partially filled) block of up to 64 bytes.

    Attributes:
    -----------
    buffer : bytearray
        Fixed 64-byte backing storage.

    length : int
        Number of bytes in the buffer currently in use.
    '''

    def __init__(self):
        self.buffer = bytearray(BLOCK_SIZE)
        self.length = 0


    def __len__(self) -> int:
        return self.length


    def __getitem__(self, idx: int) -> int:
        # only the filled portion is addressable
        if not -self.length <= idx < self.length:
            raise IndexError('block index out of range')
        return self.buffer[idx % self.length]


    def __repr__(self) -> str:
        return f'Block(length = {self.length}, data = {self.data.hex()})'


    @property
    def data(self) -> bytes:
        '''bytes currently stored in the block'''
        return bytes(self.buffer[:self.length])


    @property
    def remaining(self) -> int:
        '''free bytes left before the block is full'''
        return BLOCK_SIZE - self.length


    def append_byte(self, b: int) -> None:
        '''
        Store one byte at the end of the block.

        Parameters:
        -----------
        b : int
            Byte value (0–255) to append.

        Raises:
        -------
        CapacityExceeded
            If the block already holds BLOCK_SIZE bytes.
        '''
        if not 0 <= b <= 0xff:
            raise ValueError(f'byte value out of range: {b}')

        if self.length + 1 > BLOCK_SIZE:
            raise CapacityExceeded(f'block overflow: cannot append 1 byte to {self.length}/{BLOCK_SIZE}')

        self.buffer[self.length] = b
        self.length += 1


    def append_string(self, s: str | bytes) -> None:
        '''
        Store all bytes of `s` at the end of the block.

        Strings are UTF-8 encoded first. Nothing is appended when the
        whole of `s` does not fit.

        Parameters:
        -----------
        s : str | bytes
            Text or raw bytes to append.

        Raises:
        -------
        CapacityExceeded
            If the combined length would exceed BLOCK_SIZE.
        '''
        src = s.encode('utf-8') if isinstance(s, str) else bytes(s)

        if self.length + len(src) > BLOCK_SIZE:
            raise CapacityExceeded(
                f'block overflow: cannot append {len(src)} bytes to {self.length}/{BLOCK_SIZE}'
            )

        self.buffer[self.length : self.length + len(src)] = src
        self.length += len(src)
