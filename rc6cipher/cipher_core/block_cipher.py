"""
Block Cipher Implementation

This module provides RC6Cipher, the RC6 block cipher with a 128-bit
block, a variable-length key and a configurable number of rounds.
Each round mixes the four 32-bit words of the block with data-dependent
rotations driven by f(x) = x * (2x + 1).
"""

import logging
from typing import Optional, Union

import numpy as np

from ..errors import InvalidArgumentError, NotInitializedError
from ..key_schedule.rc6_key_schedule import (
    CIPHER_DEFAULT_PARAMS, LG_W, MASK32, expand_key, rotate_left, rotate_right,
    validate_rounds
)

logger = logging.getLogger(__name__)

BLOCK_SIZE = CIPHER_DEFAULT_PARAMS['block_size']

BytesLike = Union[bytes, bytearray, memoryview]


def _f(x: int) -> int:
    # x * (2x + 1) mod 2^32, rotated by lg(w)
    return rotate_left((x * (2 * x + 1)) & MASK32, LG_W)


class RC6Cipher:
    """
    RC6 block cipher with a 128-bit block and 32-bit words.

    The round-key table is absent until init() is called and is never
    modified afterwards; re-keying swaps in a freshly expanded table.
    Instances cannot be copied or pickled, use clone() for an explicit
    duplicate of the key material.
    """

    def __init__(self, rounds: int = CIPHER_DEFAULT_PARAMS['rounds']):
        """
        Create an unkeyed cipher.

        Args:
            rounds: Number of rounds, between 0 and 125 (default: 20)
        """
        self._rounds = validate_rounds(rounds)
        self._round_keys: Optional[np.ndarray] = None

    @property
    def rounds(self) -> int:
        """Number of rounds, fixed at construction."""
        return self._rounds

    def init(self, key: BytesLike, key_length_bits: Optional[int] = None) -> None:
        """
        Key the cipher.

        Args:
            key: The raw key bytes
            key_length_bits: Key length in bits (default: len(key) * 8)
        """
        # expand_key validates everything before the current table is replaced
        table = expand_key(key, key_length_bits, self._rounds)
        self._round_keys = table
        logger.debug("RC6 cipher keyed with %d rounds", self._rounds)

    def is_initialized(self) -> bool:
        """Return True once init() has produced a round-key table."""
        return self._round_keys is not None

    def _require_round_keys(self) -> np.ndarray:
        round_keys = self._round_keys
        if round_keys is None:
            raise NotInitializedError("RC6 not initialized")
        return round_keys

    @staticmethod
    def _block_words(block: BytesLike) -> np.ndarray:
        """
        Map a writable 16-byte buffer onto four little-endian words.

        The returned array is a view: assigning to it writes the block.
        """
        try:
            view = memoryview(block)
        except TypeError:
            raise InvalidArgumentError("Block must be a bytes-like object") from None

        if view.readonly:
            raise InvalidArgumentError("Block must be writable")
        if view.nbytes != BLOCK_SIZE:
            raise InvalidArgumentError(f"Block must be exactly {BLOCK_SIZE} bytes")

        try:
            view = view.cast('B')
        except TypeError:
            raise InvalidArgumentError("Block must be a contiguous buffer") from None

        return np.frombuffer(view, dtype='<u4')

    def encrypt(self, block: BytesLike) -> None:
        """
        Encrypt a 16-byte block in place.

        Args:
            block: A writable 16-byte buffer
        """
        s = self._require_round_keys()
        state = self._block_words(block)
        a, b, c, d = state.tolist()
        r = self._rounds

        b = (b + int(s[0])) & MASK32
        d = (d + int(s[1])) & MASK32

        for i in range(1, r + 1):
            t = _f(b)
            u = _f(d)
            a = (rotate_left(a ^ t, u & 0x1F) + int(s[2 * i])) & MASK32
            c = (rotate_left(c ^ u, t & 0x1F) + int(s[2 * i + 1])) & MASK32

            a, b, c, d = b, c, d, a

        a = (a + int(s[2 * r + 2])) & MASK32
        c = (c + int(s[2 * r + 3])) & MASK32

        state[:] = (a, b, c, d)

    def decrypt(self, block: BytesLike) -> None:
        """
        Decrypt a 16-byte block in place.

        Args:
            block: A writable 16-byte buffer
        """
        s = self._require_round_keys()
        state = self._block_words(block)
        a, b, c, d = state.tolist()
        r = self._rounds

        c = (c - int(s[2 * r + 3])) & MASK32
        a = (a - int(s[2 * r + 2])) & MASK32

        for i in range(r, 0, -1):
            a, b, c, d = d, a, b, c

            u = _f(d)
            t = _f(b)
            c = rotate_right((c - int(s[2 * i + 1])) & MASK32, t & 0x1F) ^ u
            a = rotate_right((a - int(s[2 * i])) & MASK32, u & 0x1F) ^ t

        d = (d - int(s[1])) & MASK32
        b = (b - int(s[0])) & MASK32

        state[:] = (a, b, c, d)

    def _copy_block(self, data: BytesLike) -> bytearray:
        self._require_round_keys()
        try:
            view = memoryview(data)
        except TypeError:
            raise InvalidArgumentError("Block must be a bytes-like object") from None
        if view.nbytes != BLOCK_SIZE:
            raise InvalidArgumentError(f"Block must be exactly {BLOCK_SIZE} bytes")
        return bytearray(view.tobytes())

    def encrypt_block(self, plaintext: BytesLike) -> bytes:
        """
        Encrypt a single block without modifying the input.

        Args:
            plaintext: The 16-byte plaintext block

        Returns:
            The 16-byte ciphertext block
        """
        block = self._copy_block(plaintext)
        self.encrypt(block)
        return bytes(block)

    def decrypt_block(self, ciphertext: BytesLike) -> bytes:
        """
        Decrypt a single block without modifying the input.

        Args:
            ciphertext: The 16-byte ciphertext block

        Returns:
            The 16-byte plaintext block
        """
        block = self._copy_block(ciphertext)
        self.decrypt(block)
        return bytes(block)

    def clone(self) -> 'RC6Cipher':
        """Return an independent cipher holding a copy of this cipher's round keys."""
        other = RC6Cipher(self._rounds)
        if self._round_keys is not None:
            table = self._round_keys.copy()
            table.flags.writeable = False
            other._round_keys = table
        return other

    def wipe(self) -> None:
        """Zero and release the round keys, leaving the cipher unkeyed."""
        table = self._round_keys
        self._round_keys = None
        if table is not None:
            table.flags.writeable = True
            table.fill(0)
            logger.debug("RC6 round keys wiped")

    def __enter__(self) -> 'RC6Cipher':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.wipe()

    def __copy__(self):
        raise TypeError("RC6Cipher cannot be copied, use clone() to duplicate key material")

    def __deepcopy__(self, memo):
        raise TypeError("RC6Cipher cannot be copied, use clone() to duplicate key material")

    def __reduce_ex__(self, protocol):
        raise TypeError("RC6Cipher cannot be pickled")

    def __repr__(self) -> str:
        return f"RC6Cipher(rounds={self._rounds}, initialized={self.is_initialized()})"


def encrypt_block(plaintext: BytesLike, key: BytesLike,
                  num_rounds: int = CIPHER_DEFAULT_PARAMS['rounds']) -> bytes:
    """
    Convenience function to encrypt a single block.

    Args:
        plaintext: The 16-byte plaintext block
        key: The raw key bytes
        num_rounds: Number of rounds (default: 20)

    Returns:
        The encrypted ciphertext block
    """
    with RC6Cipher(num_rounds) as cipher:
        cipher.init(key)
        return cipher.encrypt_block(plaintext)


def decrypt_block(ciphertext: BytesLike, key: BytesLike,
                  num_rounds: int = CIPHER_DEFAULT_PARAMS['rounds']) -> bytes:
    """
    Convenience function to decrypt a single block.

    Args:
        ciphertext: The 16-byte ciphertext block
        key: The raw key bytes
        num_rounds: Number of rounds (default: 20)

    Returns:
        The decrypted plaintext block
    """
    with RC6Cipher(num_rounds) as cipher:
        cipher.init(key)
        return cipher.decrypt_block(ciphertext)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    key = bytes(range(16))
    plaintext = bytes.fromhex('00112233445566778899aabbccddeeff')

    for rounds in (20, 12):
        with RC6Cipher(rounds) as rc6:
            rc6.init(key)
            block = bytearray(plaintext)

            rc6.encrypt(block)
            print(f"Ciphertext ({rounds} rounds): {block.hex()}")

            rc6.decrypt(block)
            print(f"Decrypted ({rounds} rounds):  {block.hex()}")
            assert bytes(block) == plaintext

    print("RC6 round trips completed successfully!")
