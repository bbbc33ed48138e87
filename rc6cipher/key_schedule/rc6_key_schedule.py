"""
RC6 Key Schedule Implementation

This module implements the RC6 key expansion, which turns a variable
length key into a table of 2*rounds + 4 round keys of 32 bits each,
using the magic constants derived from e and the golden ratio.
"""

import logging
import operator
import secrets
from typing import List, Optional

import numpy as np

from ..errors import InvalidArgumentError

logger = logging.getLogger(__name__)

# Magic constants for w = 32
P32 = 0xB7E15163  # Odd((e - 2) * 2^32)
Q32 = 0x9E3779B9  # Odd((phi - 1) * 2^32)
LG_W = 5
MASK32 = 0xFFFFFFFF

# Default parameters for the cipher
CIPHER_DEFAULT_PARAMS = {
    'rounds': 20,              # Rounds used by the AES submission
    'max_rounds': 125,         # Keeps 2*rounds + 4 within a byte
    'word_size': 32,           # Bits per word
    'block_size': 16,          # Bytes per block (4 words)
    'max_key_bits': 0xFFFF     # Key length is carried in 16 bits
}


def rotate_left(value: int, shift: int, size: int = 32) -> int:
    """
    Rotate a value left by the specified number of bits.

    The shift amount is reduced modulo the word size first, so any
    non-negative shift is accepted.

    Args:
        value: The value to rotate
        shift: The number of bits to rotate by
        size: The bit size of the value

    Returns:
        The rotated value
    """
    shift %= size
    mask = (1 << size) - 1
    value &= mask
    return ((value << shift) | (value >> (size - shift))) & mask


def rotate_right(value: int, shift: int, size: int = 32) -> int:
    """
    Rotate a value right by the specified number of bits.

    Args:
        value: The value to rotate
        shift: The number of bits to rotate by
        size: The bit size of the value

    Returns:
        The rotated value
    """
    shift %= size
    mask = (1 << size) - 1
    value &= mask
    return ((value >> shift) | (value << (size - shift))) & mask


def generate_key(key_size: int = 16) -> bytes:
    """
    Generate a cryptographically secure random key.

    Args:
        key_size: Size of the key in bytes (default: 16)

    Returns:
        A random key as bytes
    """
    if key_size <= 0:
        raise InvalidArgumentError("Key size must be a positive number of bytes")
    return secrets.token_bytes(key_size)


def _as_integer(value, message: str) -> int:
    # Accepts any integral type (int, numpy integers) but not bool
    if isinstance(value, bool):
        raise InvalidArgumentError(message)
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidArgumentError(message) from None


def validate_rounds(rounds: int) -> int:
    """Check that a round count is an integer in [0, max_rounds]."""
    rounds = _as_integer(rounds, "Number of rounds must be an integer")
    if rounds < 0 or rounds > CIPHER_DEFAULT_PARAMS['max_rounds']:
        raise InvalidArgumentError(
            f"Number of rounds must be between 0 and {CIPHER_DEFAULT_PARAMS['max_rounds']}")
    return rounds


def validate_key(key: bytes, key_length_bits: Optional[int] = None) -> int:
    """
    Check the key material and its declared length.

    Args:
        key: The raw key bytes
        key_length_bits: Declared key length in bits, or None for len(key) * 8

    Returns:
        The effective key length in bits
    """
    if key is None:
        raise InvalidArgumentError("Key cannot be null")
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise InvalidArgumentError("Key must be a bytes-like object")

    view = memoryview(key)
    if not view.c_contiguous:
        raise InvalidArgumentError("Key must be a contiguous buffer")

    key_len = view.nbytes
    if key_len == 0:
        raise InvalidArgumentError("Key cannot be empty")

    if key_length_bits is None:
        key_length_bits = key_len * 8
    key_length_bits = _as_integer(key_length_bits, "Key length must be an integer number of bits")
    if key_length_bits <= 0:
        raise InvalidArgumentError("Key length cannot be zero")
    if key_length_bits > CIPHER_DEFAULT_PARAMS['max_key_bits']:
        raise InvalidArgumentError(
            f"Key length cannot exceed {CIPHER_DEFAULT_PARAMS['max_key_bits']} bits")
    if key_len * 8 < key_length_bits:
        raise InvalidArgumentError(
            f"Key of {key_len} bytes is shorter than the declared {key_length_bits} bits")

    return key_length_bits


def load_key_words(key: bytes, key_length_bits: int) -> List[int]:
    """
    Pack the key bytes into little-endian 32-bit words.

    Only whole bytes are loaded. For a length that is not a multiple of 8
    the byte following the last whole byte is cleared in the final word.

    Args:
        key: The raw key bytes
        key_length_bits: Key length in bits

    Returns:
        List of ceil(key_length_bits / 32) words
    """
    num_words = (key_length_bits + 31) // 32
    num_bytes = key_length_bits // 8

    padded = bytearray(4 * num_words)
    padded[:num_bytes] = memoryview(key).cast('B')[:num_bytes]

    if key_length_bits % 32 != 0 and key_length_bits % 8 != 0:
        # Byte-granular clear of the partial byte
        padded[4 * (num_words - 1) + num_bytes % 4] = 0

    key_words = np.frombuffer(padded, dtype='<u4').tolist()

    for i in range(len(padded)):
        padded[i] = 0

    return key_words


def initial_table(key_size: int) -> List[int]:
    """
    Build the arithmetic progression S[i] = P32 + i * Q32 (mod 2^32).

    Args:
        key_size: Number of round keys (2 * rounds + 4)

    Returns:
        The seeded table as a list of words
    """
    steps = np.arange(key_size, dtype=np.uint64)
    return ((steps * np.uint64(Q32) + np.uint64(P32)) & np.uint64(MASK32)).tolist()


def expand_key(key: bytes, key_length_bits: Optional[int] = None,
               num_rounds: int = CIPHER_DEFAULT_PARAMS['rounds']) -> np.ndarray:
    """
    Expand a key into the RC6 round-key table.

    Args:
        key: The raw key bytes
        key_length_bits: Key length in bits (default: len(key) * 8)
        num_rounds: Number of rounds (default: 20)

    Returns:
        A read-only uint32 array of 2 * num_rounds + 4 round keys
    """
    key_length_bits = validate_key(key, key_length_bits)
    num_rounds = validate_rounds(num_rounds)

    key_words = load_key_words(key, key_length_bits)
    c = len(key_words)

    key_size = 2 * num_rounds + 4
    round_keys = initial_table(key_size)

    # Mix the key into the round keys
    a = b = 0
    i = j = 0
    for _ in range(3 * max(c, key_size)):
        a = round_keys[i] = rotate_left((round_keys[i] + a + b) & MASK32, 3)
        b = key_words[j] = rotate_left((key_words[j] + a + b) & MASK32, (a + b) & 0x1F)
        i = (i + 1) % key_size
        j = (j + 1) % c

    for k in range(c):
        key_words[k] = 0

    table = np.array(round_keys, dtype=np.uint32)
    table.flags.writeable = False

    logger.debug("Expanded %d-bit key (%d words) into %d round keys",
                 key_length_bits, c, key_size)
    return table


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    table = expand_key(bytes(16))
    print(f"Round keys: {len(table)}")
    print(f"S[0] = {int(table[0]):#010x}, S[43] = {int(table[-1]):#010x}")
