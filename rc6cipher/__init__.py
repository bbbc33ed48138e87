"""
RC6Cipher - RC6 Symmetric Block Cipher Library

This library implements RC6, a 128-bit block cipher built from 32-bit
additions, XORs, multiplications and data-dependent rotations.

Key Features:
- 128-bit block size (four 32-bit words)
- Variable key length, up to 65535 bits
- Configurable number of rounds (0-125, default 20)
- In-place block encryption on writable buffers
- Non-copyable cipher objects with explicit clone() and wipe()

"""

from .errors import RC6Error, InvalidArgumentError, NotInitializedError
from .key_schedule import expand_key, generate_key, CIPHER_DEFAULT_PARAMS
from .cipher_core import RC6Cipher, BLOCK_SIZE, encrypt_block, decrypt_block

__version__ = '0.1.0'
__author__ = 'RC6Cipher Team'

__all__ = [
    'RC6Cipher', 'BLOCK_SIZE', 'encrypt_block', 'decrypt_block',
    'expand_key', 'generate_key', 'CIPHER_DEFAULT_PARAMS',
    'RC6Error', 'InvalidArgumentError', 'NotInitializedError'
]
