"""
Key Schedule Package

This package implements the RC6 key expansion that transforms a
variable-length key into the round-key table used by the block cipher.
"""

from .rc6_key_schedule import (
    expand_key, generate_key, rotate_left, rotate_right,
    CIPHER_DEFAULT_PARAMS, P32, Q32, LG_W, MASK32
)

__all__ = [
    'expand_key', 'generate_key', 'rotate_left', 'rotate_right',
    'CIPHER_DEFAULT_PARAMS', 'P32', 'Q32', 'LG_W', 'MASK32'
]
