"""
Cipher Core Package

This package implements the RC6 block cipher: the keyed cipher object
and its encryption/decryption round transforms on 128-bit blocks.
"""

from .block_cipher import RC6Cipher, BLOCK_SIZE, encrypt_block, decrypt_block

__all__ = ['RC6Cipher', 'BLOCK_SIZE', 'encrypt_block', 'decrypt_block']
