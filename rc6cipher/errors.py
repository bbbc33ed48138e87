"""
Cipher Errors

This module defines the exceptions raised by the RC6 cipher when a
caller breaks the contract of an operation.
"""


class RC6Error(Exception):
    """Base class for all errors raised by the rc6cipher package."""


class InvalidArgumentError(RC6Error, ValueError):
    """
    Raised for a bad round count, key, key length or block.

    Subclasses ValueError so existing handlers for bad arguments still apply.
    """


class NotInitializedError(RC6Error, RuntimeError):
    """Raised when a block operation is attempted before the cipher is keyed."""
