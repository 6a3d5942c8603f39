"""Exceptions."""


class CorruptDigest(RuntimeError):
    """A stored digest is not a well-formed bcrypt hash."""


class NoSuchAccount(RuntimeError):
    """Account does not exist."""


class EmailTaken(RuntimeError):
    """Another account already uses this e-mail address."""


class StoreError(IOError):
    """The underlying database rejected or failed an operation."""
