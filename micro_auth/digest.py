"""
One-way digests of passwords and tokens.

Every secret this package persists (passwords, remember-tokens, activation
tokens and reset tokens) goes through the same :class:`SecretDigest`, so that
hashing and comparison are implemented exactly once.
"""

import logging
import re
from typing import Any, Optional

import bcrypt

from .exceptions import CorruptDigest

logger = logging.getLogger(__name__)

MIN_COST = 4
MAX_COST = 31

MAX_SECRET_BYTES = 72
"""bcrypt only considers the first 72 bytes of a secret."""

BCRYPT_DIGEST = re.compile(r'^\$2[abxy]?\$\d{2}\$[./A-Za-z0-9]{53}\Z')


class SecretDigest(object):
    """Salted, adaptive (bcrypt) hashing and verification of secrets."""

    def __init__(self, cost: int = 12) -> None:
        if not MIN_COST <= cost <= MAX_COST:
            raise ValueError(f'bcrypt cost must be between {MIN_COST} and '
                             f'{MAX_COST}, got {cost}')
        self._cost = cost

    @property
    def cost(self) -> int:
        """Work factor used for new digests."""
        return self._cost

    def digest(self, secret: str) -> str:
        """
        Generate a digest of ``secret`` that is safe to persist.

        Parameters
        ----------
        secret : str

        Returns
        -------
        str
            A bcrypt digest, embedding its own salt and cost.

        """
        salt = bcrypt.gensalt(rounds=self._cost)
        return bcrypt.hashpw(secret.encode('utf-8'), salt).decode('ascii')

    def verify(self, stored: Optional[str], candidate: str) -> bool:
        """
        Check a candidate secret against a stored digest.

        Parameters
        ----------
        stored : str or None
            A digest produced by :meth:`digest`. Absent digests never match.
        candidate : str
            The secret as presented by the client.

        Returns
        -------
        bool

        Raises
        ------
        :class:`.CorruptDigest`
            Raised if ``stored`` is not a valid bcrypt digest.

        """
        if not stored:
            return False
        if not BCRYPT_DIGEST.match(stored):
            logger.error('Stored digest is malformed')
            raise CorruptDigest('Stored digest is not a bcrypt hash')
        encoded = candidate.encode('utf-8')
        if len(encoded) > MAX_SECRET_BYTES:
            return False    # Could never have been digested.
        try:
            return bcrypt.checkpw(encoded, stored.encode('ascii'))
        except ValueError as e:
            logger.error('Stored digest could not be decoded: %s', e)
            raise CorruptDigest('Stored digest could not be decoded') from e

    def authenticated(self, obj: Any, attribute: str, token: str) -> bool:
        """
        Check a token against the ``<attribute>_digest`` field of ``obj``.

        For example, ``authenticated(account, 'remember', token)`` checks
        ``account.remember_digest``.
        """
        stored: Optional[str] = getattr(obj, f'{attribute}_digest')
        return self.verify(stored, token)
