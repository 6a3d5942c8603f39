"""
Login and persistent ("remember me") sessions.

:meth:`RememberManager.authenticate` is the sole gate for logging in with a
password. After a successful login, the caller decides from the parsed
"remember me" field (:func:`parse_remember_me`) whether to call
:meth:`RememberManager.remember` or :meth:`RememberManager.forget`.
"""

import logging
from typing import Optional, Tuple, Union

from . import domain, tokens
from .digest import SecretDigest
from .store import AccountStore

logger = logging.getLogger(__name__)

LEGACY_TRUE = frozenset(['true', 'on', 'yes'])
"""Truthy spellings accepted from older login forms."""


def parse_remember_me(value: Optional[str],
                      sentinel: str) -> domain.RememberMe:
    """
    Interpret the raw "remember me" value from a login request.

    Parameters
    ----------
    value : str or None
        Value as submitted, if the field was present at all.
    sentinel : str
        The configured value that requests a persistent login.

    Returns
    -------
    :class:`.domain.RememberMe`

    """
    if value is None or not value.strip():
        return domain.RememberMe.UNSET
    value = value.strip()
    if value == sentinel or value.lower() in LEGACY_TRUE:
        return domain.RememberMe.YES
    return domain.RememberMe.NO


class RememberManager(object):
    """Authenticates accounts and manages their remember-tokens."""

    def __init__(self, store: AccountStore, digest: SecretDigest) -> None:
        self._store = store
        self._digest = digest

    def authenticate(self, email: str, password: str) \
            -> Union[domain.Account, domain.AuthFailure]:
        """
        Validate an e-mail address and password.

        Parameters
        ----------
        email : str
            Compared case-insensitively.
        password : str
            Password (as entered).

        Returns
        -------
        :class:`.domain.Account`
            On success.
        :class:`.domain.AuthFailure`
            ``NOT_FOUND`` or ``BAD_PASSWORD``.

        Raises
        ------
        :class:`.CorruptDigest`
            Raised if the stored password digest is malformed.

        """
        account = self._store.find_by_email(email)
        if account is None:
            logger.debug('Login failed: no such account')
            return domain.AuthFailure.NOT_FOUND
        if not self._digest.authenticated(account, 'password', password):
            logger.debug('Login failed: bad password for account %s',
                         account.account_id)
            return domain.AuthFailure.BAD_PASSWORD
        logger.debug('Authenticated account %s', account.account_id)
        return account

    def remember(self, account: domain.Account) -> Tuple[domain.Account, str]:
        """
        Issue a new remember-token, replacing any previous one.

        Returns
        -------
        :class:`.domain.Account`
            The account with its new remember digest.
        str
            The plaintext token, for a durable, httponly cookie.

        """
        token = tokens.new_token()
        updated = self._store.update(account.account_id,  # type: ignore
                                     remember_digest=self._digest.digest(token))
        logger.info('Remembering account %s', account.account_id)
        return updated, token

    def forget(self, account: domain.Account) -> domain.Account:
        """Revoke the remember-token, if any."""
        updated = self._store.update(account.account_id,  # type: ignore
                                     remember_digest=None)
        logger.info('Forgot account %s', account.account_id)
        return updated

    def is_remembered(self, account: domain.Account, token: str) -> bool:
        """Check a presented remember-token against the account's digest."""
        return self._digest.authenticated(account, 'remember', token)

    def resume(self, account_id: int, token: str) -> Optional[domain.Account]:
        """Load the account for a remember-me cookie, if the token is current."""
        account = self._store.find_by_id(account_id)
        if account is None or not self.is_remembered(account, token):
            return None
        return account
