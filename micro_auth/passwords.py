"""
Password reset: ``NoOpenReset -> ResetRequested -> (Consumed | Expired)``.

A reset token is mailed to the account's address and accepted for a fixed
window after it was issued. Setting a new password consumes the token.
"""

import logging
from datetime import datetime
from typing import NamedTuple, Optional, Sequence, Tuple, Union

from . import domain, tokens, validation
from .config import Settings
from .digest import SecretDigest
from .mail import Mailer
from .store import AccountStore, util

logger = logging.getLogger(__name__)


class ResetOutcome(NamedTuple):
    """Result of :meth:`PasswordReset.reset_password`."""

    account: Optional[domain.Account] = None
    """The account with its new password, on success."""

    failure: Optional[domain.ResetFailure] = None
    """Why the token was rejected, if it was."""

    errors: Sequence[domain.ValidationError] = ()
    """Problems with the new password, if the token was accepted."""

    @property
    def ok(self) -> bool:
        return self.failure is None and not self.errors


class PasswordReset(object):
    """Issues, checks and consumes time-bounded password reset tokens."""

    def __init__(self, store: AccountStore, digest: SecretDigest,
                 settings: Settings, mailer: Mailer) -> None:
        self._store = store
        self._digest = digest
        self._settings = settings
        self._mailer = mailer

    def create_reset_digest(self, account: domain.Account) \
            -> Tuple[domain.Account, str]:
        """
        Open a reset for ``account``, replacing any earlier token.

        Returns
        -------
        :class:`.domain.Account`
            The account with ``reset_digest`` and ``reset_sent_at`` set.
        str
            The plaintext token, to be mailed once.

        """
        token = tokens.new_token()
        updated = self._store.update(account.account_id,  # type: ignore
                                     reset_digest=self._digest.digest(token),
                                     reset_sent_at=util.utcnow())
        return updated, token

    def send_password_reset_email(self, account: domain.Account,
                                  token: str) -> None:
        self._mailer.send_password_reset_email(account, token)

    def request_reset(self, email: str) -> Optional[domain.Account]:
        """
        Open a reset for the account registered under ``email`` and mail it.

        Returns ``None`` (and sends nothing) if there is no such account.
        """
        account = self._store.find_by_email(email)
        if account is None:
            logger.debug('Password reset requested for unknown address')
            return None
        account, token = self.create_reset_digest(account)
        logger.info('Password reset requested for account %s',
                    account.account_id)
        self.send_password_reset_email(account, token)
        return account

    def is_reset_expired(self, account: domain.Account,
                         now: Optional[datetime] = None) -> bool:
        """
        Determine whether the account's reset window has elapsed.

        An account with no open reset is treated as expired.
        """
        if account.reset_sent_at is None:
            return True
        if now is None:
            now = util.utcnow()
        return now > account.reset_sent_at + self._settings.reset_window

    def check(self, email: str, token: str) \
            -> Union[domain.Account, domain.ResetFailure]:
        """
        Validate a reset link.

        The token is rejected once the window has elapsed, even if it still
        matches the stored digest.
        """
        account = self._store.find_by_email(email)
        if account is None:
            return domain.ResetFailure.NOT_FOUND
        if not self._digest.authenticated(account, 'reset', token):
            logger.debug('Bad reset token for account %s', account.account_id)
            return domain.ResetFailure.INVALID_TOKEN
        if self.is_reset_expired(account):
            logger.debug('Expired reset token for account %s',
                         account.account_id)
            return domain.ResetFailure.EXPIRED
        return account

    def reset_password(self, email: str, token: str, password: str,
                       password_confirmation: Optional[str] = None) \
            -> ResetOutcome:
        """
        Consume a reset token by setting a new password.

        The reset digest is cleared in the same update as the new password,
        so the token cannot be replayed. Any remember-token is revoked too.
        """
        checked = self.check(email, token)
        if isinstance(checked, domain.ResetFailure):
            return ResetOutcome(failure=checked)
        errors = validation.validate_password(
            password, self._settings, change_password=True,
            confirmation=password_confirmation
        )
        if errors:
            return ResetOutcome(account=checked, errors=errors)
        account = self._store.update(
            checked.account_id,  # type: ignore
            password_digest=self._digest.digest(password),
            reset_digest=None,
            reset_sent_at=None,
            remember_digest=None
        )
        logger.info('Password reset for account %s', account.account_id)
        return ResetOutcome(account=account)
