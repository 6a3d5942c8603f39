"""Account activation: ``Unactivated -> Activated``."""

import logging
from typing import Optional, Tuple, Union

from . import domain, tokens
from .digest import SecretDigest
from .exceptions import NoSuchAccount
from .mail import Mailer
from .store import AccountStore, util

logger = logging.getLogger(__name__)


class ActivationWorkflow(object):
    """
    Moves accounts from unactivated to activated via a single-use token.

    The token is generated and digested before the account is first
    persisted, and mailed to the registered address. Activation tokens do
    not expire.
    """

    def __init__(self, store: AccountStore, digest: SecretDigest,
                 mailer: Mailer) -> None:
        self._store = store
        self._digest = digest
        self._mailer = mailer

    def create_activation_digest(self, account: domain.Account) \
            -> Tuple[domain.Account, str]:
        """
        Attach a fresh activation digest to an account that is not yet stored.

        Returns
        -------
        :class:`.domain.Account`
            A copy of ``account`` carrying the digest.
        str
            The plaintext token, to be mailed once and then discarded.

        """
        if account.account_id is not None:
            raise ValueError('Activation digests are created before persisting')
        token = tokens.new_token()
        return account._replace(activation_digest=self._digest.digest(token)), \
            token

    def send_activation_email(self, account: domain.Account,
                              token: str) -> None:
        self._mailer.send_activation_email(account, token)

    def activate(self, account: domain.Account) -> domain.Account:
        """
        Activate an account. Activating twice has no further effect.

        The stored account decides whether activation already happened, so
        a stale copy of ``account`` does not move ``activated_at``.
        """
        if account.account_id is None:
            raise ValueError('Account must be persisted before activation')
        stored = self._store.find_by_id(account.account_id)
        if stored is None:
            raise NoSuchAccount(f'No account with id {account.account_id}')
        if stored.activated:
            return stored
        activated = self._store.update(account.account_id, activated=True,
                                       activated_at=util.utcnow())
        logger.info('Activated account %s', account.account_id)
        return activated

    def activate_with_token(self, email: str, token: str) \
            -> Union[domain.Account, domain.ActivationFailure]:
        """
        Handle an activation link.

        Returns
        -------
        :class:`.domain.Account`
            The activated account.
        :class:`.domain.ActivationFailure`
            If the account is unknown, already active, or the token is wrong.

        """
        account: Optional[domain.Account] = self._store.find_by_email(email)
        if account is None:
            return domain.ActivationFailure.NOT_FOUND
        if account.activated:
            return domain.ActivationFailure.ALREADY_ACTIVATED
        if not self._digest.authenticated(account, 'activation', token):
            logger.debug('Bad activation token for account %s',
                         account.account_id)
            return domain.ActivationFailure.INVALID_TOKEN
        return self.activate(account)
