"""Provide methods for working with user accounts."""

import logging
from typing import List, Optional, Tuple

from . import domain, validation
from .activation import ActivationWorkflow
from .config import Settings
from .digest import SecretDigest
from .exceptions import EmailTaken
from .store import AccountStore

logger = logging.getLogger(__name__)

Errors = List[domain.ValidationError]


class AccountManager(object):
    """Registers, edits, looks up and deletes accounts."""

    def __init__(self, store: AccountStore, digest: SecretDigest,
                 settings: Settings, activation: ActivationWorkflow) -> None:
        self._store = store
        self._digest = digest
        self._settings = settings
        self._activation = activation

    def get(self, account_id: int) -> Optional[domain.Account]:
        """Load an account by id."""
        return self._store.find_by_id(account_id)

    def get_by_email(self, email: str) -> Optional[domain.Account]:
        """Load an account by e-mail address, ignoring case."""
        return self._store.find_by_email(email)

    def email_exists(self, email: str) -> bool:
        """
        Determine whether an account with a particular address exists.

        Parameters
        ----------
        email : str

        Returns
        -------
        bool

        """
        return self._store.email_exists(email)

    def newest(self, limit: Optional[int] = None) -> List[domain.Account]:
        return self._store.newest(limit)

    def register(self, name: str, email: str, password: str,
                 password_confirmation: Optional[str] = None) \
            -> Tuple[Optional[domain.Account], Errors]:
        """
        Create a new, unactivated account and mail its activation token.

        Parameters
        ----------
        name : str
        email : str
            Stored lower-cased.
        password : str
        password_confirmation : str
            Optional; checked against ``password`` when given.

        Returns
        -------
        :class:`.domain.Account`
            The stored account, or ``None`` if validation failed.
        list
            :class:`.domain.ValidationError` for each violated rule.

        """
        errors = validation.validate_account(
            name, email, self._settings,
            password=password,
            change_password=True,
            confirmation=password_confirmation,
            exists=self._store.email_exists
        )
        if errors:
            logger.debug('Registration rejected: %s', errors)
            return None, errors

        account = domain.Account(
            name=name,
            email=email.lower(),
            password_digest=self._digest.digest(password)
        )
        account, token = self._activation.create_activation_digest(account)
        try:
            account = self._store.create(account)
        except EmailTaken:
            # Lost a race with a concurrent registration.
            return None, [domain.ValidationError('email',
                                                 domain.ValidationError.TAKEN)]
        logger.info('Registered account %s', account.account_id)
        self._activation.send_activation_email(account, token)
        return account, []

    def update(self, account: domain.Account, name: Optional[str] = None,
               email: Optional[str] = None, password: Optional[str] = None,
               password_confirmation: Optional[str] = None,
               change_password: bool = False) -> Tuple[domain.Account, Errors]:
        """
        Edit an account.

        Fields left as ``None`` keep their current values. The password is
        only validated and replaced when ``change_password`` is set; in that
        case a blank password is rejected as ``required``.

        Returns
        -------
        :class:`.domain.Account`
            The updated account, or ``account`` unchanged if there were errors.
        list
            :class:`.domain.ValidationError` for each violated rule.

        """
        if account.account_id is None:
            raise ValueError('Account ID must be set')
        new_name = account.name if name is None else name
        new_email = account.email if email is None else email

        def _exists(address: str) -> bool:
            return self._store.email_exists(address,
                                            exclude_id=account.account_id)

        errors = validation.validate_account(
            new_name, new_email, self._settings,
            password=password,
            change_password=change_password,
            confirmation=password_confirmation,
            exists=_exists
        )
        if errors:
            return account, errors

        fields = {}
        if new_name != account.name:
            fields['name'] = new_name
        if new_email.lower() != account.email:
            fields['email'] = new_email.lower()
        if change_password:
            fields['password_digest'] = self._digest.digest(password)  # type: ignore
            # Setting a password closes any open reset.
            fields['reset_digest'] = None
            fields['reset_sent_at'] = None
        if not fields:
            return account, []
        try:
            updated = self._store.update(account.account_id, **fields)
        except EmailTaken:
            return account, [domain.ValidationError(
                'email', domain.ValidationError.TAKEN
            )]
        logger.debug('Updated account %s: %s', account.account_id,
                     ', '.join(sorted(fields)))
        return updated, []

    def delete(self, account: domain.Account) -> None:
        """Delete an account, its relationships and its microposts."""
        if account.account_id is None:
            raise ValueError('Account ID must be set')
        self._store.delete(account.account_id)
        logger.info('Deleted account %s', account.account_id)
