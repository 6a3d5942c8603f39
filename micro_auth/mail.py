"""
Interface to the outbound mail collaborator.

Delivery itself lives outside this package. Workflows hand a mailer the
account and the plaintext token exactly once, and do not wait for or react
to the delivery outcome.
"""

import logging
from abc import ABC, abstractmethod

from . import domain

logger = logging.getLogger(__name__)


class Mailer(ABC):
    """Sends account activation and password reset messages."""

    @abstractmethod
    def send_activation_email(self, account: domain.Account,
                              token: str) -> None:
        """Send the activation link for a newly registered account."""

    @abstractmethod
    def send_password_reset_email(self, account: domain.Account,
                                  token: str) -> None:
        """Send a password reset link."""


class LoggingMailer(Mailer):
    """Records delivery requests in the log; the token itself is omitted."""

    def send_activation_email(self, account: domain.Account,
                              token: str) -> None:
        logger.info('Activation e-mail requested for account %s',
                    account.account_id)

    def send_password_reset_email(self, account: domain.Account,
                                  token: str) -> None:
        logger.info('Password reset e-mail requested for account %s',
                    account.account_id)
