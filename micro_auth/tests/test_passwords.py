"""Tests for :mod:`micro_auth.passwords`."""

from datetime import timedelta
from unittest import TestCase, mock

from .. import domain, passwords
from ..store import util
from .util import CoreMixin


class TestResetDigest(CoreMixin, TestCase):
    """Reset tokens are issued with a time window."""

    def setUp(self):
        super(TestResetDigest, self).setUp()
        self.account = self.register()

    def test_not_expired_when_fresh(self):
        """A reset that was just requested has not expired."""
        account, token = self.core.resets.create_reset_digest(self.account)
        self.assertTrue(account.reset_requested)
        self.assertTrue(self.core.digest.authenticated(account, 'reset',
                                                       token))
        self.assertFalse(self.core.resets.is_reset_expired(account))

    def test_expires_after_two_hours(self):
        """Past the window, the reset has expired."""
        account, _ = self.core.resets.create_reset_digest(self.account)
        sent = account.reset_sent_at
        self.assertFalse(self.core.resets.is_reset_expired(
            account, now=sent + timedelta(hours=2)
        ))
        self.assertTrue(self.core.resets.is_reset_expired(
            account, now=sent + timedelta(hours=2, seconds=1)
        ))

    def test_no_open_reset(self):
        """An account without a reset counts as expired."""
        self.assertTrue(self.core.resets.is_reset_expired(self.account))

    def test_request_reset(self):
        """Requesting a reset mails a token for the account."""
        account = self.core.resets.request_reset('FOO@example.com')
        self.assertEqual(account.account_id, self.account.account_id)
        mailed, token = self.mailer.send_password_reset_email.call_args[0]
        self.assertEqual(mailed, account)
        self.assertTrue(self.core.digest.authenticated(account, 'reset',
                                                       token))

    def test_request_reset_unknown(self):
        """Nothing is sent for an unknown address."""
        self.assertIsNone(self.core.resets.request_reset('bar@example.com'))
        self.assertEqual(self.mailer.send_password_reset_email.call_count, 0)

    def test_new_request_replaces_token(self):
        self.core.resets.request_reset('foo@example.com')
        first = self.reset_token()
        self.core.resets.request_reset('foo@example.com')
        self.assertIs(self.core.resets.check('foo@example.com', first),
                      domain.ResetFailure.INVALID_TOKEN)


class TestResetPassword(CoreMixin, TestCase):
    """Consuming a reset token sets a new password, once."""

    def setUp(self):
        super(TestResetPassword, self).setUp()
        self.account = self.register()
        self.core.resets.request_reset('foo@example.com')
        self.token = self.reset_token()

    def test_check(self):
        result = self.core.resets.check('foo@example.com', self.token)
        self.assertIsInstance(result, domain.Account)
        self.assertIs(self.core.resets.check('foo@example.com', 'wrong'),
                      domain.ResetFailure.INVALID_TOKEN)
        self.assertIs(self.core.resets.check('bar@example.com', self.token),
                      domain.ResetFailure.NOT_FOUND)

    def test_check_expired(self):
        """An expired token is rejected even though it matches the digest."""
        later = util.utcnow() + timedelta(hours=3)
        with mock.patch(f'{passwords.__name__}.util.utcnow',
                        return_value=later):
            result = self.core.resets.check('foo@example.com', self.token)
        self.assertIs(result, domain.ResetFailure.EXPIRED)

    def test_reset_password(self):
        """The new password works, and the old one does not."""
        outcome = self.core.resets.reset_password('foo@example.com',
                                                  self.token, 'newpassword',
                                                  'newpassword')
        self.assertTrue(outcome.ok)
        self.assertIsNone(outcome.account.reset_digest)
        self.assertIsNone(outcome.account.reset_sent_at)
        self.assertEqual(
            self.core.sessions.authenticate('foo@example.com', 'newpassword'),
            outcome.account
        )
        self.assertIs(
            self.core.sessions.authenticate('foo@example.com', self.password),
            domain.AuthFailure.BAD_PASSWORD
        )

    def test_no_replay(self):
        """A consumed token cannot be used again."""
        self.core.resets.reset_password('foo@example.com', self.token,
                                        'newpassword')
        outcome = self.core.resets.reset_password('foo@example.com',
                                                  self.token, 'otherpassword')
        self.assertFalse(outcome.ok)
        self.assertIs(outcome.failure, domain.ResetFailure.INVALID_TOKEN)

    def test_expired(self):
        later = util.utcnow() + timedelta(hours=2, minutes=1)
        with mock.patch(f'{passwords.__name__}.util.utcnow',
                        return_value=later):
            outcome = self.core.resets.reset_password(
                'foo@example.com', self.token, 'newpassword'
            )
        self.assertIs(outcome.failure, domain.ResetFailure.EXPIRED)
        self.assertIs(
            self.core.sessions.authenticate('foo@example.com', 'newpassword'),
            domain.AuthFailure.BAD_PASSWORD
        )

    def test_blank_password(self):
        """A blank new password is required, and the token stays open."""
        outcome = self.core.resets.reset_password('foo@example.com',
                                                  self.token, '')
        self.assertEqual(outcome.errors,
                         [domain.ValidationError('password', 'required')])
        self.assertIsInstance(
            self.core.resets.check('foo@example.com', self.token),
            domain.Account
        )

    def test_revokes_remember_token(self):
        """Resetting the password logs out remembered sessions."""
        _, remember_token = self.core.sessions.remember(self.account)
        self.core.resets.reset_password('foo@example.com', self.token,
                                        'newpassword')
        self.assertIsNone(self.core.sessions.resume(self.account.account_id,
                                                    remember_token))


class TestResetOutcome(TestCase):
    """Outcomes do not share state."""

    def test_default_errors(self):
        """Outcomes built without errors are independent and immutable."""
        first = passwords.ResetOutcome()
        second = passwords.ResetOutcome(failure=domain.ResetFailure.EXPIRED)
        self.assertEqual(tuple(first.errors), ())
        with self.assertRaises(AttributeError):
            first.errors.append(domain.ValidationError('password',   # type: ignore
                                                       'required'))
        self.assertTrue(first.ok)
        self.assertFalse(second.ok)
        self.assertEqual(tuple(second.errors), ())
