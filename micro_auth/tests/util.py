"""Testing helpers."""

from unittest import mock

from ..config import Settings
from ..digest import MIN_COST
from ..mail import Mailer
from .. import factory
from ..store.tests.util import temporary_db

SETTINGS = Settings(bcrypt_cost=MIN_COST)


class CoreMixin(object):
    """Mixin providing a fully wired core on an in-memory database."""

    password = 'thepassword'

    def setUp(self):
        self._db = temporary_db()
        session_factory = self._db.__enter__()
        self.mailer = mock.create_autospec(Mailer, instance=True)
        self.core = factory.create_core(SETTINGS, mailer=self.mailer,
                                        session_factory=session_factory)

    def tearDown(self):
        self._db.__exit__(None, None, None)

    def register(self, name='Foo User', email='foo@example.com',
                 password=None):
        """Register an account, failing the test if that does not work."""
        account, errors = self.core.accounts.register(
            name, email, password or self.password
        )
        self.assertEqual(errors, [])
        return account

    def activation_token(self):
        """The token passed to the most recent activation e-mail."""
        _, token = self.mailer.send_activation_email.call_args[0]
        return token

    def reset_token(self):
        """The token passed to the most recent password reset e-mail."""
        _, token = self.mailer.send_password_reset_email.call_args[0]
        return token
