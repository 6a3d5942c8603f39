"""Tests for :mod:`micro_auth.domain`."""

import json
from datetime import datetime
from unittest import TestCase

from pytz import UTC

from .. import domain


class TestDictCoercion(TestCase):
    """Tests for :func:`domain.from_dict` and :func:`domain.to_dict`."""

    def test_account(self):
        """An account survives a trip through JSON."""
        account = domain.Account(
            account_id=5,
            name='Foo',
            email='foo@example.com',
            password_digest='$2b$04$foo',
            activated=True,
            activated_at=datetime(2020, 1, 2, 3, 4, 5, tzinfo=UTC),
            created_at=datetime(2020, 1, 1, tzinfo=UTC)
        )
        data = json.loads(json.dumps(domain.to_dict(account)))
        self.assertEqual(data['activated_at'], '2020-01-02T03:04:05+00:00')
        self.assertIsNone(data['reset_sent_at'])
        self.assertEqual(domain.from_dict(domain.Account, data), account)

    def test_ignores_unknown_keys(self):
        """Keys that are not fields are dropped."""
        post = domain.from_dict(domain.Micropost, {
            'user_id': 1, 'content': 'hi', 'likes': 12
        })
        self.assertEqual(post, domain.Micropost(user_id=1, content='hi'))

    def test_not_a_namedtuple(self):
        self.assertEqual(domain.to_dict(object()), {})


class TestAccount(TestCase):
    """Derived account state."""

    def test_remembered(self):
        account = domain.Account(name='Foo', email='foo@example.com')
        self.assertFalse(account.remembered)
        self.assertTrue(account._replace(remember_digest='x').remembered)

    def test_reset_requested(self):
        account = domain.Account(name='Foo', email='foo@example.com')
        self.assertFalse(account.reset_requested)
        self.assertTrue(account._replace(
            reset_digest='x', reset_sent_at=datetime.now(tz=UTC)
        ).reset_requested)
