"""Tests for :mod:`micro_auth.follow`."""

from datetime import datetime, timedelta
from unittest import TestCase

from pytz import UTC

from .. import domain
from .util import CoreMixin


class TestFollowGraph(CoreMixin, TestCase):
    """Following, unfollowing and the feed."""

    def setUp(self):
        super(TestFollowGraph, self).setUp()
        self.alice = self.register('Alice', 'alice@example.com')
        self.bob = self.register('Bob', 'bob@example.com')
        self.carol = self.register('Carol', 'carol@example.com')
        self.graph = self.core.graph

    def test_follow_and_unfollow(self):
        """Following is directed, and unfollowing reverses it."""
        self.assertFalse(self.graph.is_following(self.alice, self.bob))
        relationship = self.graph.follow(self.alice, self.bob)
        self.assertEqual(relationship.follower_id, self.alice.account_id)
        self.assertEqual(relationship.followed_id, self.bob.account_id)
        self.assertTrue(self.graph.is_following(self.alice, self.bob))
        self.assertFalse(self.graph.is_following(self.bob, self.alice))
        self.assertEqual(self.graph.following(self.alice), [self.bob])
        self.assertEqual(self.graph.followers(self.bob), [self.alice])
        self.assertIn(self.bob.account_id,
                      self.graph.feed(self.alice).source_ids())

        self.graph.unfollow(self.alice, self.bob)
        self.assertFalse(self.graph.is_following(self.alice, self.bob))
        self.assertEqual(self.graph.following(self.alice), [])
        self.assertNotIn(self.bob.account_id,
                         self.graph.feed(self.alice).source_ids())

    def test_unfollow_absent(self):
        """Unfollowing someone not followed is not an error."""
        self.graph.unfollow(self.alice, self.carol)
        self.assertFalse(self.graph.is_following(self.alice, self.carol))

    def test_unpersisted_account(self):
        stranger = domain.Account(name='Nobody', email='nobody@example.com')
        with self.assertRaises(ValueError):
            self.graph.follow(self.alice, stranger)

    def test_post(self):
        post, errors = self.graph.post(self.alice, 'Hello, world')
        self.assertEqual(errors, [])
        self.assertEqual(post.user_id, self.alice.account_id)
        self.assertEqual(self.graph.microposts(self.alice), [post])

    def test_post_invalid(self):
        post, errors = self.graph.post(self.alice, 'x' * 141)
        self.assertIsNone(post)
        self.assertEqual(errors, [domain.ValidationError('content',
                                                         'too_long')])
        self.assertEqual(self.graph.microposts(self.alice), [])

    def test_feed(self):
        """The feed has own and followed posts, newest first, and no others."""
        start = datetime(2023, 5, 1, tzinfo=UTC)
        store = self.core.store
        posts = [
            store.add_micropost(self.alice.account_id, 'alice 1', start),
            store.add_micropost(self.bob.account_id, 'bob 1',
                                start + timedelta(minutes=1)),
            store.add_micropost(self.carol.account_id, 'carol 1',
                                start + timedelta(minutes=2)),
            store.add_micropost(self.alice.account_id, 'alice 2',
                                start + timedelta(minutes=3)),
        ]
        self.graph.follow(self.alice, self.bob)

        feed = self.graph.feed(self.alice)
        self.assertEqual(list(feed), [posts[3], posts[1], posts[0]])
        self.assertEqual(len(feed), 3)
        self.assertEqual(list(feed), list(feed), 'Feed is restartable')
        self.assertEqual(feed.page(1, per_page=2), [posts[3], posts[1]])
        self.assertEqual(feed.page(2, per_page=2), [posts[0]])
        with self.assertRaises(ValueError):
            feed.page(0)

        # The feed reflects the current graph each time it is iterated.
        self.graph.follow(self.alice, self.carol)
        self.assertEqual(list(feed),
                         [posts[3], posts[2], posts[1], posts[0]])

    def test_feed_of_loner(self):
        """Someone who follows nobody sees only their own posts."""
        post, _ = self.graph.post(self.carol, 'just me')
        self.graph.post(self.bob, 'not me')
        self.assertEqual(list(self.graph.feed(self.carol)), [post])

    def test_self_follow_does_not_duplicate(self):
        """Following oneself does not list one's own posts twice."""
        post, _ = self.graph.post(self.alice, 'echo')
        self.graph.follow(self.alice, self.alice)
        self.assertEqual(list(self.graph.feed(self.alice)), [post])
