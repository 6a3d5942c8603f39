"""The follow graph, microposts and the feed derived from them."""

import logging
from typing import Iterator, List, Optional, Tuple

from . import domain, validation
from .config import Settings
from .store import AccountStore

logger = logging.getLogger(__name__)


def _id(account: domain.Account) -> int:
    if account.account_id is None:
        raise ValueError('Account must be persisted')
    return account.account_id


class Feed(object):
    """
    Microposts by an account and everyone it follows, newest first.

    Nothing is loaded until the feed is iterated, and each iteration queries
    the store afresh; there is no cursor state between iterations.
    """

    def __init__(self, store: AccountStore, owner_id: int) -> None:
        self._store = store
        self._owner_id = owner_id

    def source_ids(self) -> List[int]:
        """Accounts whose posts make up this feed: the owner, then followees."""
        return [self._owner_id] + [
            i for i in self._store.following_ids(self._owner_id)
            if i != self._owner_id
        ]

    def __iter__(self) -> Iterator[domain.Micropost]:
        followed = self._store.following_ids(self._owner_id)
        return iter(self._store.query_feed(self._owner_id, followed))

    def __len__(self) -> int:
        followed = self._store.following_ids(self._owner_id)
        return self._store.count_feed(self._owner_id, followed)

    def page(self, number: int = 1,
             per_page: int = 30) -> List[domain.Micropost]:
        """Get one page of the feed. Pages are numbered from 1."""
        if number < 1 or per_page < 1:
            raise ValueError('Page number and size must be positive')
        followed = self._store.following_ids(self._owner_id)
        return self._store.query_feed(self._owner_id, followed,
                                      offset=(number - 1) * per_page,
                                      limit=per_page)


class FollowGraph(object):
    """Directed follower -> followed relationships between accounts."""

    def __init__(self, store: AccountStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings

    def follow(self, account: domain.Account,
               other: domain.Account) -> domain.Relationship:
        """Add an edge ``account -> other``. Duplicates are not checked."""
        relationship = self._store.insert_edge(_id(account), _id(other))
        logger.debug('Account %s follows %s', account.account_id,
                     other.account_id)
        return relationship

    def unfollow(self, account: domain.Account, other: domain.Account) -> None:
        """Remove the edge ``account -> other``, if there is one."""
        if self._store.delete_edge(_id(account), _id(other)):
            logger.debug('Account %s unfollowed %s', account.account_id,
                         other.account_id)

    def is_following(self, account: domain.Account,
                     other: domain.Account) -> bool:
        return self._store.edge_exists(_id(account), _id(other))

    def following(self, account: domain.Account) -> List[domain.Account]:
        """Accounts that ``account`` follows."""
        return self._store.following(_id(account))

    def followers(self, account: domain.Account) -> List[domain.Account]:
        """Accounts that follow ``account``."""
        return self._store.followers(_id(account))

    def post(self, account: domain.Account, content: str) \
            -> Tuple[Optional[domain.Micropost], List[domain.ValidationError]]:
        """Publish a micropost owned by ``account``."""
        errors = validation.validate_micropost(content, self._settings)
        if errors:
            return None, errors
        return self._store.add_micropost(_id(account), content), []

    def microposts(self, account: domain.Account) -> List[domain.Micropost]:
        """The account's own posts, newest first."""
        return self._store.microposts_for(_id(account))

    def feed(self, account: domain.Account) -> Feed:
        return Feed(self._store, _id(account))
