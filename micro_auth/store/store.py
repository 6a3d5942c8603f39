"""
SQLAlchemy-backed store for accounts, relationships and microposts.

This is the persistence collaborator the workflows depend on. It offers
create/read/update by primary key and by unique e-mail, edge insertion and
removal for the follow graph, and the feed query. Deleting an account
cascades explicitly, in one transaction, to its relationships and posts.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .. import domain
from ..exceptions import EmailTaken, NoSuchAccount, StoreError
from . import util
from .models import DBMicropost, DBRelationship, DBUser

logger = logging.getLogger(__name__)

UPDATABLE = frozenset([
    'name', 'email', 'password_digest', 'remember_digest',
    'activation_digest', 'activated', 'activated_at', 'reset_digest',
    'reset_sent_at'
])
"""Account fields that may be changed with :meth:`AccountStore.update`."""


def _to_columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(fields) - UPDATABLE
    if unknown:
        raise ValueError(f'Cannot update fields: {", ".join(sorted(unknown))}')
    return {
        key: util.epoch(value) if isinstance(value, datetime) else value
        for key, value in fields.items()
    }


class AccountStore(object):
    """Persistence for :class:`.domain.Account` and its dependents."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def transaction(self) -> Any:
        return util.transaction(self._session_factory)

    # Accounts.

    def find_by_id(self, account_id: int) -> Optional[domain.Account]:
        """Load an account by primary key, or ``None``."""
        with self.transaction() as session:
            db_user: Optional[DBUser] = session.get(DBUser, account_id)
            if db_user is None:
                logger.debug('No account with id %s', account_id)
                return None
            return db_user.to_domain()

    def find_by_email(self, email: str) -> Optional[domain.Account]:
        """Load an account by e-mail address (case-insensitive), or ``None``."""
        with self.transaction() as session:
            db_user: Optional[DBUser] = session.query(DBUser) \
                .filter(DBUser.email == email.lower()) \
                .first()
            if db_user is None:
                logger.debug('No account for e-mail address')
                return None
            return db_user.to_domain()

    def email_exists(self, email: str,
                     exclude_id: Optional[int] = None) -> bool:
        """Determine whether another account already uses ``email``."""
        with self.transaction() as session:
            query = session.query(DBUser.id) \
                .filter(DBUser.email == email.lower())
            if exclude_id is not None:
                query = query.filter(DBUser.id != exclude_id)
            return query.first() is not None

    def create(self, account: domain.Account) -> domain.Account:
        """
        Persist a new account.

        Parameters
        ----------
        account : :class:`.domain.Account`
            Must not have an ``account_id`` yet.

        Returns
        -------
        :class:`.domain.Account`
            The stored account, with its identifier and timestamps.

        Raises
        ------
        :class:`.EmailTaken`
            Raised if the e-mail address violates the unique constraint.

        """
        if account.account_id is not None:
            raise ValueError('Account is already persisted')
        created = util.now()
        try:
            with self.transaction() as session:
                db_user = DBUser(
                    name=account.name,
                    email=account.email.lower(),
                    password_digest=account.password_digest,
                    remember_digest=account.remember_digest,
                    activation_digest=account.activation_digest,
                    activated=account.activated,
                    activated_at=(util.epoch(account.activated_at)
                                  if account.activated_at else None),
                    created_at=created,
                    updated_at=created
                )
                session.add(db_user)
                session.flush()
                stored = db_user.to_domain()
        except IntegrityError as e:
            raise EmailTaken('E-mail address is already registered') from e
        except SQLAlchemyError as e:
            raise StoreError('Could not create account') from e
        logger.debug('Created account %s', stored.account_id)
        return stored

    def update(self, account_id: int, **fields: Any) -> domain.Account:
        """
        Update selected fields of an account.

        Raises
        ------
        :class:`.NoSuchAccount`
        :class:`.EmailTaken`

        """
        columns = _to_columns(fields)
        if 'email' in columns:
            columns['email'] = columns['email'].lower()
        try:
            with self.transaction() as session:
                db_user: Optional[DBUser] = session.get(DBUser, account_id)
                if db_user is None:
                    raise NoSuchAccount(f'No account with id {account_id}')
                for key, value in columns.items():
                    setattr(db_user, key, value)
                db_user.updated_at = util.now()
                session.flush()
                stored = db_user.to_domain()
        except IntegrityError as e:
            raise EmailTaken('E-mail address is already registered') from e
        except SQLAlchemyError as e:
            raise StoreError(f'Could not update account {account_id}') from e
        return stored

    def delete(self, account_id: int) -> None:
        """Delete an account together with its relationships and posts."""
        try:
            with self.transaction() as session:
                session.query(DBRelationship) \
                    .filter(or_(DBRelationship.follower_id == account_id,
                                DBRelationship.followed_id == account_id)) \
                    .delete(synchronize_session=False)
                session.query(DBMicropost) \
                    .filter(DBMicropost.user_id == account_id) \
                    .delete(synchronize_session=False)
                deleted = session.query(DBUser) \
                    .filter(DBUser.id == account_id) \
                    .delete(synchronize_session=False)
        except SQLAlchemyError as e:
            raise StoreError(f'Could not delete account {account_id}') from e
        if not deleted:
            raise NoSuchAccount(f'No account with id {account_id}')
        logger.debug('Deleted account %s', account_id)

    def newest(self, limit: Optional[int] = None) -> List[domain.Account]:
        """Accounts, most recently created first."""
        with self.transaction() as session:
            query = session.query(DBUser) \
                .order_by(DBUser.created_at.desc(), DBUser.id.desc())
            if limit is not None:
                query = query.limit(limit)
            return [db_user.to_domain() for db_user in query]

    # Relationships.

    def insert_edge(self, follower_id: int,
                    followed_id: int) -> domain.Relationship:
        """Add a follower -> followed edge."""
        with self.transaction() as session:
            db_rel = DBRelationship(follower_id=follower_id,
                                    followed_id=followed_id,
                                    created_at=util.now())
            session.add(db_rel)
            session.flush()
            return db_rel.to_domain()

    def delete_edge(self, follower_id: int, followed_id: int) -> int:
        """Remove a follower -> followed edge. Returns the number removed."""
        with self.transaction() as session:
            removed: int = session.query(DBRelationship) \
                .filter(DBRelationship.follower_id == follower_id) \
                .filter(DBRelationship.followed_id == followed_id) \
                .delete(synchronize_session=False)
        return removed

    def edge_exists(self, follower_id: int, followed_id: int) -> bool:
        with self.transaction() as session:
            return session.query(DBRelationship.id) \
                .filter(DBRelationship.follower_id == follower_id) \
                .filter(DBRelationship.followed_id == followed_id) \
                .first() is not None

    def following_ids(self, account_id: int) -> List[int]:
        """Identifiers of the accounts that ``account_id`` follows."""
        with self.transaction() as session:
            rows = session.query(DBRelationship.followed_id) \
                .filter(DBRelationship.follower_id == account_id) \
                .order_by(DBRelationship.id) \
                .all()
        return list(dict.fromkeys(row[0] for row in rows))

    def follower_ids(self, account_id: int) -> List[int]:
        """Identifiers of the accounts that follow ``account_id``."""
        with self.transaction() as session:
            rows = session.query(DBRelationship.follower_id) \
                .filter(DBRelationship.followed_id == account_id) \
                .order_by(DBRelationship.id) \
                .all()
        return list(dict.fromkeys(row[0] for row in rows))

    def following(self, account_id: int) -> List[domain.Account]:
        return self._accounts(self.following_ids(account_id))

    def followers(self, account_id: int) -> List[domain.Account]:
        return self._accounts(self.follower_ids(account_id))

    def _accounts(self, account_ids: List[int]) -> List[domain.Account]:
        if not account_ids:
            return []
        with self.transaction() as session:
            by_id = {
                db_user.id: db_user.to_domain() for db_user
                in session.query(DBUser).filter(DBUser.id.in_(account_ids))
            }
        return [by_id[i] for i in account_ids if i in by_id]

    # Microposts.

    def add_micropost(self, user_id: int, content: str,
                      created_at: Optional[datetime] = None) \
            -> domain.Micropost:
        """Store a post owned by ``user_id``."""
        with self.transaction() as session:
            if session.get(DBUser, user_id) is None:
                raise NoSuchAccount(f'No account with id {user_id}')
            db_post = DBMicropost(
                user_id=user_id,
                content=content,
                created_at=(util.epoch(created_at) if created_at is not None
                            else util.now())
            )
            session.add(db_post)
            session.flush()
            return db_post.to_domain()

    def microposts_for(self, user_id: int) -> List[domain.Micropost]:
        """Posts owned by ``user_id``, newest first."""
        return self.query_feed(user_id, [])

    def query_feed(self, owner_id: int, followed_ids: Iterable[int],
                   offset: int = 0, limit: Optional[int] = None) \
            -> List[domain.Micropost]:
        """
        Posts owned by ``owner_id`` or any of ``followed_ids``, newest first.

        Posts with the same timestamp are ordered by descending id, so that
        repeated queries over the same data return the same order.
        """
        sources = [owner_id] + [i for i in followed_ids if i != owner_id]
        with self.transaction() as session:
            query = session.query(DBMicropost) \
                .filter(DBMicropost.user_id.in_(sources)) \
                .order_by(DBMicropost.created_at.desc(),
                          DBMicropost.id.desc())
            if offset:
                query = query.offset(offset)
            if limit is not None:
                query = query.limit(limit)
            return [db_post.to_domain() for db_post in query]

    def count_feed(self, owner_id: int, followed_ids: Iterable[int]) -> int:
        sources = [owner_id] + [i for i in followed_ids if i != owner_id]
        with self.transaction() as session:
            count: int = session.query(DBMicropost) \
                .filter(DBMicropost.user_id.in_(sources)) \
                .count()
        return count
