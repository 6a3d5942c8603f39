"""Database models for accounts, relationships and microposts."""

from typing import Optional
from datetime import datetime

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, \
    String, Text, text
from sqlalchemy.orm import declarative_base

from .. import domain
from . import util

Base = declarative_base()


def _from_epoch(value: Optional[int]) -> Optional[datetime]:
    return util.from_epoch(value) if value is not None else None


class DBUser(Base):  # type: ignore
    """
    Registered accounts.

    +-------------------+--------------+------+-----+---------+
    | Field             | Type         | Null | Key | Default |
    +-------------------+--------------+------+-----+---------+
    | id                | int          | NO   | PRI | NULL    |
    | name              | varchar(255) | NO   |     |         |
    | email             | varchar(255) | NO   | UNI |         |
    | password_digest   | varchar(60)  | NO   |     |         |
    | remember_digest   | varchar(60)  | YES  |     | NULL    |
    | activation_digest | varchar(60)  | YES  |     | NULL    |
    | activated         | tinyint(1)   | NO   |     | 0       |
    | activated_at      | int          | YES  |     | NULL    |
    | reset_digest      | varchar(60)  | YES  |     | NULL    |
    | reset_sent_at     | int          | YES  |     | NULL    |
    | created_at        | int          | NO   | MUL | 0       |
    | updated_at        | int          | NO   |     | 0       |
    +-------------------+--------------+------+-----+---------+

    Timestamps are UNIX epoch seconds (UTC).
    """

    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, server_default=text("''"))
    email = Column(String(255), nullable=False, unique=True,
                   server_default=text("''"))
    password_digest = Column(String(60), nullable=False,
                             server_default=text("''"))
    remember_digest = Column(String(60), nullable=True)
    activation_digest = Column(String(60), nullable=True)
    activated = Column(Boolean, nullable=False, server_default=text("0"))
    activated_at = Column(Integer, nullable=True)
    reset_digest = Column(String(60), nullable=True)
    reset_sent_at = Column(Integer, nullable=True)
    created_at = Column(Integer, nullable=False, index=True,
                        server_default=text("'0'"))
    updated_at = Column(Integer, nullable=False, server_default=text("'0'"))

    def to_domain(self) -> domain.Account:
        return domain.Account(
            account_id=self.id,
            name=self.name,
            email=self.email,
            password_digest=self.password_digest,
            activated=bool(self.activated),
            activated_at=_from_epoch(self.activated_at),
            activation_digest=self.activation_digest,
            remember_digest=self.remember_digest,
            reset_digest=self.reset_digest,
            reset_sent_at=_from_epoch(self.reset_sent_at),
            created_at=_from_epoch(self.created_at),
            updated_at=_from_epoch(self.updated_at)
        )


class DBRelationship(Base):  # type: ignore
    """
    Directed follower -> followed edges.

    The (follower_id, followed_id) pair is indexed but not unique; callers
    are expected not to follow the same account twice.
    """

    __tablename__ = 'relationships'
    __table_args__ = (
        Index('ix_relationships_pair', 'follower_id', 'followed_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    follower_id = Column(ForeignKey('users.id'), nullable=False, index=True)
    followed_id = Column(ForeignKey('users.id'), nullable=False, index=True)
    created_at = Column(Integer, nullable=False, server_default=text("'0'"))

    def to_domain(self) -> domain.Relationship:
        return domain.Relationship(
            relationship_id=self.id,
            follower_id=self.follower_id,
            followed_id=self.followed_id,
            created_at=_from_epoch(self.created_at)
        )


class DBMicropost(Base):  # type: ignore
    """Short posts; the content items that make up feeds."""

    __tablename__ = 'microposts'
    __table_args__ = (
        Index('ix_microposts_user_created', 'user_id', 'created_at'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    user_id = Column(ForeignKey('users.id'), nullable=False)
    created_at = Column(Integer, nullable=False, index=True,
                        server_default=text("'0'"))

    def to_domain(self) -> domain.Micropost:
        return domain.Micropost(
            micropost_id=self.id,
            user_id=self.user_id,
            content=self.content,
            created_at=_from_epoch(self.created_at)
        )
