"""
Persistence for accounts, the follow graph and microposts.

The workflows in :mod:`micro_auth` treat the store as an external
collaborator; :class:`.AccountStore` is the SQLAlchemy implementation of
that collaborator used by :func:`micro_auth.factory.create_core`.
"""

from . import models, util
from .store import AccountStore
from .util import init_db, create_all, drop_all, transaction, is_available
