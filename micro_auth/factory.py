"""Wire the components together from a single :class:`.Settings`."""

from typing import NamedTuple, Optional

from sqlalchemy.orm import sessionmaker

from .accounts import AccountManager
from .activation import ActivationWorkflow
from .config import Settings
from .digest import SecretDigest
from .follow import FollowGraph
from .mail import LoggingMailer, Mailer
from .passwords import PasswordReset
from .sessions import RememberManager
from .store import AccountStore, util


class Core(NamedTuple):
    """The components of the account core, sharing one store."""

    settings: Settings
    store: AccountStore
    digest: SecretDigest
    accounts: AccountManager
    sessions: RememberManager
    activation: ActivationWorkflow
    resets: PasswordReset
    graph: FollowGraph


def create_core(settings: Optional[Settings] = None,
                mailer: Optional[Mailer] = None,
                session_factory: Optional[sessionmaker] = None,
                create_tables: bool = False) -> Core:
    """
    Build every component.

    Parameters
    ----------
    settings : :class:`.Settings`
        Defaults to :meth:`.Settings.from_environ`.
    mailer : :class:`.Mailer`
        Defaults to :class:`.LoggingMailer`.
    session_factory : :class:`sqlalchemy.orm.sessionmaker`
        If not provided, one is created for ``settings.database_uri``.
    create_tables : bool
        Create the tables if they do not exist (only when this function
        creates the engine).

    """
    if settings is None:
        settings = Settings.from_environ()
    if mailer is None:
        mailer = LoggingMailer()
    if session_factory is None:
        engine, session_factory = util.init_db(settings.database_uri)
        if create_tables:
            util.create_all(engine)

    store = AccountStore(session_factory)
    digest = SecretDigest(settings.bcrypt_cost)
    activation = ActivationWorkflow(store, digest, mailer)
    return Core(
        settings=settings,
        store=store,
        digest=digest,
        accounts=AccountManager(store, digest, settings, activation),
        sessions=RememberManager(store, digest),
        activation=activation,
        resets=PasswordReset(store, digest, settings, mailer),
        graph=FollowGraph(store, settings)
    )
