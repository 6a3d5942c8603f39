"""
Accounts, credentials and the follow graph for a micro-blogging service.

This package provides the parts of a social application whose mistakes are
security or correctness bugs rather than cosmetic ones: password digests,
remember-me tokens, account activation, time-bounded password resets, and
the directed follow graph that drives each account's feed. Web routing,
templates and mail delivery belong to the application that uses it.

Quick start
-----------

.. code-block:: python

   from micro_auth import AuthFailure, config, factory

   core = factory.create_core(config.Settings.from_environ(),
                              mailer=MyMailer(), create_tables=True)
   account, errors = core.accounts.register('Ada', 'Ada@Example.com',
                                            'correct horse')
   result = core.sessions.authenticate('ada@example.com', 'correct horse')
   if isinstance(result, AuthFailure):
       ...    # Same message for NOT_FOUND and BAD_PASSWORD.

Every component takes its collaborators and a :class:`.config.Settings` at
construction; nothing is read from global state at call time.
"""

from .domain import Account, Relationship, Micropost, ValidationError, \
    AuthFailure, ActivationFailure, ResetFailure, RememberMe
from .config import Settings
