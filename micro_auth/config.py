"""Configuration for the account and relationship core."""

import os
from datetime import timedelta
from typing import Mapping, NamedTuple, Optional

NAME_MAX_LENGTH = 50
"""Maximum length of an account's display name."""

EMAIL_MAX_LENGTH = 255
"""Maximum length of an e-mail address."""

PASSWORD_MIN_LENGTH = 6
"""Minimum length of a new password."""

MICROPOST_MAX_LENGTH = 140

REMEMBER_ME = '1'
"""Value of the login form's "remember me" field that requests a cookie."""

RESET_WINDOW_SECONDS = 2 * 60 * 60
"""Password reset tokens are accepted for this long after being issued."""

BCRYPT_COST = 12
"""Work factor for new digests. Tests use the bcrypt minimum (4)."""

DATABASE_URI = 'sqlite:///:memory:'


class Settings(NamedTuple):
    """Explicit configuration handed to each component at construction."""

    name_max_length: int = NAME_MAX_LENGTH
    email_max_length: int = EMAIL_MAX_LENGTH
    password_min_length: int = PASSWORD_MIN_LENGTH
    micropost_max_length: int = MICROPOST_MAX_LENGTH
    remember_me: str = REMEMBER_ME
    reset_window: timedelta = timedelta(seconds=RESET_WINDOW_SECONDS)
    bcrypt_cost: int = BCRYPT_COST
    database_uri: str = DATABASE_URI

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) \
            -> 'Settings':
        """Build settings from environment variables, falling back to defaults."""
        if environ is None:
            environ = os.environ
        return cls(
            name_max_length=int(environ.get('NAME_MAX_LENGTH',
                                            NAME_MAX_LENGTH)),
            email_max_length=int(environ.get('EMAIL_MAX_LENGTH',
                                             EMAIL_MAX_LENGTH)),
            password_min_length=int(environ.get('PASSWORD_MIN_LENGTH',
                                                PASSWORD_MIN_LENGTH)),
            micropost_max_length=int(environ.get('MICROPOST_MAX_LENGTH',
                                                 MICROPOST_MAX_LENGTH)),
            remember_me=environ.get('REMEMBER_ME', REMEMBER_ME),
            reset_window=timedelta(seconds=int(
                environ.get('RESET_WINDOW_SECONDS', RESET_WINDOW_SECONDS)
            )),
            bcrypt_cost=int(environ.get('BCRYPT_COST', BCRYPT_COST)),
            database_uri=environ.get('DATABASE_URI', DATABASE_URI)
        )
