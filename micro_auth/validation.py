"""
Field-level rules for accounts and microposts.

Validators return a (possibly empty) list of
:class:`.domain.ValidationError`; nothing here raises for bad input.
"""

import re
from typing import Callable, List, Optional

from .config import Settings
from .digest import MAX_SECRET_BYTES
from .domain import ValidationError

EMAIL = re.compile(r'^[\w+\-.]+@[a-z\d\-.]+\.[a-z]+\Z',
                   re.IGNORECASE | re.ASCII)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_name(name: Optional[str], settings: Settings) \
        -> List[ValidationError]:
    if _is_blank(name):
        return [ValidationError('name', ValidationError.BLANK)]
    if len(name) > settings.name_max_length:  # type: ignore
        return [ValidationError('name', ValidationError.TOO_LONG)]
    return []


def validate_email(email: Optional[str], settings: Settings,
                   exists: Optional[Callable[[str], bool]] = None) \
        -> List[ValidationError]:
    """
    Check an e-mail address.

    Parameters
    ----------
    email : str
    settings : :class:`.Settings`
    exists : callable
        If provided, called with the lower-cased address; should return
        ``True`` if another account already uses it.

    Returns
    -------
    list
        At most one :class:`.ValidationError`.

    """
    if _is_blank(email):
        return [ValidationError('email', ValidationError.BLANK)]
    if len(email) > settings.email_max_length:  # type: ignore
        return [ValidationError('email', ValidationError.TOO_LONG)]
    if not EMAIL.match(email):  # type: ignore
        return [ValidationError('email', ValidationError.INVALID)]
    if exists is not None and exists(email.lower()):  # type: ignore
        return [ValidationError('email', ValidationError.TAKEN)]
    return []


def validate_password(password: Optional[str], settings: Settings,
                      change_password: bool = False,
                      confirmation: Optional[str] = None) \
        -> List[ValidationError]:
    """
    Check a new password.

    Password fields are only considered when the caller intends to set or
    change the password (``change_password``). Profile edits that leave
    credentials alone skip them entirely.
    """
    if not change_password:
        return []
    if _is_blank(password):
        return [ValidationError('password', ValidationError.REQUIRED)]
    errors = []
    if len(password) < settings.password_min_length:  # type: ignore
        errors.append(ValidationError('password', ValidationError.TOO_SHORT))
    elif len(password.encode('utf-8')) > MAX_SECRET_BYTES:  # type: ignore
        errors.append(ValidationError('password', ValidationError.TOO_LONG))
    if confirmation is not None and confirmation != password:
        errors.append(ValidationError('password_confirmation',
                                      ValidationError.MISMATCH))
    return errors


def validate_account(name: Optional[str], email: Optional[str],
                     settings: Settings, password: Optional[str] = None,
                     change_password: bool = False,
                     confirmation: Optional[str] = None,
                     exists: Optional[Callable[[str], bool]] = None) \
        -> List[ValidationError]:
    """Run every account rule and collect the failures."""
    return (validate_name(name, settings)
            + validate_email(email, settings, exists)
            + validate_password(password, settings, change_password,
                                confirmation))


def validate_micropost(content: Optional[str], settings: Settings) \
        -> List[ValidationError]:
    if _is_blank(content):
        return [ValidationError('content', ValidationError.BLANK)]
    if len(content) > settings.micropost_max_length:  # type: ignore
        return [ValidationError('content', ValidationError.TOO_LONG)]
    return []
