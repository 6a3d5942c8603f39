"""Defines account, relationship and micropost concepts."""

from typing import Any, NamedTuple, Optional, Union, get_type_hints, \
    get_args
from datetime import datetime
from enum import Enum
import dateutil.parser


class Account(NamedTuple):
    """Represents one registered identity."""

    name: str
    """Display name."""

    email: str
    """Primary e-mail address, always lower-case once persisted."""

    account_id: Optional[int] = None
    """Unique identifier. If ``None``, the account has not been persisted."""

    password_digest: str = ''
    """bcrypt digest of the password. The plaintext is never kept."""

    activated: bool = False
    """Whether the e-mail address has been confirmed."""

    activated_at: Optional[datetime] = None

    activation_digest: Optional[str] = None
    """Digest of the activation token mailed at registration."""

    remember_digest: Optional[str] = None
    """Digest of the current remember-token; ``None`` when not remembering."""

    reset_digest: Optional[str] = None
    """Digest of the open password reset token, if any."""

    reset_sent_at: Optional[datetime] = None
    """When the open password reset token was issued."""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def remembered(self) -> bool:
        """Whether a persistent login is currently issued for this account."""
        return self.remember_digest is not None

    @property
    def reset_requested(self) -> bool:
        """Whether a password reset is open for this account."""
        return self.reset_digest is not None and self.reset_sent_at is not None


class Relationship(NamedTuple):
    """A directed follower -> followed edge between two accounts."""

    follower_id: int
    followed_id: int
    relationship_id: Optional[int] = None
    created_at: Optional[datetime] = None


class Micropost(NamedTuple):
    """A short content item owned by one account."""

    user_id: int
    content: str
    micropost_id: Optional[int] = None
    created_at: Optional[datetime] = None


class ValidationError(NamedTuple):
    """A field-level constraint violation."""

    field: str
    reason: str

    BLANK = 'blank'  # type: ignore
    TOO_LONG = 'too_long'  # type: ignore
    TOO_SHORT = 'too_short'  # type: ignore
    INVALID = 'invalid'  # type: ignore
    TAKEN = 'taken'  # type: ignore
    REQUIRED = 'required'  # type: ignore
    MISMATCH = 'mismatch'  # type: ignore


class AuthFailure(Enum):
    """Reasons a login attempt failed.

    Callers must show the same message for both, so as not to reveal whether
    the e-mail address is registered.
    """

    NOT_FOUND = 'not_found'
    BAD_PASSWORD = 'bad_password'


class ActivationFailure(Enum):
    """Reasons an activation link was rejected."""

    NOT_FOUND = 'not_found'
    ALREADY_ACTIVATED = 'already_activated'
    INVALID_TOKEN = 'invalid_token'


class ResetFailure(Enum):
    """Reasons a password reset token was rejected."""

    NOT_FOUND = 'not_found'
    INVALID_TOKEN = 'invalid_token'
    EXPIRED = 'expired'


class RememberMe(Enum):
    """Parsed value of a login request's "remember me" field."""

    YES = 'yes'
    NO = 'no'
    UNSET = 'unset'


# Helpers and private functions.


def to_dict(obj: tuple) -> dict:
    """
    Generate a dict representation of a NamedTuple instance.

    Child NamedTuples are converted recursively, and datetimes are cast to
    ISO-8601 strings so that the result can be serialized as JSON.

    Parameters
    ----------
    obj : tuple
        A NamedTuple instance.

    Returns
    -------
    dict

    """
    if not hasattr(obj, '_asdict'):  # NamedTuple-generated classes have this.
        return {}
    data = obj._asdict()  # type: ignore

    def _cast(value: Any) -> Any:
        if hasattr(value, '_asdict'):
            value = to_dict(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, list):
            value = [_cast(o) for o in value]
        return value

    return {key: _cast(value) for key, value in data.items()}


def from_dict(cls: type, data: dict) -> Any:
    """
    Generate a NamedTuple instance from a dict.

    This is the inverse of :func:`to_dict`. Keys that are not fields of
    ``cls`` are ignored, and ISO-8601 strings are parsed for datetime fields.

    Parameters
    ----------
    cls: type
        Any NamedTuple class.
    data: dict

    Returns
    -------
    NamedTuple
        An instance of ``cls``.

    """
    _data = {}
    for field, field_type in get_type_hints(cls).items():
        if field not in data:
            continue
        value = data[field]
        if type(value) is str and _expects_datetime(field_type):
            value = dateutil.parser.parse(value)
        _data[field] = value
    return cls(**_data)


def _expects_datetime(field_type: Any) -> bool:
    """Determine whether a field is typed ``datetime`` or ``Optional[datetime]``."""
    if field_type is datetime:
        return True
    return getattr(field_type, '__origin__', None) is Union \
        and datetime in get_args(field_type)
