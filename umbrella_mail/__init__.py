"""Umbrella Mail: build MIME messages and the SMTP session to send them."""

from .address import Address, parse_address_list
from .base import BuildState, Email
from .config import SessionConfig
from .errors import (
    EmailBuildError,
    EmailError,
    IllegalStateError,
    InvalidAddressError,
    InvalidAddressListError,
    InvalidArgumentError,
    MissingFromAddressError,
    MissingRecipientsError,
    NoHostNameError,
)
from .logging import setup_logging
from .message import MimeMessage
from .session import MailSession, resolve_session
from .simple import SimpleEmail

__all__ = [
    "Address",
    "BuildState",
    "Email",
    "EmailBuildError",
    "EmailError",
    "IllegalStateError",
    "InvalidAddressError",
    "InvalidAddressListError",
    "InvalidArgumentError",
    "MailSession",
    "MimeMessage",
    "MissingFromAddressError",
    "MissingRecipientsError",
    "NoHostNameError",
    "SessionConfig",
    "SimpleEmail",
    "parse_address_list",
    "resolve_session",
    "setup_logging",
]
