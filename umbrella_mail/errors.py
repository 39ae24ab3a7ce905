"""Exceptions raised while configuring and building an email."""

from __future__ import annotations


class EmailError(Exception):
    """Base class for recoverable email configuration errors."""


class InvalidAddressError(EmailError):
    """A single address is missing or syntactically invalid."""


class InvalidAddressListError(EmailError):
    """An address list argument is ``None`` or empty."""

    def __init__(self, message: str = "Address List provided was invalid") -> None:
        super().__init__(message)


class NoHostNameError(EmailError):
    """No SMTP host is available to derive a mail session from."""

    def __init__(self, message: str = "Cannot find valid hostname for mail session") -> None:
        super().__init__(message)


class EmailBuildError(EmailError):
    """The message could not be assembled from the current configuration."""


class MissingFromAddressError(EmailBuildError):
    def __init__(self, message: str = "From address required") -> None:
        super().__init__(message)


class MissingRecipientsError(EmailBuildError):
    def __init__(self, message: str = "At least one receiver address required") -> None:
        super().__init__(message)


class InvalidArgumentError(ValueError):
    """Caller passed an argument that violates a method precondition."""


class IllegalStateError(RuntimeError):
    """Operation is not allowed in the builder's current state."""
