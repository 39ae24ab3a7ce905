"""Abstract message builder.

An :class:`Email` collects recipients, headers, body and connection
settings in any order, then assembles a :class:`MimeMessage` exactly
once via :meth:`Email.build_mime_message`.  Configuration problems that
depend on the whole picture (missing host, sender or recipients) are
only reported at build time.
"""

from __future__ import annotations

import abc
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from enum import Enum

import structlog
from pydantic import SecretStr

from .address import Address, parse_address_list
from .config import SessionConfig
from .errors import (
    EmailBuildError,
    IllegalStateError,
    InvalidArgumentError,
    MissingFromAddressError,
    MissingRecipientsError,
    NoHostNameError,
)
from .message import MimeMessage
from .session import MAIL_HOST, MailSession, resolve_session

logger = structlog.get_logger()

TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"


class BuildState(str, Enum):
    UNBUILT = "unbuilt"
    BUILT = "built"


class Email(abc.ABC):
    """Base builder shared by all email flavours.

    Subclasses decide what :meth:`set_msg` means for their body.
    """

    def __init__(self, config: SessionConfig | None = None) -> None:
        # private copy: the setters below write into it
        self._config = (config if config is not None else SessionConfig()).model_copy(deep=True)
        self._session: MailSession | None = None

        self._from: Address | None = None
        self._to: list[Address] = []
        self._cc: list[Address] = []
        self._bcc: list[Address] = []
        self._reply_to: list[Address] = []
        self._headers: dict[str, str] = {}

        self._subject: str | None = None
        self._charset: str | None = None
        self._text: str | None = None
        self._content: str | None = None
        self._content_type: str | None = None
        self._sent_date: datetime | None = None

        self._state = BuildState.UNBUILT
        self._message: MimeMessage | None = None

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def is_built(self) -> bool:
        return self._state is BuildState.BUILT

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def set_msg(self, msg: str) -> None:
        """Set the main body of the message."""

    def set_content(self, content: str, content_type: str) -> None:
        """Set a body part of the given MIME type.

        ``text/plain`` replaces the plain-text body; any other type is
        kept as alternate content and, together with a plain-text body,
        produces a ``multipart/alternative`` message.
        """
        if content_type.split(";", 1)[0].strip().lower() == TEXT_PLAIN:
            self._text = content
        else:
            self._content = content
            self._content_type = content_type

    def set_subject(self, subject: str | None) -> None:
        self._subject = subject

    def get_subject(self) -> str | None:
        return self._subject

    def set_charset(self, charset: str) -> None:
        self._charset = charset

    def get_charset(self) -> str | None:
        return self._charset

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    def set_from(self, email: str, name: str | None = None) -> None:
        self._from = Address.parse(email, name)

    def get_from_address(self) -> Address | None:
        return self._from

    def add_to(self, email: str, name: str | None = None) -> None:
        self._to.append(Address.parse(email, name))

    def add_cc(self, email: str, name: str | None = None) -> None:
        self._cc.append(Address.parse(email, name))

    def add_bcc(self, emails: str | Iterable[str]) -> None:
        """Append one or more Bcc addresses; all are validated first."""
        self._bcc.extend(parse_address_list(emails))

    def add_reply_to(self, email: str, name: str | None = None) -> None:
        self._reply_to.append(Address.parse(email, name))

    def set_to(self, emails: str | Iterable[str]) -> None:
        self._to = parse_address_list(emails)

    def set_cc(self, emails: str | Iterable[str]) -> None:
        self._cc = parse_address_list(emails)

    def set_bcc(self, emails: str | Iterable[str]) -> None:
        self._bcc = parse_address_list(emails)

    def set_reply_to(self, emails: str | Iterable[str]) -> None:
        self._reply_to = parse_address_list(emails)

    def get_to_addresses(self) -> list[Address]:
        return list(self._to)

    def get_cc_addresses(self) -> list[Address]:
        return list(self._cc)

    def get_bcc_addresses(self) -> list[Address]:
        return list(self._bcc)

    def get_reply_to_addresses(self) -> list[Address]:
        return list(self._reply_to)

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def add_header(self, name: str, value: str) -> None:
        _check_header(name, value)
        self._headers[name] = value

    def set_headers(self, headers: Mapping[str, str]) -> None:
        for name, value in headers.items():
            _check_header(name, value)
        self._headers = dict(headers)

    def get_headers(self) -> dict[str, str]:
        return dict(self._headers)

    # ------------------------------------------------------------------
    # Sent date
    # ------------------------------------------------------------------

    def set_sent_date(self, date: datetime | None) -> None:
        """Pin the ``Date`` header; ``None`` goes back to "now at build time"."""
        self._sent_date = date

    def get_sent_date(self) -> datetime:
        if self._sent_date is None:
            return datetime.now(UTC)
        return self._sent_date

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def set_host_name(self, host_name: str) -> None:
        self._config.host_name = host_name
        if self._session is not None:
            self._session.set_property(MAIL_HOST, host_name)

    def get_host_name(self) -> str | None:
        if self._session is not None:
            return self._session.get_property(MAIL_HOST)
        return self._config.host_name or None

    def set_smtp_port(self, port: int) -> None:
        if port < 1:
            raise InvalidArgumentError(
                f"Cannot connect to a port number that is less than 1 ( {port} )"
            )
        self._config.smtp_port = port

    def get_smtp_port(self) -> int:
        return self._config.smtp_port

    def set_ssl_smtp_port(self, port: int) -> None:
        if port < 1:
            raise InvalidArgumentError(
                f"Cannot connect to a port number that is less than 1 ( {port} )"
            )
        self._config.ssl_smtp_port = port

    def set_ssl_on_connect(self, ssl: bool) -> None:
        self._config.ssl_on_connect = ssl

    def is_ssl_on_connect(self) -> bool:
        return self._config.ssl_on_connect

    def set_start_tls_enabled(self, enabled: bool) -> None:
        self._config.start_tls_enabled = enabled

    def set_start_tls_required(self, required: bool) -> None:
        self._config.start_tls_required = required

    def set_ssl_check_server_identity(self, check: bool) -> None:
        self._config.ssl_check_server_identity = check

    def set_authentication(self, username: str, password: str) -> None:
        self._config.username = username
        self._config.password = SecretStr(password)

    def set_socket_timeout(self, timeout_ms: int) -> None:
        self._config.socket_timeout_ms = timeout_ms

    def get_socket_timeout(self) -> int:
        return self._config.socket_timeout_ms

    def set_socket_connection_timeout(self, timeout_ms: int) -> None:
        self._config.socket_connection_timeout_ms = timeout_ms

    def get_socket_connection_timeout(self) -> int:
        return self._config.socket_connection_timeout_ms

    def set_bounce_address(self, email: str | None) -> None:
        if email is not None:
            email = Address.parse(email).address
        self._config.bounce_address = email

    def set_debug(self, debug: bool) -> None:
        self._config.debug = debug

    def set_mail_session(self, session: MailSession) -> None:
        if session is None:
            raise InvalidArgumentError("no mail session supplied")
        self._session = session

    def get_mail_session(self) -> MailSession:
        """Return the injected session, or derive a fresh one from config."""
        return resolve_session(self._config, self._session)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build_mime_message(self) -> None:
        """Assemble the message.  May only succeed once per instance."""
        if self._state is BuildState.BUILT:
            raise IllegalStateError("The MimeMessage is already built.")

        try:
            session = self.get_mail_session()
        except NoHostNameError as exc:
            raise EmailBuildError(str(exc)) from exc

        if self._from is None:
            raise MissingFromAddressError()
        if not (self._to or self._cc or self._bcc):
            raise MissingRecipientsError()

        message = MimeMessage(
            from_address=self._from,
            to_addresses=tuple(self._to),
            cc_addresses=tuple(self._cc),
            bcc_addresses=tuple(self._bcc),
            reply_to=tuple(self._reply_to),
            headers=tuple(self._headers.items()),
            subject=self._subject,
            charset=self._charset,
            text=self._text,
            content=self._content,
            content_type=self._content_type,
            sent_date=self.get_sent_date(),
            host_name=session.host,
        )

        self._message = message
        self._state = BuildState.BUILT
        logger.debug(
            "mime_message_built",
            host=message.host_name,
            to=len(message.to_addresses),
            cc=len(message.cc_addresses),
            bcc=len(message.bcc_addresses),
            multipart=message.is_multipart,
        )

    def get_mime_message(self) -> MimeMessage | None:
        return self._message


def _check_header(name: str | None, value: str | None) -> None:
    if not name:
        raise InvalidArgumentError("name can not be null or empty")
    if not value:
        raise InvalidArgumentError("value can not be null or empty")
