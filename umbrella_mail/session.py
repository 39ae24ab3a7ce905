"""Mail session: the property bag describing how to reach an SMTP server.

Property keys mirror the names used by SMTP transports so a session can
be handed to whatever performs delivery.  Nothing here opens a socket.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from .config import SessionConfig
from .errors import NoHostNameError

logger = structlog.get_logger()

MAIL_DEBUG = "mail.debug"
MAIL_TRANSPORT_PROTOCOL = "mail.transport.protocol"
MAIL_HOST = "mail.smtp.host"
MAIL_PORT = "mail.smtp.port"
MAIL_SMTP_FROM = "mail.smtp.from"
MAIL_SMTP_AUTH = "mail.smtp.auth"
MAIL_SMTP_USER = "mail.smtp.user"
MAIL_TRANSPORT_STARTTLS_ENABLE = "mail.smtp.starttls.enable"
MAIL_TRANSPORT_STARTTLS_REQUIRED = "mail.smtp.starttls.required"
MAIL_SMTP_SOCKET_FACTORY_PORT = "mail.smtp.socketFactory.port"
MAIL_SMTP_SOCKET_FACTORY_CLASS = "mail.smtp.socketFactory.class"
MAIL_SMTP_SOCKET_FACTORY_FALLBACK = "mail.smtp.socketFactory.fallback"
MAIL_SMTP_SSL_CHECKSERVERIDENTITY = "mail.smtp.ssl.checkserveridentity"
MAIL_SMTP_CONNECTIONTIMEOUT = "mail.smtp.connectiontimeout"
MAIL_SMTP_TIMEOUT = "mail.smtp.timeout"

SMTP = "smtp"
SSL_SOCKET_FACTORY = "smtplib.SMTP_SSL"


@dataclass
class Credentials:
    username: str
    password: str


@dataclass
class MailSession:
    """Transport configuration as string properties plus optional login."""

    properties: dict[str, str] = field(default_factory=dict)
    credentials: Credentials | None = None

    def get_property(self, key: str, default: str | None = None) -> str | None:
        return self.properties.get(key, default)

    def set_property(self, key: str, value: str) -> None:
        self.properties[key] = value

    @property
    def host(self) -> str | None:
        return self.properties.get(MAIL_HOST)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def resolve_session(config: SessionConfig, injected: MailSession | None = None) -> MailSession:
    """Return *injected* if given, else derive a new session from *config*.

    Derived sessions are never cached: every call builds a fresh object.
    Raises :class:`NoHostNameError` when *config* has no host name.
    """
    if injected is not None:
        return injected

    if not config.host_name:
        raise NoHostNameError()

    props: dict[str, str] = {
        MAIL_TRANSPORT_PROTOCOL: SMTP,
        MAIL_HOST: config.host_name,
        MAIL_PORT: str(config.smtp_port),
        MAIL_DEBUG: _flag(config.debug),
        MAIL_TRANSPORT_STARTTLS_ENABLE: _flag(config.start_tls_enabled),
        MAIL_TRANSPORT_STARTTLS_REQUIRED: _flag(config.start_tls_required),
        MAIL_SMTP_TIMEOUT: str(config.socket_timeout_ms),
        MAIL_SMTP_CONNECTIONTIMEOUT: str(config.socket_connection_timeout_ms),
    }

    credentials = None
    if config.has_authentication:
        assert config.username is not None and config.password is not None
        props[MAIL_SMTP_AUTH] = "true"
        props[MAIL_SMTP_USER] = config.username
        credentials = Credentials(config.username, config.password.get_secret_value())

    if config.ssl_on_connect:
        props[MAIL_PORT] = str(config.ssl_smtp_port)
        props[MAIL_SMTP_SOCKET_FACTORY_PORT] = str(config.ssl_smtp_port)
        props[MAIL_SMTP_SOCKET_FACTORY_CLASS] = SSL_SOCKET_FACTORY
        props[MAIL_SMTP_SOCKET_FACTORY_FALLBACK] = "false"

    if (config.ssl_on_connect or config.start_tls_enabled) and config.ssl_check_server_identity:
        props[MAIL_SMTP_SSL_CHECKSERVERIDENTITY] = "true"

    if config.bounce_address:
        props[MAIL_SMTP_FROM] = config.bounce_address

    logger.debug(
        "mail_session_derived",
        host=config.host_name,
        port=props[MAIL_PORT],
        ssl_on_connect=config.ssl_on_connect,
        auth=credentials is not None,
    )
    return MailSession(properties=props, credentials=credentials)
