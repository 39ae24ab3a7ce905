"""Mail session configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

SMTP_PORT = 25
SSL_SMTP_PORT = 465
SOCKET_TIMEOUT_MS = 60_000


class SessionConfig(BaseSettings):
    """Settings used to derive a mail session when none is injected.

    Every field can be overridden with a ``MAIL_``-prefixed env var,
    e.g. ``MAIL_HOST_NAME=smtp.example.com``.
    """

    model_config = {"env_prefix": "MAIL_"}

    host_name: str | None = Field(default=None, description="SMTP server hostname")
    smtp_port: int = Field(default=SMTP_PORT, description="Plain SMTP port")
    ssl_smtp_port: int = Field(
        default=SSL_SMTP_PORT,
        description="SMTP port used when SSL-on-connect is enabled",
    )
    ssl_on_connect: bool = Field(default=False, description="Wrap the connection in SSL")
    start_tls_enabled: bool = Field(default=False, description="Issue STARTTLS if offered")
    start_tls_required: bool = Field(default=False, description="Fail if STARTTLS is not offered")
    ssl_check_server_identity: bool = Field(
        default=False,
        description="Verify the server certificate hostname",
    )
    socket_timeout_ms: int = Field(
        default=SOCKET_TIMEOUT_MS,
        description="Socket I/O timeout in milliseconds",
    )
    socket_connection_timeout_ms: int = Field(
        default=SOCKET_TIMEOUT_MS,
        description="Socket connect timeout in milliseconds",
    )
    username: str | None = Field(default=None, description="SMTP login username")
    password: SecretStr | None = Field(default=None, description="SMTP login password")
    bounce_address: str | None = Field(
        default=None,
        description="Envelope sender for bounces (mail.smtp.from)",
    )
    debug: bool = Field(default=False, description="Enable transport debug output")

    @property
    def has_authentication(self) -> bool:
        return bool(self.username) and self.password is not None
