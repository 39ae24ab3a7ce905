"""Immutable built message and its rendering to a stdlib ``EmailMessage``."""

from __future__ import annotations

import email.policy
import email.utils
from datetime import datetime
from email.message import EmailMessage

from pydantic import BaseModel, ConfigDict, Field

from .address import Address


class MimeMessage(BaseModel):
    """Snapshot of an :class:`~umbrella_mail.base.Email` at build time.

    Collections are tuples so the snapshot cannot be changed after it is
    produced.  :meth:`to_email_message` renders a fresh stdlib message on
    every call.
    """

    model_config = ConfigDict(frozen=True)

    from_address: Address
    to_addresses: tuple[Address, ...] = ()
    cc_addresses: tuple[Address, ...] = ()
    bcc_addresses: tuple[Address, ...] = ()
    reply_to: tuple[Address, ...] = ()
    headers: tuple[tuple[str, str], ...] = Field(
        default=(),
        description="Custom headers in insertion order",
    )
    subject: str | None = None
    charset: str | None = None
    text: str | None = Field(default=None, description="Plain-text body")
    content: str | None = Field(default=None, description="Alternate body, e.g. HTML")
    content_type: str | None = None
    sent_date: datetime
    host_name: str | None = Field(default=None, description="Host of the session used")

    @property
    def is_multipart(self) -> bool:
        return self.content is not None and self.text is not None

    def get_header(self, name: str) -> list[str] | None:
        """Return all values of custom header *name* (case-insensitive)."""
        wanted = name.lower()
        values = [value for key, value in self.headers if key.lower() == wanted]
        return values or None

    def to_email_message(self) -> EmailMessage:
        msg = EmailMessage(policy=email.policy.default)

        msg["From"] = str(self.from_address)
        if self.to_addresses:
            msg["To"] = ", ".join(str(a) for a in self.to_addresses)
        if self.cc_addresses:
            msg["Cc"] = ", ".join(str(a) for a in self.cc_addresses)
        if self.reply_to:
            msg["Reply-To"] = ", ".join(str(a) for a in self.reply_to)
        if self.subject is not None:
            msg["Subject"] = self.subject
        msg["Date"] = email.utils.format_datetime(self._aware_sent_date())

        self._set_body(msg)

        # custom headers go on last so they override generated ones
        for name, value in self.headers:
            if name in msg:
                del msg[name]
            msg[name] = value
        return msg

    def as_bytes(self) -> bytes:
        return self.to_email_message().as_bytes()

    def _aware_sent_date(self) -> datetime:
        # format_datetime needs an aware value or it emits "-0000"
        if self.sent_date.tzinfo is None:
            return self.sent_date.astimezone()
        return self.sent_date

    def _set_body(self, msg: EmailMessage) -> None:
        charset = self.charset or "utf-8"

        if self.content is None:
            msg.set_content(self.text or "", charset=charset)
            return

        mime_type = (self.content_type or "text/html").split(";", 1)[0].strip().lower()
        maintype, _, subtype = mime_type.partition("/")
        if self.text is not None:
            msg.set_content(self.text, charset=charset)
            if maintype == "text":
                msg.add_alternative(self.content, subtype=subtype or "html", charset=charset)
            else:
                msg.add_alternative(
                    self.content.encode(charset),
                    maintype=maintype,
                    subtype=subtype or "octet-stream",
                )
        elif maintype == "text":
            msg.set_content(self.content, subtype=subtype or "html", charset=charset)
        else:
            msg.set_content(
                self.content.encode(charset),
                maintype=maintype,
                subtype=subtype or "octet-stream",
            )
