"""Plain-text email."""

from __future__ import annotations

from .base import TEXT_PLAIN, Email
from .errors import InvalidArgumentError


class SimpleEmail(Email):
    """An email whose :meth:`set_msg` body is ``text/plain``.

    An HTML (or other) alternative can still be attached with
    :meth:`set_content`, which turns the message into
    ``multipart/alternative``.
    """

    def set_msg(self, msg: str) -> None:
        if not msg:
            raise InvalidArgumentError("Invalid message supplied")
        self.set_content(msg, TEXT_PLAIN)
