"""Validated email addresses."""

from __future__ import annotations

import email.utils
from collections.abc import Iterable

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidAddressError, InvalidAddressListError


class Address(BaseModel):
    """An ``addr-spec`` with an optional display name."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(description="Bare address, e.g. user@example.com")
    name: str | None = Field(default=None, description="Optional display name")

    @classmethod
    def parse(cls, value: str | None, name: str | None = None) -> Address:
        """Validate *value* and return an :class:`Address`.

        *value* may be a bare address or ``"Display Name <user@host>"``.
        An explicit *name* wins over a display name found in *value*.
        """
        if value is None or not value.strip():
            raise InvalidAddressError("Email address can not be null or empty")

        parsed = email.utils.getaddresses([value])
        if len(parsed) != 1 or not parsed[0][1]:
            raise InvalidAddressError(f"Expected exactly one email address: {value!r}")
        parsed_name, addr_spec = parsed[0]

        try:
            validate_email(addr_spec, check_deliverability=False)
        except EmailNotValidError as exc:
            raise InvalidAddressError(f"Invalid email address: {value!r}: {exc}") from exc

        return cls(address=addr_spec, name=name or parsed_name or None)

    def __str__(self) -> str:
        return email.utils.formataddr((self.name or "", self.address))


def parse_address_list(emails: str | Iterable[str] | None) -> list[Address]:
    """Validate every entry of *emails*, failing before returning anything.

    Accepts a single string or an iterable of strings.
    """
    if emails is None:
        raise InvalidAddressListError()
    if isinstance(emails, str):
        emails = [emails]

    values = list(emails)
    if not values:
        raise InvalidAddressListError()
    return [Address.parse(value) for value in values]
