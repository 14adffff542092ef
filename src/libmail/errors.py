# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Validation errors raised by the mail client.

Every local precondition failure is reported as a :class:`MailError` tagged
with a :class:`MailErrorKind`. Failures coming from the SMTP transport are not
wrapped: callers receive the ``aiosmtplib``/socket exception unchanged.

Example:
    Checking the kind of a failure::

        try:
            Mailer("", "smtp.example.com", 587, "user", "secret")
        except MailError as exc:
            assert exc.kind is MailErrorKind.EMPTY_VALUE
"""

from __future__ import annotations

from enum import Enum


class MailErrorKind(str, Enum):
    """Closed set of validation failures.

    Attributes:
        EMPTY_VALUE: A required text field was empty or whitespace-only.
        INVALID_HOST: The SMTP host could not be parsed as an address.
        ZERO_PORT: The SMTP port was zero.
        INVALID_PORT: The SMTP port was negative, too large or not an integer.
        EMPTY_BODY: An attachment had no content.
        EMPTY_RECIPIENTS: A send was attempted without recipients.
        INVALID_ADDRESS: A sender or recipient address contained a line break.
    """

    EMPTY_VALUE = "empty_value"
    INVALID_HOST = "invalid_host"
    ZERO_PORT = "zero_port"
    INVALID_PORT = "invalid_port"
    EMPTY_BODY = "empty_body"
    EMPTY_RECIPIENTS = "empty_recipients"
    INVALID_ADDRESS = "invalid_address"


class MailError(ValueError):
    """Raised when a mailer, message or attachment fails validation."""

    def __init__(self, kind: MailErrorKind, message: str | None = None):
        super().__init__(message or kind.value.replace("_", " "))
        self.kind = kind
        self.code = kind.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MailError):
            return self.kind is other.kind
        if isinstance(other, MailErrorKind):
            return self.kind is other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"MailError({self.kind.name}, {str(self)!r})"
