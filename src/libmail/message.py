# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Outbound message content and attachments.

A :class:`Message` holds what an email says (subject, plain-text body and
attachments) and nothing about where it goes. Sender and recipients are only
known at send time: :meth:`Message.prepare` combines them with the content
and returns a fresh :class:`OutboundMessage`, leaving the message untouched
so the same instance can be sent again to different recipients.

MIME building is left to :class:`email.message.EmailMessage`.

Example:
    Building a message with one attachment::

        msg = Message("Monthly report", "See attached.")
        msg.include_file(File("report.pdf", pdf_bytes))
        outbound = msg.prepare("reports@example.com", ["boss@example.com"])
"""

from __future__ import annotations

import io
import mimetypes
import re
from dataclasses import dataclass, field
from email.message import EmailMessage
from pathlib import Path
from typing import Iterable

from .errors import MailError, MailErrorKind

_LINE_BREAKS = re.compile(r"[\r\n]+")


def _fold(value: str) -> str:
    """Replace each run of CR/LF with a single space so the value fits in one header."""
    return _LINE_BREAKS.sub(" ", value)


@dataclass(frozen=True)
class File:
    """Named attachment content.

    Attributes:
        name: File name shown to the recipient.
        content: Raw attachment bytes.

    Raises:
        MailError: ``EMPTY_VALUE`` when the name is blank, ``EMPTY_BODY`` when
            the content is empty.
    """

    name: str
    content: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise MailError(MailErrorKind.EMPTY_VALUE, "empty file name")
        object.__setattr__(self, "name", _fold(self.name))
        if not isinstance(self.content, (bytes, bytearray, memoryview)):
            raise TypeError(f"File content must be bytes, got {type(self.content).__name__}")
        if len(self.content) == 0:
            raise MailError(MailErrorKind.EMPTY_BODY, "file is empty")
        object.__setattr__(self, "content", bytes(self.content))

    @classmethod
    def from_path(cls, path: str | Path, name: str | None = None) -> File:
        """Read an attachment from disk.

        Args:
            path: Location of the file to attach.
            name: Attachment name. Defaults to the final path component.
        """
        path = Path(path)
        return cls(name if name is not None else path.name, path.read_bytes())

    def reader(self) -> io.BytesIO:
        """Return a new stream positioned at the start of the content."""
        return io.BytesIO(self.content)

    def mime_type(self) -> tuple[str, str]:
        """Guess the MIME type from the file name."""
        mt, _ = mimetypes.guess_type(self.name.strip())
        if not mt:
            return ("application", "octet-stream")
        maintype, subtype = mt.split("/", 1)
        return maintype, subtype

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class OutboundMessage:
    """A message bound to its envelope, ready to hand to a transport."""

    sender: str
    recipients: tuple[str, ...]
    email: EmailMessage = field(repr=False)


def _set_sender(email: EmailMessage, sender: str) -> None:
    del email["From"]
    email["From"] = sender


def _set_recipients(email: EmailMessage, recipients: Iterable[str]) -> None:
    del email["To"]
    email["To"] = ", ".join(recipients)


class Message:
    """Subject, plain-text body and attachments of one email.

    Empty subject and body are accepted. Line breaks in the subject are
    folded to spaces.
    """

    def __init__(self, subject: str, text: str):
        self._subject = _fold(subject)
        self._text = text
        self._files: list[File] = []

    @property
    def subject(self) -> str:
        return self._subject

    @property
    def text(self) -> str:
        return self._text

    @property
    def attachments(self) -> tuple[str, ...]:
        """Names of the included files, in attachment order."""
        return tuple(f.name for f in self._files)

    def include_file(self, file: File) -> None:
        """Attach ``file``. Files sharing a name are all kept."""
        if not isinstance(file, File):
            raise TypeError(f"Expected File, got {type(file).__name__}")
        self._files.append(file)

    def as_email(self) -> EmailMessage:
        """Build a new :class:`EmailMessage` without From and To headers."""
        email = EmailMessage()
        email["Subject"] = self._subject
        email.set_content(self._text, subtype="plain", charset="utf-8")
        for f in self._files:
            maintype, subtype = f.mime_type()
            email.add_attachment(f.content, maintype=maintype, subtype=subtype, filename=f.name)
        return email

    def prepare(self, sender: str, recipients: Iterable[str]) -> OutboundMessage:
        """Return an outbound copy addressed from ``sender`` to ``recipients``.

        The message itself is not modified.
        """
        recipients = tuple(recipients)
        email = self.as_email()
        _set_sender(email, sender)
        _set_recipients(email, recipients)
        return OutboundMessage(sender=sender, recipients=recipients, email=email)

    def __repr__(self) -> str:
        return f"Message(subject={self._subject!r}, attachments={len(self._files)})"
