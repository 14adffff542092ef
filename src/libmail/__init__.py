# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Minimal SMTP mail client.

Features:
    - Validated SMTP account configuration (sender, host, port, credentials)
    - Plain-text messages with file attachments
    - Delivery over aiosmtplib with implicit TLS, STARTTLS or plain SMTP
    - Pluggable transport for tests and custom delivery backends
    - Settings from INI files with LIBMAIL_* environment fallbacks

Example::

    from libmail import File, Mailer, Message

    mailer = Mailer("noreply@example.com", "smtp.example.com", 587, "noreply", "secret")
    msg = Message("Report", "Attached.")
    msg.include_file(File("report.csv", b"a,b\\n1,2\\n"))
    mailer.send(msg, ["team@example.com"])
"""

from .config import MailerSettings, load_settings
from .errors import MailError, MailErrorKind
from .mailer import Mailer
from .message import File, Message, OutboundMessage
from .transport import SMTPTransport, Transport

__all__ = [
    "Mailer",
    "Message",
    "File",
    "OutboundMessage",
    "Transport",
    "SMTPTransport",
    "MailError",
    "MailErrorKind",
    "MailerSettings",
    "load_settings",
]
