# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Validated SMTP client.

A :class:`Mailer` holds the connection parameters of one SMTP account and
sends :class:`~libmail.message.Message` objects through a
:class:`~libmail.transport.Transport`. All parameters are validated when the
mailer is built; no network I/O happens until :meth:`Mailer.send`.

Example:
    Sending a plain-text email::

        mailer = Mailer("noreply@example.com", "smtp.example.com", 587, "noreply", "secret")
        mailer.send(Message("Hi", "Hello there"), ["someone@example.org"])
"""

from __future__ import annotations

import asyncio
import ipaddress
import re
from typing import TYPE_CHECKING, Iterable
from urllib.parse import urlsplit

from .errors import MailError, MailErrorKind
from .logger import get_logger
from .message import Message, OutboundMessage
from .transport import SMTPTransport, Transport

if TYPE_CHECKING:
    from .config import MailerSettings

logger = get_logger("libmail.mailer")

_HOST_LABEL = r"(?!-)[A-Za-z0-9_-]{1,63}(?<!-)"
_HOSTNAME_RE = re.compile(rf"{_HOST_LABEL}(?:\.{_HOST_LABEL})*\.?")


def _require(value: str, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MailError(MailErrorKind.EMPTY_VALUE, f"empty {field}")
    return value.strip()


def _require_address(value: str, field: str) -> str:
    address = _require(value, field)
    if "\r" in address or "\n" in address:
        raise MailError(MailErrorKind.INVALID_ADDRESS, f"line break in {field}: {address!r}")
    return address


def _parse_host(host: str) -> str:
    """Return the server address contained in ``host``.

    Accepts a bare hostname, an IP literal (IPv6 optionally in brackets) or a
    URL such as ``smtp://mail.example.com``, in which case its hostname is used.
    """
    candidate = host
    if "://" in host:
        try:
            candidate = urlsplit(host).hostname or ""
        except ValueError:
            raise MailError(MailErrorKind.INVALID_HOST, f"invalid host: {host!r}") from None
    elif host.startswith("[") and host.endswith("]"):
        candidate = host[1:-1]

    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        pass
    # a dotted all-numeric name that is not a valid IP is a malformed address
    if (
        len(candidate) <= 253
        and _HOSTNAME_RE.fullmatch(candidate)
        and not candidate.rstrip(".").rsplit(".", 1)[-1].isdigit()
    ):
        return candidate
    raise MailError(MailErrorKind.INVALID_HOST, f"invalid host: {host!r}")


def _check_port(port: int) -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        raise MailError(MailErrorKind.INVALID_PORT, f"port must be an integer, got {port!r}")
    if port == 0:
        raise MailError(MailErrorKind.ZERO_PORT, "zero port")
    if not 0 < port <= 65535:
        raise MailError(MailErrorKind.INVALID_PORT, f"port out of range: {port}")
    return port


def _normalise_recipients(recipients: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(recipients, str):
        items = [part for part in recipients.split(",") if part.strip()]
    else:
        items = list(recipients)
    if not items:
        raise MailError(MailErrorKind.EMPTY_RECIPIENTS, "recipients are not specified")
    return tuple(_require_address(addr, "recipient") for addr in items)


class Mailer:
    """SMTP account able to send messages.

    Args:
        sender: Address placed in the From header and used as envelope sender.
        host: SMTP server hostname, IP address or ``smtp://`` URL.
        port: SMTP server port.
        username: Login name for SMTP authentication.
        password: Login password. Never logged or shown in ``repr()``.
        transport: Delivery backend. Defaults to :class:`SMTPTransport`.

    Raises:
        MailError: ``EMPTY_VALUE`` for a blank sender, host or username,
            ``INVALID_HOST`` when the host cannot be parsed, ``ZERO_PORT`` for
            port 0, ``INVALID_PORT`` for any other unusable port and
            ``INVALID_ADDRESS`` for a sender containing a line break.
    """

    def __init__(
        self,
        sender: str,
        host: str,
        port: int,
        username: str,
        password: str,
        *,
        transport: Transport | None = None,
    ):
        self._sender = _require_address(sender, "sender")
        self._host = _parse_host(_require(host, "host"))
        self._port = _check_port(port)
        self._username = _require(username, "user")
        self._password = password
        self._transport = transport or SMTPTransport()

    @classmethod
    def from_settings(cls, settings: MailerSettings, *, transport: Transport | None = None) -> Mailer:
        """Build a mailer, and its default transport, from loaded settings."""
        if transport is None:
            transport = SMTPTransport(
                use_tls=settings.use_tls,
                timeout=settings.timeout,
                local_hostname=settings.local_hostname,
            )
        return cls(
            settings.sender,
            settings.host,
            settings.port,
            settings.username,
            settings.password.get_secret_value(),
            transport=transport,
        )

    @property
    def sender(self) -> str:
        return self._sender

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def username(self) -> str:
        return self._username

    @property
    def transport(self) -> Transport:
        return self._transport

    def _prepare(self, message: Message, recipients: str | Iterable[str]) -> OutboundMessage:
        addresses = _normalise_recipients(recipients)
        return message.prepare(self._sender, addresses)

    async def _deliver(self, outbound: OutboundMessage) -> None:
        logger.debug(
            "Sending message %r to %d recipient(s) via %s:%s",
            outbound.email["Subject"],
            len(outbound.recipients),
            self._host,
            self._port,
        )
        await self._transport.send(
            outbound,
            host=self._host,
            port=self._port,
            username=self._username,
            password=self._password,
        )
        logger.info(
            "Message sent to %d recipient(s) via %s:%s",
            len(outbound.recipients),
            self._host,
            self._port,
        )

    def send(self, message: Message, recipients: str | Iterable[str]) -> None:
        """Send ``message`` to ``recipients``, blocking until delivery completes.

        ``message`` is not modified. Transport failures propagate unchanged.

        Raises:
            MailError: ``EMPTY_RECIPIENTS`` when no recipient is given,
                ``EMPTY_VALUE`` when a recipient is blank, ``INVALID_ADDRESS``
                when a recipient contains a line break.
            RuntimeError: When called from a running event loop; use
                :meth:`send_async` there.
        """
        outbound = self._prepare(message, recipients)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError("Mailer.send() cannot run inside an event loop, await Mailer.send_async() instead")
        asyncio.run(self._deliver(outbound))

    async def send_async(self, message: Message, recipients: str | Iterable[str]) -> None:
        """Coroutine version of :meth:`send` for code already running an event loop."""
        outbound = self._prepare(message, recipients)
        await self._deliver(outbound)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mailer):
            return NotImplemented
        return (
            self._sender, self._host, self._port, self._username, self._password
        ) == (other._sender, other._host, other._port, other._username, other._password)

    def __hash__(self) -> int:
        return hash((self._sender, self._host, self._port, self._username))

    def __repr__(self) -> str:
        return (
            f"Mailer(sender={self._sender!r}, host={self._host!r}, "
            f"port={self._port}, username={self._username!r})"
        )
