# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SMTP delivery of prepared messages.

The mailer never speaks SMTP itself. It hands an :class:`OutboundMessage`
to a :class:`Transport`, which dials the server, authenticates and transmits.
:class:`SMTPTransport` is the ``aiosmtplib`` implementation; tests and
applications with special needs can provide their own subclass.

TLS behavior based on port and ``use_tls``:

- Port 465 with ``use_tls=True``: direct TLS (implicit TLS)
- Other ports with ``use_tls=True``: STARTTLS
- ``use_tls=False``: plain SMTP (no encryption)

Errors raised by ``aiosmtplib`` or the socket layer are propagated unchanged.
"""

from __future__ import annotations

import asyncio

import aiosmtplib

from .logger import get_logger
from .message import OutboundMessage

logger = get_logger("libmail.transport")


class Transport:
    """Interface implemented by concrete delivery backends."""

    async def send(
        self,
        outbound: OutboundMessage,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
    ) -> None:
        """Dial ``host:port``, authenticate and transmit ``outbound``."""
        raise NotImplementedError


class SMTPTransport(Transport):
    """Open one authenticated ``aiosmtplib`` connection per send.

    Args:
        use_tls: Whether to encrypt the connection (implicit TLS on 465,
            STARTTLS elsewhere).
        timeout: Socket timeout in seconds handed to ``aiosmtplib``.
        local_hostname: Name announced in EHLO/HELO. ``None`` lets
            ``aiosmtplib`` use the local FQDN.
    """

    def __init__(self, *, use_tls: bool = True, timeout: float = 10.0, local_hostname: str | None = None):
        self.use_tls = use_tls
        self.timeout = timeout
        self.local_hostname = local_hostname

    def _client(self, host: str, port: int) -> aiosmtplib.SMTP:
        if self.use_tls and port == 465:
            return aiosmtplib.SMTP(
                hostname=host, port=port, start_tls=False, use_tls=True,
                timeout=self.timeout, local_hostname=self.local_hostname,
            )
        if self.use_tls:
            return aiosmtplib.SMTP(
                hostname=host, port=port, start_tls=True, use_tls=False,
                timeout=self.timeout, local_hostname=self.local_hostname,
            )
        return aiosmtplib.SMTP(
            hostname=host, port=port, start_tls=False, use_tls=False,
            timeout=self.timeout, local_hostname=self.local_hostname,
        )

    async def send(
        self,
        outbound: OutboundMessage,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
    ) -> None:
        smtp = self._client(host, port)
        logger.debug("Connecting to %s:%s (use_tls=%s)", host, port, self.use_tls)
        # aiosmtplib's own timeout applies per operation; bound the whole handshake too
        await asyncio.wait_for(smtp.connect(), timeout=self.timeout + 5.0)
        try:
            if username:
                await asyncio.wait_for(smtp.login(username, password), timeout=self.timeout + 5.0)
            await smtp.send_message(
                outbound.email,
                sender=outbound.sender,
                recipients=list(outbound.recipients),
            )
        finally:
            try:
                await smtp.quit()
            except (aiosmtplib.SMTPException, OSError) as exc:
                logger.debug("Ignoring error while closing SMTP connection to %s:%s: %s", host, port, exc)
