# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Mailer settings loaded from an INI file with environment fallbacks.

Config file section/keys::

    [smtp]
    sender = noreply@example.com
    host = smtp.example.com
    port = 587
    username = noreply
    password = secret
    use_tls = true
    timeout = 10
    local_hostname = client.example.com

Environment variables (all prefixed with LIBMAIL_) are used when a key is
missing from the file:
  LIBMAIL_CONFIG - Path to the INI file (default: libmail.ini)
  LIBMAIL_SENDER, LIBMAIL_HOST, LIBMAIL_PORT, LIBMAIL_USERNAME,
  LIBMAIL_PASSWORD, LIBMAIL_USE_TLS, LIBMAIL_TIMEOUT, LIBMAIL_LOCAL_HOSTNAME
"""

from __future__ import annotations

import configparser
import os
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from .logger import get_logger

logger = get_logger("libmail.config")

SECTION = "smtp"
ENV_PREFIX = "LIBMAIL_"
DEFAULT_CONFIG_PATH = "libmail.ini"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class MailerSettings(BaseModel):
    """Connection settings for one SMTP account.

    Only types are checked here; the semantic checks (blank values, host
    parsing, zero port) belong to :class:`~libmail.mailer.Mailer`.
    """

    model_config = ConfigDict(extra="forbid")

    sender: Annotated[str, Field(description="From address")]
    host: Annotated[str, Field(description="SMTP server host")]
    port: Annotated[int, Field(default=587, description="SMTP server port")]
    username: Annotated[str, Field(description="SMTP login name")]
    password: Annotated[SecretStr, Field(default=SecretStr(""), description="SMTP login password")]
    use_tls: Annotated[bool, Field(default=True, description="Use implicit TLS on 465, STARTTLS elsewhere")]
    timeout: Annotated[float, Field(default=10.0, gt=0, description="Socket timeout in seconds")]
    local_hostname: Annotated[str | None, Field(default=None, description="Name announced in EHLO")]

    @field_validator("use_tls", mode="before")
    @classmethod
    def parse_bool(cls, v: Any) -> Any:
        """Accept the usual INI spellings of booleans."""
        if isinstance(v, str):
            normalized = v.strip().lower()
            if normalized in _TRUE:
                return True
            if normalized in _FALSE:
                return False
        return v

    @field_validator("local_hostname", mode="before")
    @classmethod
    def blank_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


def load_settings(config_path: str | Path | None = None) -> MailerSettings:
    """Load :class:`MailerSettings` from ``config_path`` and the environment.

    Args:
        config_path: INI file to read. Defaults to ``$LIBMAIL_CONFIG`` or
            ``libmail.ini``. A missing file is not an error.

    Raises:
        pydantic.ValidationError: When required values are missing or malformed.
    """
    path = Path(config_path or os.getenv(f"{ENV_PREFIX}CONFIG", DEFAULT_CONFIG_PATH))
    parser = configparser.ConfigParser(interpolation=None)
    if parser.read(path):
        logger.debug("Loaded mailer settings from %s", path)
    else:
        logger.debug("Config file %s not found, using environment only", path)

    values: dict[str, Any] = {}
    for key in MailerSettings.model_fields:
        if parser.has_option(SECTION, key):
            value = parser.get(SECTION, key)
        else:
            value = os.getenv(f"{ENV_PREFIX}{key.upper()}")
        if value is not None:
            values[key] = value
    return MailerSettings(**values)
