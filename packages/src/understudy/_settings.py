"""Framework configuration via pydantic-settings.

Settings are loaded from ``UNDERSTUDY_``-prefixed environment variables
and/or a ``.env`` file, e.g.::

    UNDERSTUDY_STRICT_SIGNATURES=false
    UNDERSTUDY_MAX_REPORTED_RECORDS=50
    UNDERSTUDY_AUTOVERIFY=true

Test suites that need deterministic values regardless of the host
environment use :func:`understudy.testing.make_settings`.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Behaviour switches shared by every double a registry creates."""

    model_config = SettingsConfigDict(
        env_prefix="UNDERSTUDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
    """``extra="ignore"`` because the ``.env`` file is usually shared with
    the project under test and holds unrelated keys.
    """

    strict_signatures: bool = Field(
        default=True,
        description=(
            "Bind every call against the signature captured from the "
            "interface.  Calls that would not fit the real method raise "
            "TypeError, and keyword arguments to positional parameters "
            "are recorded in positional form."
        ),
    )
    max_reported_records: Annotated[int, Field(ge=1)] = Field(
        default=20,
        description=(
            "Maximum number of unverified interactions listed in a "
            "VerificationError message.  The attached report keeps all."
        ),
    )
    autoverify: bool = Field(
        default=False,
        description=(
            "When true, the pytest ``double_registry`` fixture calls "
            "verify_no_more_interactions() on every mock at teardown."
        ),
    )
