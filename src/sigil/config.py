"""Configuration for Sigil.

Parser settings may come from a YAML file, from keyword arguments, or from
environment variables. Every setting has an environment variable named
with the ``SIGIL_`` prefix, given explicitly as a ``validation_alias``.
Environment variables take precedence so that a deployment can override a
shared configuration file.
Settings with list values, such as ``SIGIL_VALID_METHODS``, are given in
the environment as JSON.
"""

from __future__ import annotations

from pathlib import Path
from typing import Self, override

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from safir.logging import LogLevel, Profile, configure_logging

from .constants import LOGGER_NAME
from .methods import registered_algorithms

__all__ = ["Config"]


class Config(BaseSettings):
    """Configuration for token parsing."""

    model_config = SettingsConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        populate_by_name=True,
    )

    valid_methods: list[str] | None = Field(
        None,
        title="Accepted algorithms",
        description=(
            "Algorithms accepted when verifying tokens. If not set, any"
            " registered algorithm is accepted."
        ),
        validation_alias=AliasChoices("SIGIL_VALID_METHODS", "validMethods"),
    )

    use_decimal: bool = Field(
        False,
        title="Preserve number precision",
        description=(
            "Decode non-integral numbers in claims as exact decimals rather"
            " than floats"
        ),
        validation_alias=AliasChoices("SIGIL_USE_DECIMAL", "useDecimal"),
    )

    skip_claims_validation: bool = Field(
        False,
        title="Skip claims validation",
        description=(
            "Do not check time-based claims, audience, or issuer. The"
            " signature is still verified."
        ),
        validation_alias=AliasChoices(
            "SIGIL_SKIP_CLAIMS_VALIDATION", "skipClaimsValidation"
        ),
    )

    audience: str | None = Field(
        None,
        title="Expected audience",
        description="If set, the aud claim must contain this value",
        validation_alias=AliasChoices("SIGIL_AUDIENCE", "audience"),
    )

    issuer: str | None = Field(
        None,
        title="Expected issuer",
        description="If set, the iss claim must equal this value",
        validation_alias=AliasChoices("SIGIL_ISSUER", "issuer"),
    )

    log_level: LogLevel = Field(
        LogLevel.INFO,
        title="Logging level",
        description="Python logging level",
        validation_alias=AliasChoices("SIGIL_LOG_LEVEL", "logLevel"),
    )

    log_profile: Profile = Field(
        Profile.production,
        title="Logging profile",
        description="Logging profile, controlling the output format",
        validation_alias=AliasChoices("SIGIL_LOG_PROFILE", "logProfile"),
    )

    @override
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Prefer environment variables to init parameters.

        Init parameters usually come from the YAML configuration file, and
        :file:`.env` and secret files are not supported.
        """
        return (env_settings, init_settings)

    @field_validator("valid_methods")
    @classmethod
    def _validate_valid_methods(
        cls, v: list[str] | None
    ) -> list[str] | None:
        if v is None:
            return v
        known = registered_algorithms()
        for alg in v:
            if alg not in known:
                raise ValueError(f"unknown signing algorithm {alg}")
        return v

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Construct a Config object from a configuration file.

        Parameters
        ----------
        path
            Path to the configuration file in YAML.

        Returns
        -------
        Config
            The corresponding `Config` object.
        """
        with path.open("r") as f:
            return cls(**(yaml.safe_load(f) or {}))

    def configure_logging(self) -> None:
        """Configure logging based on the Sigil configuration."""
        configure_logging(
            name=LOGGER_NAME,
            profile=self.log_profile,
            log_level=self.log_level,
        )
