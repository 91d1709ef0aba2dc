"""Custom configuration for the application service."""

from __future__ import annotations

from dataclasses import dataclass, field, fields


class ConfigValidationError(ValueError):
    """Raised when the custom configuration holds invalid values."""


@dataclass
class HostInfo:
    """Connection information for an external service."""

    host: str = ""
    port: int = 0
    protocol: str = ""


@dataclass
class AppCustomConfig:
    """The service's custom structured configuration."""

    resource_names: str = ""
    some_value: int = 0
    some_service: HostInfo = field(default_factory=HostInfo)

    def validate(self) -> None:
        """Raise ConfigValidationError unless the configuration is usable."""
        if self.some_value <= 0:
            raise ConfigValidationError("SomeValue must be greater than zero")
        if self.some_service == HostInfo():
            raise ConfigValidationError("SomeService is not set")


@dataclass
class ServiceConfig:
    """Outer configuration holding the 'AppCustom' section."""

    app_custom: AppCustomConfig = field(default_factory=AppCustomConfig)

    def update_from_raw(self, raw_config: object) -> bool:
        """Copy a raw configuration into this one; False if it is of the wrong type."""
        if not isinstance(raw_config, ServiceConfig):
            return False
        for item in fields(self):
            setattr(self, item.name, getattr(raw_config, item.name))
        return True