import pytest

from edgeapp.config import (
    AppCustomConfig,
    ConfigValidationError,
    HostInfo,
    ServiceConfig,
)


def test_validate_rejects_non_positive_value():
    config = AppCustomConfig(some_value=0, some_service=HostInfo(host="SomeHost"))
    with pytest.raises(ConfigValidationError, match="SomeValue must be greater than zero"):
        config.validate()


def test_validate_rejects_negative_value():
    config = AppCustomConfig(some_value=-3, some_service=HostInfo(host="SomeHost"))
    with pytest.raises(ConfigValidationError):
        config.validate()


def test_validate_rejects_unset_service():
    config = AppCustomConfig(some_value=987)
    with pytest.raises(ConfigValidationError, match="SomeService is not set"):
        config.validate()


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        AppCustomConfig().validate()


def test_update_from_raw_copies_configuration():
    target = ServiceConfig()
    source = ServiceConfig(
        AppCustomConfig(
            resource_names="Boolean, Int32",
            some_value=987,
            some_service=HostInfo(host="SomeHost", port=8080, protocol="http"),
        )
    )
    assert target.update_from_raw(source) is True
    assert target == source
    assert target.app_custom.some_service.host == "SomeHost"


def test_update_from_raw_rejects_other_types():
    target = ServiceConfig(AppCustomConfig(some_value=987))
    assert target.update_from_raw({"AppCustom": {}}) is False
    assert target.app_custom.some_value == 987