import logging

import pytest

from edgeapp.app import App
from edgeapp.config import AppCustomConfig, HostInfo
from edgeapp.sample import Event


class FakeService:
    def __init__(self, fail=None, device_names=None, configure=True):
        self.logger = logging.getLogger("tests.app")
        self.fail = fail
        self.configure = configure
        self.device_names = device_names or ["Random-Boolean-Device, Random-Integer-Device"]
        self.calls = []
        self.default_pipeline = None
        self.topic_pipelines = {}
        self.config_callback = None

    def _record(self, name):
        self.calls.append(name)
        if self.fail == name:
            raise RuntimeError("Failed")

    def get_app_setting_strings(self, key):
        self._record("get_app_setting_strings")
        assert key == "DeviceNames"
        return self.device_names

    def load_custom_config(self, config, section):
        self._record("load_custom_config")
        if self.configure:
            config.app_custom.some_value = 987
            config.app_custom.some_service.host = "SomeHost"

    def listen_for_custom_config_changes(self, writable, section, callback):
        self._record("listen_for_custom_config_changes")
        self.config_callback = callback

    def set_default_functions_pipeline(self, *functions):
        self._record("set_default_functions_pipeline")
        self.default_pipeline = functions

    def add_functions_pipeline_for_topics(self, pipeline_id, topics, *functions):
        self._record("add_functions_pipeline_for_topics")
        self.topic_pipelines[pipeline_id] = (topics, functions)

    def make_it_run(self):
        self._record("make_it_run")


def test_create_and_run_service_success():
    service = FakeService()
    app = App()
    assert app.create_and_run_app_service("TestKey", lambda key: service) == 0
    assert service.calls[-1] == "make_it_run"
    assert len(service.default_pipeline) == 4
    assert set(service.topic_pipelines) == {"Floats", "Int32s"}
    assert service.topic_pipelines["Int32s"][0] == ["events/device/device-virtual/+/+/Int32"]
    assert app.service_config.app_custom.some_value == 987


def test_create_and_run_service_new_service_failed():
    assert App().create_and_run_app_service("TestKey", lambda key: None) == -1


@pytest.mark.parametrize(
    "failing",
    ["get_app_setting_strings", "set_default_functions_pipeline", "make_it_run"],
)
def test_create_and_run_service_step_failed(failing):
    service = FakeService(fail=failing)
    assert App().create_and_run_app_service("TestKey", lambda key: service) == -1
    assert failing in service.calls
    assert service.calls[-1] == failing


def test_create_and_run_service_validation_failed(caplog):
    service = FakeService(configure=False)
    assert App().create_and_run_app_service("TestKey", lambda key: service) == -1
    assert "custom configuration failed validation" in caplog.text
    assert "set_default_functions_pipeline" not in service.calls


def test_default_pipeline_filters_by_device_name():
    service = FakeService(device_names=["DeviceA"])
    App().create_and_run_app_service("TestKey", lambda key: service)
    device_filter = service.default_pipeline[0]
    matching = Event("MyProfile", "DeviceA", "MySource")
    assert device_filter(None, matching) == (True, matching)
    assert device_filter(None, Event("MyProfile", "DeviceB", "MySource")) == (False, None)


def test_process_config_updates_applies_changes(caplog):
    caplog.set_level(logging.INFO)
    app = App()
    updated = AppCustomConfig(resource_names="Boolean", some_value=5, some_service=HostInfo(host="SomeHost"))
    app.process_config_updates(updated)
    assert app.service_config.app_custom == updated
    assert "AppCustom.SomeValue changed to: 5" in caplog.text
    assert "AppCustom.ResourceNames changed to: Boolean" in caplog.text


def test_process_config_updates_no_changes(caplog):
    caplog.set_level(logging.INFO)
    app = App()
    app.process_config_updates(AppCustomConfig())
    assert "No changes detected" in caplog.text


def test_process_config_updates_rejects_wrong_type(caplog):
    app = App()
    app.process_config_updates({"SomeValue": 5})
    assert app.service_config.app_custom == AppCustomConfig()
    assert "Can not cast raw config to type 'AppCustomConfig'" in caplog.text


def test_registered_callback_updates_config():
    service = FakeService()
    app = App()
    app.create_and_run_app_service("TestKey", lambda key: service)
    service.config_callback(AppCustomConfig(some_value=42, some_service=HostInfo(host="SomeHost")))
    assert app.service_config.app_custom.some_value == 42