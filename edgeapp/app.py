"""The application service: wiring configuration and pipelines together."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from .config import AppCustomConfig, ServiceConfig
from .sample import Event, PipelineError, Sample


def _device_name_filter(device_names: Iterable[str]) -> Callable[[Any, Any], tuple[bool, Any]]:
    """Build a pipeline function that lets through only events from the given devices."""
    names = list(device_names)

    def filter_by_device_name(ctx: Any, data: Any) -> tuple[bool, Any]:
        if data is None:
            raise PipelineError("function FilterByDeviceName: No Data Received")
        if not isinstance(data, Event):
            raise PipelineError("function FilterByDeviceName: type received is not an Event")
        if not names or data.device_name in names:
            return True, data
        return False, None

    return filter_by_device_name


class App:
    """An application service built from a service factory."""

    def __init__(self) -> None:
        self.service: Any = None
        self.logger: logging.Logger = logging.getLogger(__name__)
        self.service_config: ServiceConfig = ServiceConfig()

    def create_and_run_app_service(
        self, service_key: str, new_service_factory: Callable[[str], Any]
    ) -> int:
        """Create the service, configure its pipelines and run it; return an exit code."""
        self.service = new_service_factory(service_key)
        if self.service is None:
            return -1

        service = self.service
        self.logger = service.logger

        try:
            device_names = service.get_app_setting_strings("DeviceNames")
        except Exception as err:
            self.logger.error("failed to retrieve DeviceNames from configuration: %s", err)
            return -1

        self.service_config = ServiceConfig()
        steps: list[tuple[str, Callable[[], Any]]] = [
            (
                "failed load custom configuration: %s",
                lambda: service.load_custom_config(self.service_config, "AppCustom"),
            ),
            (
                "custom configuration failed validation: %s",
                lambda: self.service_config.app_custom.validate(),
            ),
            (
                "unable to watch custom writable configuration: %s",
                lambda: service.listen_for_custom_config_changes(
                    self.service_config.app_custom, "AppCustom", self.process_config_updates
                ),
            ),
        ]

        sample = Sample()
        steps += [
            (
                "SetFunctionsPipeline returned error: %s",
                lambda: service.set_default_functions_pipeline(
                    _device_name_filter(device_names),
                    sample.log_event_details,
                    sample.convert_event_to_xml,
                    sample.output_xml,
                ),
            ),
            (
                "AddFunctionsPipelineForTopic returned error: %s",
                lambda: service.add_functions_pipeline_for_topics(
                    "Floats",
                    ["events/device/device-virtual/+/Random-Float-Device/#"],
                    sample.log_event_details,
                    sample.convert_event_to_xml,
                    sample.output_xml,
                ),
            ),
            (
                "AddFunctionsPipelineForTopic returned error: %s",
                lambda: service.add_functions_pipeline_for_topics(
                    "Int32s",
                    ["events/device/device-virtual/+/+/Int32"],
                    sample.log_event_details,
                    sample.send_get_command,
                    sample.convert_event_to_xml,
                    sample.output_xml,
                ),
            ),
            ("MakeItRun returned error: %s", service.make_it_run),
        ]

        for message, step in steps:
            try:
                step()
            except Exception as err:
                self.logger.error(message, err)
                return -1
        return 0

    def process_config_updates(self, raw_writable_config: Any) -> None:
        """Apply an updated 'AppCustom' section and log what changed."""
        if not isinstance(raw_writable_config, AppCustomConfig):
            self.logger.error(
                "unable to process config updates: Can not cast raw config to type 'AppCustomConfig'"
            )
            return

        previous = self.service_config.app_custom
        updated = raw_writable_config
        self.service_config.app_custom = updated

        if previous == updated:
            self.logger.info("No changes detected")
            return

        if previous.some_value != updated.some_value:
            self.logger.info("AppCustom.SomeValue changed to: %d", updated.some_value)
        if previous.resource_names != updated.resource_names:
            self.logger.info("AppCustom.ResourceNames changed to: %s", updated.resource_names)
        if previous.some_service != updated.some_service:
            self.logger.info("AppCustom.SomeService changed to: %s", updated.some_service)