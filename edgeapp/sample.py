"""Sample pipeline functions and the event types they work on."""

from __future__ import annotations

import base64
import time
import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any

VALUE_TYPE_BOOL = "Bool"
VALUE_TYPE_STRING = "String"
VALUE_TYPE_UINT8 = "Uint8"
VALUE_TYPE_UINT16 = "Uint16"
VALUE_TYPE_UINT32 = "Uint32"
VALUE_TYPE_UINT64 = "Uint64"
VALUE_TYPE_INT8 = "Int8"
VALUE_TYPE_INT16 = "Int16"
VALUE_TYPE_INT32 = "Int32"
VALUE_TYPE_INT64 = "Int64"
VALUE_TYPE_FLOAT32 = "Float32"
VALUE_TYPE_FLOAT64 = "Float64"
VALUE_TYPE_BINARY = "Binary"

CONTENT_TYPE_XML = "application/xml"

EVENTS_CONVERTED_TO_XML_NAME = "EventsConvertedToXML"

_INT_RANGES = {
    VALUE_TYPE_UINT8: (0, 2**8 - 1),
    VALUE_TYPE_UINT16: (0, 2**16 - 1),
    VALUE_TYPE_UINT32: (0, 2**32 - 1),
    VALUE_TYPE_UINT64: (0, 2**64 - 1),
    VALUE_TYPE_INT8: (-(2**7), 2**7 - 1),
    VALUE_TYPE_INT16: (-(2**15), 2**15 - 1),
    VALUE_TYPE_INT32: (-(2**31), 2**31 - 1),
    VALUE_TYPE_INT64: (-(2**63), 2**63 - 1),
}
_FLOAT_TYPES = {VALUE_TYPE_FLOAT32, VALUE_TYPE_FLOAT64}


class PipelineError(Exception):
    """Raised by a pipeline function to stop the pipeline with an error."""


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Reading:
    """A single reading carried by an event."""

    device_name: str
    resource_name: str
    profile_name: str
    value_type: str
    value: str = ""
    binary_value: bytes = b""
    media_type: str = ""
    id: str = field(default_factory=_new_id)
    origin: int = field(default_factory=time.time_ns)


@dataclass
class Event:
    """An event from a device source with its readings and tags."""

    profile_name: str
    device_name: str
    source_name: str
    id: str = field(default_factory=_new_id)
    origin: int = field(default_factory=time.time_ns)
    readings: list[Reading] = field(default_factory=list)
    tags: dict[str, Any] = field(default_factory=dict)

    def add_simple_reading(self, resource_name: str, value_type: str, value: Any) -> Reading:
        """Append a reading whose value is checked against value_type."""
        text = _format_simple_value(value_type, value)
        reading = Reading(
            device_name=self.device_name,
            resource_name=resource_name,
            profile_name=self.profile_name,
            value_type=value_type,
            value=text,
            origin=self.origin,
        )
        self.readings.append(reading)
        return reading

    def to_xml(self) -> str:
        """Render the event as an XML document string."""
        root = ET.Element("Event")
        for tag, text in (
            ("Id", self.id),
            ("DeviceName", self.device_name),
            ("ProfileName", self.profile_name),
            ("SourceName", self.source_name),
            ("Origin", str(self.origin)),
        ):
            ET.SubElement(root, tag).text = text
        readings = ET.SubElement(root, "Readings")
        for reading in self.readings:
            node = ET.SubElement(readings, "Reading")
            for tag, text in (
                ("Id", reading.id),
                ("Origin", str(reading.origin)),
                ("DeviceName", reading.device_name),
                ("ResourceName", reading.resource_name),
                ("ProfileName", reading.profile_name),
                ("ValueType", reading.value_type),
            ):
                ET.SubElement(node, tag).text = text
            if reading.value_type.lower() == VALUE_TYPE_BINARY.lower():
                ET.SubElement(node, "BinaryValue").text = base64.b64encode(
                    reading.binary_value
                ).decode("ascii")
                ET.SubElement(node, "MediaType").text = reading.media_type
            else:
                ET.SubElement(node, "Value").text = reading.value
        tags = ET.SubElement(root, "Tags")
        for name, value in self.tags.items():
            ET.SubElement(tags, "Tag", name=str(name)).text = str(value)
        return ET.tostring(root, encoding="unicode")


def _format_simple_value(value_type: str, value: Any) -> str:
    if value_type == VALUE_TYPE_BOOL:
        if not isinstance(value, bool):
            raise ValueError(f"value {value!r} does not match value type {value_type}")
        return "true" if value else "false"
    if value_type == VALUE_TYPE_STRING:
        if not isinstance(value, str):
            raise ValueError(f"value {value!r} does not match value type {value_type}")
        return value
    if value_type in _INT_RANGES:
        low, high = _INT_RANGES[value_type]
        if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
            raise ValueError(f"value {value!r} does not match value type {value_type}")
        return str(value)
    if value_type in _FLOAT_TYPES:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"value {value!r} does not match value type {value_type}")
        return repr(float(value))
    raise ValueError(f"value type {value_type} is not a simple value type")


@dataclass
class CoreCommand:
    """A command a device offers through the command service."""

    name: str
    get: bool = False
    set: bool = False
    path: str = ""
    url: str = ""


@dataclass
class Counter:
    """A monotonically increasing metric."""

    count: int = 0

    def inc(self, amount: int = 1) -> None:
        self.count += amount


class Sample:
    """Example pipeline functions.

    Each function takes a context exposing ``logger``, ``pipeline_id``,
    ``command_client``, ``metrics_manager``, ``response_data`` and
    ``response_content_type``, and returns ``(continue_pipeline, result)``.
    """

    def __init__(self) -> None:
        self.events_converted_to_xml: Counter | None = None

    @staticmethod
    def _require_event(ctx: Any, data: Any, function: str, separator: str) -> Event:
        if data is None:
            raise PipelineError(
                f"function {function} in pipeline '{ctx.pipeline_id}': No Data Received"
            )
        if not isinstance(data, Event):
            raise PipelineError(
                f"function {function} in pipeline '{ctx.pipeline_id}'{separator} "
                "type received is not an Event"
            )
        return data

    def log_event_details(self, ctx: Any, data: Any) -> tuple[bool, Any]:
        """Log the event and its readings, then pass the event on."""
        log = ctx.logger
        log.debug("LogEventDetails called in pipeline '%s'", ctx.pipeline_id)
        event = self._require_event(ctx, data, "LogEventDetails", ",")

        log.info(
            "Event received in pipeline '%s': ID=%s, Device=%s, and ReadingCount=%d",
            ctx.pipeline_id,
            event.id,
            event.device_name,
            len(event.readings),
        )
        for number, reading in enumerate(event.readings, start=1):
            if reading.value_type.lower() == VALUE_TYPE_BINARY.lower():
                log.info(
                    "Reading #%d received in pipeline '%s' with ID=%s, Resource=%s, "
                    "ValueType=%s, MediaType=%s and BinaryValue of size=`%d`",
                    number,
                    ctx.pipeline_id,
                    reading.id,
                    reading.resource_name,
                    reading.value_type,
                    reading.media_type,
                    len(reading.binary_value),
                )
            else:
                log.info(
                    "Reading #%d received in pipeline '%s' with ID=%s, Resource=%s, "
                    "ValueType=%s, Value=`%s`",
                    number,
                    ctx.pipeline_id,
                    reading.id,
                    reading.resource_name,
                    reading.value_type,
                    reading.value,
                )
        return True, event

    def send_get_command(self, ctx: Any, data: Any) -> tuple[bool, Any]:
        """Issue the device's first GET command and pass on the event it returns."""
        log = ctx.logger
        log.debug("SendGetCommand function called in pipeline '%s'", ctx.pipeline_id)
        event = self._require_event(ctx, data, "SendGetCommand", ",")

        log.debug(
            "Issuing Command Query for device %s in pipeline '%s'",
            event.device_name,
            ctx.pipeline_id,
        )
        client = ctx.command_client
        try:
            commands = list(client.device_core_commands_by_device_name(event.device_name))
        except Exception as err:
            raise PipelineError(
                f"failed to get list of commands for {event.device_name} device: "
                f"{err} in pipeline '{ctx.pipeline_id}'"
            ) from err

        log.debug(
            "Device %s has %d commands to choose from. (in pipeline '%s')",
            event.device_name,
            len(commands),
            ctx.pipeline_id,
        )
        command_name = next((command.name for command in commands if command.get), "")
        if not command_name:
            raise PipelineError(
                f"failed to find a GET command for {event.device_name} device "
                f"in pipeline '{ctx.pipeline_id}'"
            )

        log.debug(
            "Issuing Command %s for device %s in in pipeline '%s'",
            command_name,
            event.device_name,
            ctx.pipeline_id,
        )
        try:
            new_event = client.issue_get_command_by_name(
                event.device_name, command_name, False, True
            )
        except Exception as err:
            raise PipelineError(
                f"failed to get Event for commandName {command_name} on "
                f"{event.device_name} device: {err} in pipeline '{ctx.pipeline_id}'"
            ) from err

        log.debug(
            "SendGetCommand successfully received new event from GET command %s "
            "on %s device in pipeline '%s'",
            command_name,
            event.device_name,
            ctx.pipeline_id,
        )
        log.debug("Event returned is %r", new_event)
        return True, new_event

    def convert_event_to_xml(self, ctx: Any, data: Any) -> tuple[bool, Any]:
        """Convert the event to XML and count the conversion."""
        log = ctx.logger
        log.debug("ConvertEventToXML called in pipeline '%s'", ctx.pipeline_id)
        event = self._require_event(ctx, data, "ConvertEventToXML", ":")

        try:
            xml = event.to_xml()
        except Exception as err:
            raise PipelineError(
                f"function ConvertEventToXML in pipeline '{ctx.pipeline_id}': "
                "failed to convert event to XML"
            ) from err

        log.debug("Event converted to XML in pipeline '%s': %s", ctx.pipeline_id, xml)

        if self.events_converted_to_xml is None:
            self.events_converted_to_xml = Counter()
            manager = getattr(ctx, "metrics_manager", None)
            try:
                if manager is None:
                    raise RuntimeError("metrics manager not available")
                manager.register(EVENTS_CONVERTED_TO_XML_NAME, self.events_converted_to_xml, None)
            except Exception as err:
                log.error(
                    "Unable to register metric %s. Collection will continue, "
                    "but metric will not be reported: %s",
                    EVENTS_CONVERTED_TO_XML_NAME,
                    err,
                )
        self.events_converted_to_xml.inc(1)
        return True, xml

    def output_xml(self, ctx: Any, data: Any) -> tuple[bool, Any]:
        """Set the XML as the response and end the pipeline."""
        log = ctx.logger
        log.debug("OutputXML called in pipeline '%s'", ctx.pipeline_id)
        if data is None:
            raise PipelineError(
                f"function OutputXML in pipeline '{ctx.pipeline_id}': No Data Received"
            )
        if not isinstance(data, str):
            raise PipelineError(
                f"function ConvertEventToXML in pipeline '{ctx.pipeline_id}': "
                "type received is not an string"
            )

        log.debug("Outputting the following XML in pipeline '%s': %s", ctx.pipeline_id, data)
        ctx.response_data = data.encode("utf-8")
        ctx.response_content_type = CONTENT_TYPE_XML
        return False, None