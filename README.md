# edgeapp

Building blocks for an edge application service that processes device
events in pipelines. The package has no runtime dependencies.

## Modules

### `edgeapp.config`

- `HostInfo`: `host`, `port` and `protocol` of an external service.
- `AppCustomConfig`: `resource_names`, `some_value` and `some_service`
  (a `HostInfo`). `validate()` raises `ConfigValidationError` (a
  `ValueError`) when `some_value` is not greater than zero, or when
  `some_service` is left at its empty default.
- `ServiceConfig`: holds the `app_custom` section.
  `update_from_raw(raw_config)` copies every field of another
  `ServiceConfig` into this one and returns `True`; given anything else it
  changes nothing and returns `False`.

### `edgeapp.sample`

- `Event` and `Reading`: an event from a device source, with an id and an
  origin timestamp in nanoseconds generated by default, a list of readings
  and a dict of tags.
  - `Event.add_simple_reading(resource_name, value_type, value)` appends a
    reading and returns it. The value is checked against the value type
    (`"Bool"`, `"String"`, `"Int8"` … `"Int64"`, `"Uint8"` … `"Uint64"`,
    `"Float32"`, `"Float64"`); integers must fit the type's range. A
    mismatch or an unknown type raises `ValueError`.
  - `Event.to_xml()` renders the event, its readings and its tags as an XML
    string. Binary readings are written base64-encoded with their media type.
- `CoreCommand`: a command a device offers, with `name`, `get`, `set`,
  `path` and `url`.
- `Counter`: a metric with `count` and `inc(amount=1)`.
- `Sample`: pipeline functions. Each takes a context and the data from the
  previous step and returns a pair `(continue_pipeline, result)`. When a
  function cannot do its work it raises `PipelineError`, whose message names
  the function and the pipeline.
  - `log_event_details` logs the event and each reading, and passes the event on.
  - `send_get_command` asks the command client for the device's commands,
    issues the first one that supports GET, and passes on the event it
    returns. It raises `PipelineError` when the query fails, when no GET
    command exists, or when the command fails.
  - `convert_event_to_xml` passes on `event.to_xml()` and counts the
    conversion in a `Counter`, registered under the name
    `EventsConvertedToXML` with the context's metrics manager on first use
    (a missing manager or a failed registration is logged; counting goes on).
  - `output_xml` stores the XML, UTF-8 encoded, as the context's
    `response_data`, sets `response_content_type` to `application/xml`, and
    ends the pipeline by returning `(False, None)`.

  The context is any object with `logger`, `pipeline_id`, `command_client`,
  `metrics_manager`, `response_data` and `response_content_type`. The
  command client must offer `device_core_commands_by_device_name(device_name)`,
  returning an iterable of `CoreCommand`, and
  `issue_get_command_by_name(device_name, command_name, push_event, return_event)`,
  returning the new event; both report failure by raising.

### `edgeapp.app`

`App.create_and_run_app_service(service_key, new_service_factory)` calls the
factory with the key; a factory result of `None` means failure. It then, in
order:

1. reads the `DeviceNames` app setting;
2. loads the `AppCustom` section into a fresh `ServiceConfig` and validates it;
3. listens for changes to that section with `process_config_updates`;
4. sets the default pipeline: a filter that passes only events from the
   named devices (all events if the list is empty), then
   `log_event_details`, `convert_event_to_xml`, `output_xml`;
5. adds the `Floats` pipeline for
   `events/device/device-virtual/+/Random-Float-Device/#` and the `Int32s`
   pipeline (which also runs `send_get_command`) for
   `events/device/device-virtual/+/+/Int32`;
6. runs the service.

It returns `0` on success, or logs the reason and returns `-1` at the first
step that raises. The service object must provide `logger`,
`get_app_setting_strings`, `load_custom_config`,
`listen_for_custom_config_changes`, `set_default_functions_pipeline`,
`add_functions_pipeline_for_topics` and `make_it_run`.

`App.process_config_updates(raw_writable_config)` replaces the current
`AppCustomConfig` with the given one and logs which of its values changed,
or that nothing changed; anything other than an `AppCustomConfig` is logged
as an error and ignored.

## Example

```python
from edgeapp.sample import Event

event = Event("MyProfile", "MyDevice", "MySource")
event.add_simple_reading("MyResource", "Int32", 1234)
event.tags["WhereAmI"] = "NotKansas"
print(event.to_xml())
```

```python
from edgeapp.config import AppCustomConfig, ConfigValidationError

try:
    AppCustomConfig().validate()
except ConfigValidationError as err:
    print(f"configuration rejected: {err}")
```

## What this package does not do

It provides no application service of its own: no message bus or HTTP
trigger, no configuration loading, no command service client and no
metrics manager. These are supplied by the caller through the service
factory and the pipeline context. There is no command-line program.

## Testing

The tests use pytest, available through the `test` extra.