"""
Groovy scripts stored and run through the Nexus scripting console.

Nexus doesn't expose everything over its REST API, so the gaps are filled by storing a script on
the server under a fixed name and running it on demand.  `run_script` takes care of creating or
refreshing the stored copy first, whilst `execute_ephemeral` covers one-off scripts that shouldn't
be left behind.

Arguments to a script can be any JSON-serialisable value, and are available as a string `args`
inside the script:

    import groovy.json.JsonSlurper
    parsed_args = new JsonSlurper().parseText(args)
    return parsed_args.name
"""

from contextlib import contextmanager
import json
import logging
from typing import Any, Iterator, List, NamedTuple, Optional
from urllib.parse import quote
import uuid

from .client import Nexus
from .common import (AlreadyExists, Collect, ExecutionError, HTTPError, InvalidArgument, NexusError,
                     NotFound, ProtocolError, Result, State, Unset)


LOG = logging.getLogger(__name__)

GROOVY = "groovy"
"""
Script type tag for Groovy, the only language supported by the scripting console.
"""

ENDPOINT = "service/rest/v1/script"


class Script(NamedTuple):
    """
    Named script as stored on the server.
    """

    name: str
    content: str
    type: str = GROOVY

    @classmethod
    def from_json(cls, data: Any) -> "Script":
        try:
            return cls(data["name"], data["content"], data.get("type") or GROOVY)
        except (AttributeError, KeyError, TypeError) as ex:
            raise ProtocolError("Malformed script: {!r}".format(data)) from ex


class ScriptResult(NamedTuple):
    """
    Output of a single script run, with the script's return value converted to a string.
    """

    name: str
    result: str


def _parse_result(body: bytes) -> ScriptResult:
    data = json.loads(body.decode("utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("result"), str):
        raise ValueError("Not a script result: {!r}".format(data))
    return ScriptResult(data.get("name"), data["result"])


def _validate(script: Script) -> None:
    if not script.name or not script.content:
        raise InvalidArgument("Script must have a name and content")


def _payload(script: Script) -> bytes:
    return json.dumps(script._asdict()).encode("utf-8")


def _path(name: str, action: Optional[str] = None) -> str:
    # Names may contain characters that are reserved in a URL path.
    path = "{}/{}".format(ENDPOINT, quote(name, safe=""))
    return "{}/{}".format(path, action) if action else path


def get_script(nexus: Nexus, name: str) -> Script:
    """
    Fetch a stored script by name.
    """
    data = nexus.request_json("GET", _path(name),
                              errors={404: NotFound("Script {!r} does not exist".format(name))})
    return Script.from_json(data)


def list_scripts(nexus: Nexus) -> List[Script]:
    """
    Fetch all scripts stored on the server.
    """
    data = nexus.request_json("GET", ENDPOINT)
    if not isinstance(data, list):
        raise ProtocolError("Malformed script listing: {!r}".format(data))
    return [Script.from_json(item) for item in data]


def create_script(nexus: Nexus, script: Script) -> Result[Script]:
    """
    Store a new script.  Use `update_script` to replace an existing one.
    """
    _validate(script)
    error = AlreadyExists("Script {!r} already exists, use update_script instead"
                          .format(script.name))
    # Nexus reports a name clash as an internal server error.
    nexus.request("POST", ENDPOINT, data=_payload(script), errors={500: error})
    LOG.debug("Created script: %r", script.name)
    return Result(State.created, script)


def update_script(nexus: Nexus, script: Script) -> Result[Script]:
    """
    Replace the content of an existing script of the same name.
    """
    _validate(script)
    error = NotFound("Script {!r} does not exist".format(script.name))
    nexus.request("PUT", _path(script.name), data=_payload(script), errors={404: error})
    LOG.debug("Updated script: %r", script.name)
    return Result(State.success, script)


def delete_script(nexus: Nexus, name: str) -> Result[Unset]:
    """
    Remove a stored script.
    """
    nexus.request("DELETE", _path(name),
                  errors={404: NotFound("Script {!r} does not exist".format(name))})
    LOG.debug("Deleted script: %r", name)
    return Result(State.success)


def execute_script(nexus: Nexus, name: str, args: Any = None) -> ScriptResult:
    """
    Run a stored script by name, passing `args` to it JSON-encoded (or nothing if `None`).

    If the script raises an exception, the server returns a result containing the exception text
    instead, which is raised here as an `ExecutionError`.
    """
    payload = None if args is None else json.dumps(args).encode("utf-8")
    try:
        body = nexus.request("POST", _path(name, "run"), data=payload,
                             content_type="text/plain", body_as_error=True)
    except HTTPError as ex:
        # A missing script is reported with an empty body.
        if ex.status == 404:
            raise NotFound("Script {!r} does not exist".format(name)) from ex
        try:
            failure = _parse_result(ex.body)
        except ValueError as parse_ex:
            raise ProtocolError("Script {!r} failed with status {}: {}"
                                .format(name, ex.status, parse_ex)) from parse_ex
        raise ExecutionError(failure.result, name) from ex
    try:
        return _parse_result(body)
    except ValueError as ex:
        raise ProtocolError("Script {!r} returned a malformed result: {}".format(name, ex)) from ex


@Result.collect_value
def ensure_script(nexus: Nexus, script: Script) -> Collect[Script]:
    """
    Store a script, or replace the content of an existing script if it doesn't match exactly.
    """
    try:
        current = get_script(nexus, script.name)
    except NotFound:
        yield create_script(nexus, script)
    else:
        if current.content != script.content:
            yield update_script(nexus, script)
    return script


def run_script(nexus: Nexus, script: Script, args: Any = None) -> ScriptResult:
    """
    Make sure the server's copy of a script is up-to-date, then run it.
    """
    result = ensure_script(nexus, script)
    if result:
        LOG.debug("Reconciled script: %s", result)
    return execute_script(nexus, script.name, args)


@contextmanager
def ephemeral_script(nexus: Nexus, content: str) -> Iterator[Script]:
    """
    Context manager: store a script under a random name, and remove it again on exit:

        with ephemeral_script(nexus, "return 'Hello World'") as script:
            execute_script(nexus, script.name)

    The script is removed however the block exits.  Failing to remove it is only logged, so that
    any error from the block itself isn't lost.
    """
    script = Script(str(uuid.uuid4()), content)
    create_script(nexus, script)
    try:
        yield script
    finally:
        try:
            delete_script(nexus, script.name)
        except (NexusError, OSError):
            LOG.debug("Failed to delete ephemeral script: %r", script.name, exc_info=True)


def execute_ephemeral(nexus: Nexus, content: str, args: Any = None) -> ScriptResult:
    """
    Run a one-off script without leaving it stored on the server.
    """
    with ephemeral_script(nexus, content) as script:
        return execute_script(nexus, script.name, args)
