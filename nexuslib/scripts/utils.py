"""
Helpers for converting methods into scripts, and filling in arguments with a server connection.
"""

from functools import wraps
from inspect import cleandoc, signature
import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional, Union

from docopt import docopt
from requests import RequestException

from ..plumbing.client import connect, load_config, Nexus
from ..plumbing.common import NexusError


DocOptArgs = Dict[str, Union[bool, str, List[str], None]]


ENTRYPOINTS: List[str] = []


def _client(opts: DocOptArgs) -> Nexus:
    config = load_config(host=opts.pop("--host", None),
                         username=opts.pop("--username", None),
                         password=opts.pop("--password", None))
    return connect(config)


def entrypoint(fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to make an entrypoint out of a generic function.

    This uses `docopt` to parse arguments according to the method docstring, and will be formatted
    with `{script}` set to the script name.  At minimum, it should contain `Usage: {script}`.

    Functions may optionally accept arguments, but they must be annotated with a recognised type in
    order to be filled in:

    - `DocOptArgs` (a `dict` of input parameters parsed from the usage line)
    - `Nexus` (a client connected using the `--host`, `--username` and `--password` options, falling
      back to the config file and environment)

    An example function:

        @entrypoint
        def drop(opts: DocOptArgs, nexus: Nexus):
            \"""
            Delete a blob store.

            Usage: {script} NAME
            \"""

    Failed requests are reported on stderr, and exit with status 2.
    """
    label = "nexuslib-{}-{}".format(fn.__module__.rsplit(".", 1)[-1],
                                    fn.__qualname__.rstrip("_")).replace("_", "-")

    @wraps(fn)
    def wrap(opts: Optional[DocOptArgs] = None):
        extra: Dict[str, Any] = {}
        script = "{} [--debug] [--host=URL] [--username=USER] [--password=PASS]".format(label)
        if opts is None:
            doc = cleandoc(fn.__doc__.format(script=script))
            opts = docopt(doc)
        if opts.pop("--debug", False):
            logging.basicConfig(level=logging.DEBUG)
        try:
            for param in signature(fn).parameters.values():
                if param.annotation is DocOptArgs:
                    extra[param.name] = opts
                elif param.annotation is Nexus:
                    extra[param.name] = _client(opts)
                else:
                    raise RuntimeError("Bad parameter {!r} type {!r}"
                                       .format(param.name, param.annotation))
            return fn(**extra)
        except (NexusError, PermissionError, RequestException) as ex:
            error("Error: {}".format(ex), exit=2)
    wrap.__doc__ = wrap.__doc__.format(script=label)
    # Create a console script line for setup.
    target = "{}:{}".format(fn.__module__, fn.__qualname__)
    ENTRYPOINTS.append("{}={}".format(label, target))
    return wrap


def _jsonable(value: Any) -> Any:
    # Named tuples would otherwise be serialised as plain lists.
    if hasattr(value, "_asdict"):
        return {key: _jsonable(item) for key, item in value._asdict().items()}
    elif isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    elif isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    else:
        return value


def dump(value: Any) -> None:
    """
    Print a value, or list of records, as indented JSON.
    """
    print(json.dumps(_jsonable(value), indent=4))


def error(msg: Optional[str] = None, *, exit: Optional[int] = None, colour: Optional[str] = None):
    """
    Print an error message and/or exit.
    """
    if msg:
        colour = colour or ("1" if exit else "3")
        print("\033[9{}m{}\033[0m".format(colour, msg), file=sys.stderr)
    if exit is not None:
        sys.exit(exit)
