"""
Helpers for exercising the library without a live server.

`FakeNexus` stands in for the HTTP transport: it keeps an in-memory store of scripts behind the
scripting console endpoints, and serves any other endpoint from callables registered in `routes`.
Error responses are raised the same way the real transport raises them, so status code mappings and
`body_as_error` behave as they would against a server.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote
from unittest.mock import Mock

from nexuslib.plumbing import scripting
from nexuslib.plumbing.client import Config, Nexus
from nexuslib.plumbing.common import HTTPError
from nexuslib.plumbing.scripting import Script


Route = Callable[[Optional[Dict[str, str]], Optional[bytes], Any], Any]


class ScriptFailure(Exception):
    """
    Raised by a fake script runner to simulate an exception in the scripting engine.
    """


def response(status: int = 200, content: bytes = b"") -> Mock:
    """
    Create a mock `requests` response.
    """
    return Mock(status_code=status, content=content, text=content.decode("utf-8"))


class FakeNexus(Nexus):

    def __init__(self, runner: Optional[Callable[[Script, Any], str]] = None):
        super().__init__(Config(host="http://nexus.test"), Mock())
        self.scripts: Dict[str, Script] = {}
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.calls: List[Tuple[str, str]] = []
        self.runner = runner or (lambda script, args: "ok")

    def count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))

    def request(self, method, path, params=None, data=None, content_type="application/json",
                files=None, errors=None, body_as_error=False):
        self.calls.append((method, path))
        if path == scripting.ENDPOINT or path.startswith(scripting.ENDPOINT + "/"):
            status, body = self._script(method, path[len(scripting.ENDPOINT) + 1:], data)
        else:
            status, body = 200, self.routes[(method, path)](params, data, files)
            if isinstance(body, tuple):
                status, body = body
        if not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        if status >= 300:
            if body_as_error:
                raise HTTPError(body.decode("utf-8"), status, body)
            if errors and status in errors:
                raise errors[status]
            raise HTTPError("{} {} returned a status code of {}".format(method, path, status),
                            status, body)
        return body

    def _script(self, method: str, name: str, data: Optional[bytes]) -> Tuple[int, Any]:
        if not name:
            if method == "GET":
                return 200, [script._asdict() for script in self.scripts.values()]
            script = Script(**json.loads(data.decode("utf-8")))
            if script.name in self.scripts:
                return 500, b"Internal Server Error"
            self.scripts[script.name] = script
            return 204, b""
        if name.endswith("/run"):
            name = unquote(name[:-len("/run")])
            if name not in self.scripts:
                return 404, b""
            args = json.loads(data.decode("utf-8")) if data else None
            try:
                result = self.runner(self.scripts[name], args)
            except ScriptFailure as ex:
                return 500, {"name": name, "result": str(ex)}
            return 200, {"name": name, "result": result}
        name = unquote(name)
        if name not in self.scripts:
            return 404, b""
        if method == "GET":
            return 200, self.scripts[name]._asdict()
        elif method == "PUT":
            self.scripts[name] = Script(**json.loads(data.decode("utf-8")))
        elif method == "DELETE":
            del self.scripts[name]
        return 204, b""
