"""
HTTP transport and connection settings for a Nexus server.
"""

import configparser
import json
import logging
import os
import os.path
from typing import Any, Mapping, NamedTuple, Optional

from requests import Session as RequestsSession

from .common import HTTPError, ProtocolError


LOG = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.expanduser("~/.config/nexuslib.ini")

ErrorMap = Mapping[int, Exception]
"""
Mapping of HTTP status codes to the exceptions that should be raised for them.
"""


class Config(NamedTuple):
    """
    Location and credentials of a Nexus server.  Read-only once created.
    """

    host: str = "http://localhost:8081"
    username: str = "admin"
    password: str = "admin123"
    timeout: float = 30.0


def load_config(path: Optional[str] = None, **overrides: Any) -> Config:
    """
    Build connection settings from an INI file and the environment.

    The file is taken from `path`, else `$NEXUSLIB_CONFIG`, else `~/.config/nexuslib.ini` if it
    exists, and should contain a `[nexus]` section with any of the `Config` field names.  The
    environment variables `NEXUS_HOST`, `NEXUS_USERNAME`, `NEXUS_PASSWORD` and `NEXUS_TIMEOUT`
    take precedence over the file, and any non-`None` keyword overrides take precedence over both.
    """
    values = Config()._asdict()
    path = path or os.getenv("NEXUSLIB_CONFIG")
    if not path and os.path.exists(DEFAULT_CONFIG_PATH):
        path = DEFAULT_CONFIG_PATH
    if path:
        parser = configparser.ConfigParser()
        if not parser.read(path):
            raise FileNotFoundError(path)
        if parser.has_section("nexus"):
            for key in values:
                if parser.has_option("nexus", key):
                    values[key] = parser.get("nexus", key)
    for key in values:
        env = os.getenv("NEXUS_{}".format(key.upper()))
        if env:
            values[key] = env
    values.update({key: value for key, value in overrides.items() if value is not None})
    values["host"] = values["host"].rstrip("/")
    values["timeout"] = float(values["timeout"])
    return Config(**values)


class Nexus:
    """
    Authenticated HTTP transport for a single Nexus server.

    Each request carries basic authentication built from the `Config`; no other state is held
    between requests, so one instance can be shared by any number of callers.
    """

    def __init__(self, config: Config, session: Optional[RequestsSession] = None):
        self.config = config
        self._session = session or RequestsSession()

    def __repr__(self):
        return "<{}: {}@{}>".format(self.__class__.__name__, self.config.username,
                                    self.config.host)

    @property
    def host(self) -> str:
        return self.config.host

    def url(self, path: str) -> str:
        """
        Expand a relative endpoint into a full URL on the server.
        """
        return "{}/{}".format(self.config.host, path.lstrip("/"))

    def request(self, method: str, path: str, params: Optional[Mapping[str, str]] = None,
                data: Optional[bytes] = None, content_type: Optional[str] = "application/json",
                files: Optional[Mapping[str, Any]] = None, errors: Optional[ErrorMap] = None,
                body_as_error: bool = False) -> bytes:
        """
        Make a request against the server, and return the raw response body.

        Unsuccessful responses raise the exception listed for their status code in `errors`, or an
        `HTTPError` naming the request.  If `body_as_error` is set, the response body is always
        used as the message of the `HTTPError` instead, for endpoints that report failures in the
        body itself.

        Connection failures are raised as-is by `requests`.
        """
        headers = {}
        # Multipart bodies need their generated boundary in the header.
        if content_type and not files:
            headers["Content-Type"] = content_type
        url = self.url(path)
        LOG.debug("Request: %s %s %r", method, url, params)
        resp = self._session.request(method, url, params=params, data=data, files=files,
                                     headers=headers, timeout=self.config.timeout,
                                     auth=(self.config.username, self.config.password))
        if resp.status_code >= 300:
            if body_as_error:
                raise HTTPError(resp.text, resp.status_code, resp.content)
            if errors and resp.status_code in errors:
                raise errors[resp.status_code]
            raise HTTPError("{} {} returned a status code of {}"
                            .format(method, url, resp.status_code), resp.status_code, resp.content)
        return resp.content

    def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Make a request with `request`, and decode the response body as JSON.
        """
        body = self.request(method, path, **kwargs)
        try:
            return json.loads(body.decode("utf-8"))
        except ValueError as ex:
            raise ProtocolError("{} {} returned a malformed body: {}"
                                .format(method, path, ex)) from ex

    def status(self) -> None:
        """
        Ping the server, to check that it's able to serve requests and the credentials are valid.
        """
        url = self.url("service/rest/v1/status")
        resp = self._session.get(url, timeout=self.config.timeout,
                                 auth=(self.config.username, self.config.password))
        if resp.status_code != 200:
            raise HTTPError("Credentials are invalid or Nexus is unable to serve requests",
                            resp.status_code, resp.content)


def connect(config: Optional[Config] = None) -> Nexus:
    """
    Create a client for the configured server, and check that it's reachable.
    """
    nexus = Nexus(config or load_config())
    nexus.status()
    LOG.debug("Connected: %r", nexus)
    return nexus
