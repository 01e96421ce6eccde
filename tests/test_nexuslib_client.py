import os
import tempfile
import unittest
from unittest.mock import Mock, patch

from requests import ConnectionError as RequestsConnectionError

from nexuslib.plumbing.client import Config, connect, load_config, Nexus
from nexuslib.plumbing.common import HTTPError, NotFound, ProtocolError

from .utils import response


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tempdir.name, "nexuslib.ini")
        env = {key: value for key, value in os.environ.items()
               if not key.startswith(("NEXUS_", "NEXUSLIB_"))}
        self.env = patch.dict(os.environ, env, clear=True)
        self.env.start()

    def tearDown(self):
        self.env.stop()
        self.tempdir.cleanup()

    def write(self, text: str):
        with open(self.path, "w") as f:
            f.write(text)

    def test_defaults(self):
        with patch("nexuslib.plumbing.client.DEFAULT_CONFIG_PATH", self.path):
            self.assertEqual(load_config(), Config())

    def test_file(self):
        self.write("[nexus]\nhost = https://nexus.example/\nusername = deploy\ntimeout = 5\n")
        config = load_config(self.path)
        self.assertEqual(config.host, "https://nexus.example")
        self.assertEqual(config.username, "deploy")
        self.assertEqual(config.password, "admin123")
        self.assertEqual(config.timeout, 5.0)

    def test_file_from_env(self):
        self.write("[nexus]\nusername = deploy\n")
        os.environ["NEXUSLIB_CONFIG"] = self.path
        self.assertEqual(load_config().username, "deploy")

    def test_file_missing(self):
        with self.assertRaises(FileNotFoundError):
            load_config(self.path)

    def test_env_over_file(self):
        self.write("[nexus]\nusername = deploy\npassword = file\n")
        os.environ["NEXUS_PASSWORD"] = "env"
        config = load_config(self.path)
        self.assertEqual(config.username, "deploy")
        self.assertEqual(config.password, "env")

    def test_overrides(self):
        os.environ["NEXUS_HOST"] = "http://env"
        with patch("nexuslib.plumbing.client.DEFAULT_CONFIG_PATH", self.path):
            config = load_config(host="http://arg", username=None)
        self.assertEqual(config.host, "http://arg")
        self.assertEqual(config.username, "admin")


class TestNexus(unittest.TestCase):

    def setUp(self):
        self.session = Mock()
        self.nexus = Nexus(Config(host="http://nexus.test", username="user", password="pass",
                                  timeout=10), self.session)

    def test_url(self):
        self.assertEqual(self.nexus.url("/service/rest/v1/assets"),
                         "http://nexus.test/service/rest/v1/assets")

    def test_request(self):
        self.session.request.return_value = response(200, b"body")
        body = self.nexus.request("GET", "service/rest/v1/assets", params={"repository": "r"})
        self.assertEqual(body, b"body")
        self.session.request.assert_called_once_with(
            "GET", "http://nexus.test/service/rest/v1/assets", params={"repository": "r"},
            data=None, files=None, headers={"Content-Type": "application/json"}, timeout=10,
            auth=("user", "pass"))

    def test_request_content_type(self):
        self.session.request.return_value = response(200)
        self.nexus.request("POST", "run", data=b"{}", content_type="text/plain")
        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs["headers"], {"Content-Type": "text/plain"})

    def test_request_files_no_content_type(self):
        self.session.request.return_value = response(204)
        self.nexus.request("POST", "upload", files={"raw.asset": ("a.txt", b"a")})
        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs["headers"], {})

    def test_error_mapped(self):
        self.session.request.return_value = response(404)
        with self.assertRaises(NotFound) as ctx:
            self.nexus.request("GET", "thing", errors={404: NotFound("No thing")})
        self.assertEqual(str(ctx.exception), "No thing")

    def test_error_unmapped(self):
        self.session.request.return_value = response(502, b"bad gateway")
        with self.assertRaises(HTTPError) as ctx:
            self.nexus.request("GET", "thing", errors={404: NotFound("No thing")})
        self.assertEqual(ctx.exception.status, 502)
        self.assertEqual(str(ctx.exception),
                         "GET http://nexus.test/thing returned a status code of 502")

    def test_error_body(self):
        self.session.request.return_value = response(500, b'{"result": "boom"}')
        with self.assertRaises(HTTPError) as ctx:
            self.nexus.request("POST", "thing", errors={500: NotFound("ignored")},
                               body_as_error=True)
        self.assertEqual(str(ctx.exception), '{"result": "boom"}')
        self.assertEqual(ctx.exception.body, b'{"result": "boom"}')

    def test_redirect_is_error(self):
        self.session.request.return_value = response(302)
        with self.assertRaises(HTTPError):
            self.nexus.request("GET", "thing")

    def test_transport_error_passes_through(self):
        self.session.request.side_effect = RequestsConnectionError("refused")
        with self.assertRaises(RequestsConnectionError):
            self.nexus.request("GET", "thing")

    def test_request_json(self):
        self.session.request.return_value = response(200, b'[{"name": "maven-releases"}]')
        self.assertEqual(self.nexus.request_json("GET", "repositories"),
                         [{"name": "maven-releases"}])

    def test_request_json_malformed(self):
        self.session.request.return_value = response(200, b"<html>")
        with self.assertRaises(ProtocolError):
            self.nexus.request_json("GET", "repositories")

    def test_status_ok(self):
        self.session.get.return_value = response(200)
        self.nexus.status()
        self.session.get.assert_called_once_with("http://nexus.test/service/rest/v1/status",
                                                 timeout=10, auth=("user", "pass"))

    def test_status_failed(self):
        self.session.get.return_value = response(401)
        with self.assertRaises(HTTPError) as ctx:
            self.nexus.status()
        self.assertEqual(str(ctx.exception),
                         "Credentials are invalid or Nexus is unable to serve requests")

    @patch("nexuslib.plumbing.client.Nexus.status")
    def test_connect(self, status: Mock):
        nexus = connect(Config(host="http://nexus.test"))
        status.assert_called_once_with()
        self.assertEqual(nexus.host, "http://nexus.test")


if __name__ == "__main__":
    unittest.main()
