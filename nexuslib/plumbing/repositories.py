"""
Repositories hosted by the server.
"""

from typing import Any, List, NamedTuple, Optional

from .client import Nexus
from .common import ProtocolError


class Repository(NamedTuple):

    name: str
    format: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "Repository":
        try:
            return cls(data["name"], data.get("format"), data.get("type"), data.get("url"))
        except (AttributeError, KeyError, TypeError) as ex:
            raise ProtocolError("Malformed repository: {!r}".format(data)) from ex


def list_repositories(nexus: Nexus) -> List[Repository]:
    """
    Fetch all repositories visible to the current user.
    """
    data = nexus.request_json("GET", "service/rest/v1/repositories")
    if not isinstance(data, list):
        raise ProtocolError("Malformed repository listing: {!r}".format(data))
    return [Repository.from_json(item) for item in data]
