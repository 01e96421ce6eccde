"""
Component formats, and the fields each one expects when uploading.
"""

from typing import Any, List, NamedTuple, Optional

from .client import Nexus
from .common import NotFound, ProtocolError


class Field(NamedTuple):
    """
    Upload form field of a component or asset.
    """

    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    optional: bool = True
    group: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "Field":
        return cls(data["name"], data.get("type"), data.get("description"),
                   bool(data.get("optional", True)), data.get("group"))


class Format(NamedTuple):
    """
    Upload specification for a repository format, such as `maven2` or `raw`.
    """

    name: str
    multiple_upload: bool = False
    component_fields: Optional[List[Field]] = None
    asset_fields: Optional[List[Field]] = None

    @classmethod
    def from_json(cls, data: Any) -> "Format":
        try:
            return cls(data["format"], bool(data.get("multipleUpload")),
                       [Field.from_json(field) for field in data.get("componentFields") or ()],
                       [Field.from_json(field) for field in data.get("assetFields") or ()])
        except (AttributeError, KeyError, TypeError) as ex:
            raise ProtocolError("Malformed format: {!r}".format(data)) from ex

    @property
    def required_component_fields(self) -> List[str]:
        return [field.name for field in (self.component_fields or ()) if not field.optional]

    @property
    def required_asset_fields(self) -> List[str]:
        # The file itself is always supplied separately.
        return [field.name for field in (self.asset_fields or ())
                if not field.optional and field.name != "asset"]


def get_format(nexus: Nexus, name: str) -> Format:
    """
    Fetch the upload specification of a single format.
    """
    data = nexus.request_json("GET", "service/rest/v1/formats/{}/upload-specs".format(name),
                              errors={404: NotFound("The format {!r} does not exist"
                                                    .format(name))})
    return Format.from_json(data)


def list_formats(nexus: Nexus) -> List[Format]:
    """
    Fetch the upload specifications of all available formats.
    """
    data = nexus.request_json("GET", "service/rest/v1/formats/upload-specs")
    if not isinstance(data, list):
        raise ProtocolError("Malformed format listing: {!r}".format(data))
    return [Format.from_json(item) for item in data]
