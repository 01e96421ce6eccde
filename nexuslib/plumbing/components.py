"""
Components: versioned artifacts in a repository, each made up of one or more assets.
"""

import logging
import os.path
from typing import Any, BinaryIO, Dict, List, Mapping, NamedTuple, Optional, Sequence

from .assets import Asset
from .client import Nexus
from .common import InvalidArgument, NotFound, ProtocolError, Result, State, Unset
from .formats import get_format
from .pages import collect_items, HandlePage, Page, PageRequest, parse_page, traverse


LOG = logging.getLogger(__name__)


class Component(NamedTuple):

    id: str
    repository: Optional[str] = None
    format: Optional[str] = None
    group: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    assets: Optional[List[Asset]] = None

    @classmethod
    def from_json(cls, data: Any) -> "Component":
        try:
            return cls(data["id"], data.get("repository"), data.get("format"), data.get("group"),
                       data.get("name"), data.get("version"),
                       [Asset.from_json(asset) for asset in data.get("assets") or ()])
        except (AttributeError, KeyError, TypeError) as ex:
            raise ProtocolError("Malformed component: {!r}".format(data)) from ex


class UploadAsset(NamedTuple):
    """
    File to be uploaded as part of a component, with any format-specific asset fields (e.g.
    `extension` for Maven).
    """

    file: BinaryIO
    config: Optional[Mapping[str, str]] = None

    @property
    def filename(self) -> str:
        return os.path.basename(getattr(self.file, "name", "") or "asset")


def _errors(verb: str, component_id: str):
    return {403: PermissionError("Insufficient permissions to {} component {!r}"
                                 .format(verb, component_id)),
            404: NotFound("Component {!r} does not exist".format(component_id)),
            422: InvalidArgument("Malformed component ID: {!r}".format(component_id))}


def list_components(nexus: Nexus, request: PageRequest) -> Page[Component]:
    """
    Fetch a single page of components in the repository named by the request's scope.
    """
    if not request.scope:
        raise InvalidArgument("Repository is required to list components")
    params = {"repository": request.scope}
    if request.token is not None:
        params["continuationToken"] = request.token
    errors = {403: PermissionError("Insufficient permissions to list components in {!r}"
                                   .format(request.scope)),
              404: NotFound("Repository {!r} does not exist".format(request.scope))}
    data = nexus.request_json("GET", "service/rest/v1/components", params=params, errors=errors)
    return parse_page(data, Component.from_json)


def list_components_pages(nexus: Nexus, repository: str, handle_page: HandlePage) -> None:
    """
    Pass each page of components in a repository to a handler, see `traverse`.
    """
    traverse(PageRequest(repository), lambda request: list_components(nexus, request),
             handle_page)


def get_components(nexus: Nexus, repository: str) -> List[Component]:
    """
    Fetch all components in a repository.
    """
    return collect_items(PageRequest(repository),
                         lambda request: list_components(nexus, request))


def get_component(nexus: Nexus, component_id: str) -> Component:
    """
    Fetch a single component by its ID.
    """
    if not component_id:
        raise InvalidArgument("Component ID is required")
    data = nexus.request_json("GET", "service/rest/v1/components/{}".format(component_id),
                              errors=_errors("get", component_id))
    return Component.from_json(data)


def delete_component(nexus: Nexus, component_id: str) -> Result[Unset]:
    """
    Remove a component, and all of its assets, by its ID.
    """
    if not component_id:
        raise InvalidArgument("Component ID is required")
    nexus.request("DELETE", "service/rest/v1/components/{}".format(component_id),
                  errors=_errors("delete", component_id))
    LOG.debug("Deleted component: %r", component_id)
    return Result(State.success)


def _validate_upload(nexus: Nexus, kind: str, assets: Sequence[UploadAsset],
                     config: Mapping[str, str]) -> None:
    if not assets:
        raise InvalidArgument("At least one asset must be provided to upload a component")
    if not kind:
        raise InvalidArgument("Component type is required to upload a component")
    spec = get_format(nexus, kind)
    required = spec.required_component_fields
    if any(field not in config for field in required):
        raise InvalidArgument("{} requires the following component fields: {}"
                              .format(kind, ", ".join(required)))
    required = spec.required_asset_fields
    for asset in assets:
        if any(field not in (asset.config or {}) for field in required):
            raise InvalidArgument("{} requires the following asset fields: {}"
                                  .format(kind, ", ".join(required)))


def _upload_form(kind: str, assets: Sequence[UploadAsset],
                 config: Mapping[str, str]) -> Dict[str, Any]:
    form: Dict[str, Any] = {}
    for key, value in config.items():
        form["{}.{}".format(kind, key)] = (None, value)
    for i, asset in enumerate(assets):
        # A lone asset is unnumbered, multiple assets count up from zero.
        prefix = "{}.asset".format(kind) if len(assets) == 1 else "{}.asset{}".format(kind, i)
        form[prefix] = (asset.filename, asset.file)
        for key, value in (asset.config or {}).items():
            form["{}.{}".format(prefix, key)] = (None, value)
    return form


def upload_component(nexus: Nexus, repository: str, kind: str, assets: Sequence[UploadAsset],
                     config: Optional[Mapping[str, str]] = None) -> Result[Unset]:
    """
    Upload a new component to a repository.

    Component and asset fields are checked against the upload specification of the format `kind`
    before anything is sent.
    """
    if not repository:
        raise InvalidArgument("Repository is required to upload a component")
    config = config or {}
    _validate_upload(nexus, kind, assets, config)
    errors = {403: PermissionError("Insufficient permissions to upload component"),
              404: NotFound("Repository {!r} does not exist".format(repository))}
    nexus.request("POST", "service/rest/v1/components", params={"repository": repository},
                  files=_upload_form(kind, assets, config), errors=errors)
    LOG.debug("Uploaded component: %r %r", repository, [asset.filename for asset in assets])
    return Result(State.created)
