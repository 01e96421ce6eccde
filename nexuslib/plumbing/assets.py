"""
Assets: individual files stored in a repository.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional

from .client import Nexus
from .common import InvalidArgument, NotFound, ProtocolError, Result, State, Unset
from .pages import collect_items, HandlePage, Page, PageRequest, parse_page, traverse


LOG = logging.getLogger(__name__)


class Asset(NamedTuple):

    id: str
    path: Optional[str] = None
    download_url: Optional[str] = None
    repository: Optional[str] = None
    format: Optional[str] = None
    checksum: Optional[Dict[str, str]] = None

    @classmethod
    def from_json(cls, data: Any) -> "Asset":
        try:
            return cls(data["id"], data.get("path"), data.get("downloadUrl"),
                       data.get("repository"), data.get("format"), data.get("checksum") or {})
        except (AttributeError, KeyError, TypeError) as ex:
            raise ProtocolError("Malformed asset: {!r}".format(data)) from ex


def _errors(verb: str, asset_id: str):
    return {403: PermissionError("Insufficient permissions to {} asset {!r}"
                                 .format(verb, asset_id)),
            404: NotFound("Asset {!r} does not exist".format(asset_id)),
            422: InvalidArgument("Malformed asset ID: {!r}".format(asset_id))}


def list_assets(nexus: Nexus, request: PageRequest) -> Page[Asset]:
    """
    Fetch a single page of assets in the repository named by the request's scope.
    """
    if not request.scope:
        raise InvalidArgument("Repository is required to list assets")
    params = {"repository": request.scope}
    if request.token is not None:
        params["continuationToken"] = request.token
    errors = {403: PermissionError("Insufficient permissions to list assets in {!r}"
                                   .format(request.scope)),
              404: NotFound("Repository {!r} does not exist".format(request.scope))}
    data = nexus.request_json("GET", "service/rest/v1/assets", params=params, errors=errors)
    return parse_page(data, Asset.from_json)


def list_assets_pages(nexus: Nexus, repository: str, handle_page: HandlePage) -> None:
    """
    Pass each page of assets in a repository to a handler, see `traverse`:

        def handle(page, last):
            for asset in page.items:
                print(asset.path)
            return True

        list_assets_pages(nexus, "my-repo", handle)
    """
    traverse(PageRequest(repository), lambda request: list_assets(nexus, request), handle_page)


def get_assets(nexus: Nexus, repository: str) -> List[Asset]:
    """
    Fetch all assets in a repository.
    """
    return collect_items(PageRequest(repository), lambda request: list_assets(nexus, request))


def get_asset(nexus: Nexus, asset_id: str) -> Asset:
    """
    Fetch a single asset by its ID.
    """
    if not asset_id:
        raise InvalidArgument("Asset ID is required")
    data = nexus.request_json("GET", "service/rest/v1/assets/{}".format(asset_id),
                              errors=_errors("get", asset_id))
    return Asset.from_json(data)


def delete_asset(nexus: Nexus, asset_id: str) -> Result[Unset]:
    """
    Remove an asset by its ID.
    """
    if not asset_id:
        raise InvalidArgument("Asset ID is required")
    nexus.request("DELETE", "service/rest/v1/assets/{}".format(asset_id),
                  errors=_errors("delete", asset_id))
    LOG.debug("Deleted asset: %r", asset_id)
    return Result(State.success)


def download_asset(nexus: Nexus, asset: Asset) -> bytes:
    """
    Fetch the file content of an asset.
    """
    if not asset.download_url:
        raise InvalidArgument("Asset {!r} has no download URL".format(asset.id))
    path = asset.download_url
    if path.startswith(nexus.host):
        path = path[len(nexus.host):]
    return nexus.request("GET", path, errors={404: NotFound("Asset {!r} has no content"
                                                            .format(asset.id))})
