"""
Blob stores, the storage backends of repositories.

Nexus has no REST calls to manage blob stores, so these are implemented as stored Groovy scripts,
refreshed and run on demand with `run_script`.
"""

import json
from typing import Any, Dict, List, NamedTuple, Optional

from ..plumbing.client import Nexus
from ..plumbing.common import (AlreadyExists, InvalidArgument, NotFound, ProtocolError, Result,
                               State, Unset)
from ..plumbing.scripting import run_script, Script


BlobStore = Dict[str, Any]
"""
Properties of a blob store, as reported by the blob store manager.  The name and type are found
under `blobStoreConfiguration`.
"""

FILE = "File"
S3 = "S3"

LIST_SCRIPT = Script("nexuslib-list-blobstores", """
import groovy.json.JsonOutput

def res = []

blobStore.blobStoreManager.browse().each { store ->
    def storeMap = [:]
    store.getProperties().each { k, v ->
        if (v instanceof String || v instanceof Boolean || v instanceof Integer) {
            storeMap[k] = v
        } else if (v != null) {
            storeMap[k] = [:]
            v.getProperties().each { x, y ->
                if (y instanceof String || y instanceof Boolean || y instanceof Integer) {
                    storeMap[k][x] = y
                }
            }
        }
    }
    res << storeMap
}
return JsonOutput.toJson(res)
""")

CREATE_SCRIPT = Script("nexuslib-create-blobstore", """
import groovy.json.JsonSlurper

parsed_args = new JsonSlurper().parseText(args)
existingBlobStore = blobStore.getBlobStoreManager().get(parsed_args.name)
if (existingBlobStore == null) {
    if (parsed_args.type == "S3") {
        blobStore.createS3BlobStore(parsed_args.name, parsed_args.config)
    } else {
        blobStore.createFileBlobStore(parsed_args.name, parsed_args.path)
    }
    msg = "created"
} else {
    msg = "exists"
}
return msg
""")

DELETE_SCRIPT = Script("nexuslib-delete-blobstore", """
import groovy.json.JsonSlurper

parsed_args = new JsonSlurper().parseText(args)
existingBlobStore = blobStore.getBlobStoreManager().get(parsed_args.name)
if (existingBlobStore != null) {
    if (parsed_args.force) {
        blobStore.getBlobStoreManager().forceDelete(parsed_args.name)
    } else {
        blobStore.getBlobStoreManager().delete(parsed_args.name)
    }
    msg = "deleted"
} else {
    msg = "not exists"
}
return msg
""")


class S3Config(NamedTuple):
    """
    Bucket settings for an S3-backed blob store.  An `expiration` of -1 keeps deleted blobs in the
    bucket indefinitely, otherwise it's the number of days before they're removed.
    """

    bucket: str
    prefix: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    assume_role: Optional[str] = None
    region: Optional[str] = None
    endpoint: Optional[str] = None
    expiration: int = -1
    signer_type: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        keys = {"access_key_id": "accessKeyId", "secret_access_key": "secretAccessKey",
                "session_token": "sessionToken", "assume_role": "assumeRole",
                "signer_type": "signerType"}
        return {keys.get(key, key): value for key, value in self._asdict().items()
                if value is not None}


class QuotaStatus(NamedTuple):

    blob_store_name: str
    is_violation: bool
    message: Optional[str] = None


def blobstore_name(store: BlobStore) -> Optional[str]:
    """
    Extract the name of a blob store from its properties.
    """
    config = store.get("blobStoreConfiguration") or {}
    return config.get("name")


def list_blobstores(nexus: Nexus) -> List[BlobStore]:
    """
    Fetch the properties of all blob stores.
    """
    res = run_script(nexus, LIST_SCRIPT)
    try:
        stores = json.loads(res.result)
    except ValueError as ex:
        raise ProtocolError("Malformed blob store listing: {}".format(ex)) from ex
    if not isinstance(stores, list):
        raise ProtocolError("Malformed blob store listing: {!r}".format(stores))
    return stores


def get_blobstore(nexus: Nexus, name: str) -> BlobStore:
    """
    Fetch the properties of a single blob store by name.
    """
    for store in list_blobstores(nexus):
        if blobstore_name(store) == name:
            return store
    raise NotFound("Blob store {!r} does not exist".format(name))


def _create_args(name: str, kind: str, path: Optional[str],
                 s3: Optional[S3Config]) -> Dict[str, Any]:
    if not name:
        raise InvalidArgument("Blob store name is required")
    for known in (FILE, S3):
        if kind.lower() == known.lower():
            kind = known
            break
    else:
        raise InvalidArgument("Unknown blob store type {!r}".format(kind))
    if kind == S3 and not (s3 and s3.bucket):
        raise InvalidArgument("S3 blob store {!r} requires a bucket".format(name))
    # File stores default to a directory named after the store.
    return {"name": name, "type": kind, "path": path or name,
            "config": s3.to_json() if s3 else None}


def create_blobstore(nexus: Nexus, name: str, type: str = FILE, path: Optional[str] = None,
                     s3: Optional[S3Config] = None) -> Result[BlobStore]:
    """
    Create a new blob store, either a directory on the server or an S3 bucket.
    """
    args = _create_args(name, type, path, s3)
    res = run_script(nexus, CREATE_SCRIPT, args)
    if res.result == "exists":
        raise AlreadyExists("Blob store {!r} already exists".format(name))
    return Result(State.created, get_blobstore(nexus, name))


def ensure_blobstore(nexus: Nexus, name: str, type: str = FILE, path: Optional[str] = None,
                     s3: Optional[S3Config] = None) -> Result[BlobStore]:
    """
    Create a new blob store if one of the given name doesn't already exist.

    An existing store is left as-is, even if its settings don't match.
    """
    args = _create_args(name, type, path, s3)
    res = run_script(nexus, CREATE_SCRIPT, args)
    state = State.unchanged if res.result == "exists" else State.created
    return Result(state, get_blobstore(nexus, name))


def delete_blobstore(nexus: Nexus, name: str, force: bool = False) -> Result[Unset]:
    """
    Remove a blob store.  Stores still used by repositories can only be removed with `force`.
    """
    if not name:
        raise InvalidArgument("Blob store name is required")
    res = run_script(nexus, DELETE_SCRIPT, {"name": name, "force": force})
    if res.result == "not exists":
        raise NotFound("Blob store {!r} does not exist".format(name))
    return Result(State.success)


def get_quota_status(nexus: Nexus, name: str) -> QuotaStatus:
    """
    Check whether a blob store is exceeding its configured quota.
    """
    data = nexus.request_json("GET", "service/rest/v1/blobstores/{}/quota-status".format(name),
                              errors={404: NotFound("No quota status for blob store {!r}"
                                                    .format(name))})
    try:
        return QuotaStatus(data.get("blobStoreName") or name, bool(data["isViolation"]),
                           data.get("message"))
    except (AttributeError, KeyError, TypeError) as ex:
        raise ProtocolError("Malformed quota status: {!r}".format(data)) from ex
