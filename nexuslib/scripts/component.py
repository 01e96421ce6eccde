"""
Scripts to inspect and upload components.
"""

from contextlib import ExitStack
from typing import Dict, List

from .utils import DocOptArgs, dump, entrypoint, error
from ..plumbing.client import Nexus
from ..plumbing.components import get_components, upload_component, UploadAsset


def _fields(pairs: List[str]) -> Dict[str, str]:
    fields = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            error("Fields must be given as KEY=VALUE, not {!r}".format(pair), exit=1)
        fields[key] = value
    return fields


@entrypoint
def list_(opts: DocOptArgs, nexus: Nexus):
    """
    List all components in a repository.

    Usage: {script} REPOSITORY
    """
    dump(get_components(nexus, opts["REPOSITORY"]))


@entrypoint
def upload(opts: DocOptArgs, nexus: Nexus):
    """
    Upload files as a new component to a repository.

    Fields required by the format (e.g. `maven2.groupId`) are given without the format prefix, as
    `--field groupId=org.example`, and apply to the component or to every asset respectively.

    Usage: {script} [--field=FIELD]... [--asset-field=FIELD]... REPOSITORY TYPE FILE...
    """
    config = _fields(opts["--field"])
    asset_config = _fields(opts["--asset-field"])
    with ExitStack() as stack:
        assets = [UploadAsset(stack.enter_context(open(path, "rb")), asset_config)
                  for path in opts["FILE"]]
        upload_component(nexus, opts["REPOSITORY"], opts["TYPE"], assets, config)
    print("Component uploaded successfully")
