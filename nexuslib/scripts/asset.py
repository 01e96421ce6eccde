"""
Scripts to inspect assets.
"""

from .utils import DocOptArgs, dump, entrypoint
from ..plumbing.assets import get_assets
from ..plumbing.client import Nexus


@entrypoint
def list_(opts: DocOptArgs, nexus: Nexus):
    """
    List all assets in a repository.

    Usage: {script} REPOSITORY
    """
    dump(get_assets(nexus, opts["REPOSITORY"]))
