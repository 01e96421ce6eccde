"""
Scripts to inspect repositories.
"""

from .utils import DocOptArgs, dump, entrypoint
from ..plumbing.client import Nexus
from ..plumbing.repositories import list_repositories


@entrypoint
def list_(opts: DocOptArgs, nexus: Nexus):
    """
    List the repositories on the server.

    Usage: {script}
    """
    dump(list_repositories(nexus))
