"""
Scripts to inspect component formats.
"""

from .utils import DocOptArgs, dump, entrypoint
from ..plumbing.client import Nexus
from ..plumbing.formats import get_format, list_formats


@entrypoint
def list_(opts: DocOptArgs, nexus: Nexus):
    """
    List the available component formats and their upload fields, or those of a single format.

    Usage: {script} [FORMAT]
    """
    if opts["FORMAT"]:
        dump(get_format(nexus, opts["FORMAT"]))
    else:
        dump(list_formats(nexus))
