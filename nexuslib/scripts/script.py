"""
Scripts to run Groovy code on the server.
"""

from .utils import DocOptArgs, entrypoint, error
from ..plumbing.client import Nexus
from ..plumbing.scripting import execute_ephemeral


@entrypoint
def exec_(opts: DocOptArgs, nexus: Nexus):
    """
    Run Groovy commands, or a Groovy script file, on the server and print the result.

    The script is stored under a random name, and removed again once it has finished.

    Usage: {script} (--file=FILE | COMMAND...)
    """
    if opts["--file"]:
        with open(opts["--file"]) as f:
            content = f.read()
    else:
        content = " ".join(opts["COMMAND"])
    if not content.strip():
        error("Nothing to execute", exit=1)
    print(execute_ephemeral(nexus, content).result)
