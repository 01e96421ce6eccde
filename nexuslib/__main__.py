import code
import logging

from nexuslib import plumbing as p
from nexuslib.plumbing import assets, components, formats, pages, repositories, scripting
from nexuslib.plumbing.client import connect, load_config
from nexuslib.plumbing.common import *
from nexuslib.tasks import blobstores


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    nexus = connect(load_config())
    code.interact(local=globals())
