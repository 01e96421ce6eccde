"""
Scripts to manage blob stores.
"""

from .utils import DocOptArgs, dump, entrypoint
from ..plumbing.client import Nexus
from ..tasks import blobstores


@entrypoint
def list_(opts: DocOptArgs, nexus: Nexus):
    """
    List the blob stores on the server.

    Usage: {script}
    """
    dump(blobstores.list_blobstores(nexus))


@entrypoint
def create(opts: DocOptArgs, nexus: Nexus):
    """
    Create a new blob store, in a directory on the server or in an S3 bucket.

    Usage: {script} [options] NAME

    Options:
      --type=TYPE               Type of blob store, either file or s3 [default: file]
      --path=PATH               Directory for a file blob store, defaults to the name
      --bucket=BUCKET           Bucket for an S3 blob store
      --prefix=PREFIX           Key prefix within the bucket
      --access-key-id=KEY       AWS IAM access key ID
      --secret-access-key=KEY   AWS IAM secret access key
      --assume-role=ROLE        AWS IAM role to assume
      --region=REGION           AWS region of the bucket
      --expiry-days=DAYS        Days to keep deleted blobs, or -1 to keep them [default: -1]
    """
    s3 = None
    if opts["--bucket"]:
        s3 = blobstores.S3Config(bucket=opts["--bucket"],
                                 prefix=opts["--prefix"],
                                 access_key_id=opts["--access-key-id"],
                                 secret_access_key=opts["--secret-access-key"],
                                 assume_role=opts["--assume-role"],
                                 region=opts["--region"],
                                 expiration=int(opts["--expiry-days"]))
    result = blobstores.create_blobstore(nexus, opts["NAME"], opts["--type"], opts["--path"], s3)
    dump(result.value)


@entrypoint
def delete(opts: DocOptArgs, nexus: Nexus):
    """
    Delete a blob store.  In-use blob stores can only be deleted with --force.

    Usage: {script} [--force] NAME
    """
    blobstores.delete_blobstore(nexus, opts["NAME"], bool(opts["--force"]))
    print("Blob store {} deleted".format(opts["NAME"]))
