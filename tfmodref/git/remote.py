import logging
from typing import List

from dulwich.client import get_transport_and_path

from tfmodref.versioning.exceptions import TransportError

logger = logging.getLogger(__name__)

TAG_PREFIX = b"refs/tags/"
PEELED_SUFFIX = b"^{}"


def list_remote_tags(repo_url: str) -> List[str]:
    """
    List the tag names of a remote git repository.

    Only the refs are listed, nothing is cloned or fetched.

    Args:
        repo_url: Git repository URL (https, ssh, scp-like or file)

    Returns:
        Short tag names, e.g. ["v1.0.0", "v1.1.0"]

    Raises:
        TransportError: If the remote cannot be reached or listed
    """
    logger.debug(f"Listing remote refs of {repo_url}")
    try:
        client, path = get_transport_and_path(repo_url)
        result = client.get_refs(path)
    except Exception as e:
        raise TransportError(repo_url, str(e)) from e

    # newer dulwich releases wrap the ref mapping in an LsRemoteResult
    refs = getattr(result, "refs", result)

    tags = []
    for ref_name in refs:
        if not ref_name.startswith(TAG_PREFIX) or ref_name.endswith(PEELED_SUFFIX):
            continue
        tags.append(ref_name[len(TAG_PREFIX) :].decode("utf-8", errors="replace"))

    logger.debug(f"Found {len(tags)} tags in {repo_url}")
    return tags
