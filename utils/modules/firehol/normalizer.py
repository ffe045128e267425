"""
FireHOL normalizer - turns raw listing and file content into catalog descriptors and sanitized lines
"""
import logging
from typing import Dict, Any, List, Optional, Union
from utils.config import Settings
from utils.modules.base import BlocklistFile, ErrorKind, StageError

logger = logging.getLogger(__name__)

COMMENT_MARKER = '#'


def normalize_catalog(raw_tree: Optional[Dict[str, Any]], settings: Settings) -> Union[List[BlocklistFile], StageError]:
    """
    Normalize a git tree listing into blocklist file descriptors.

    Args:
        raw_tree: Decoded JSON body of the trees API call
        settings: Settings holding the path suffix and raw content base

    Returns:
        Descriptors for the blobs ending in the configured suffix, in listing order
    """
    if not isinstance(raw_tree, dict) or not isinstance(raw_tree.get("tree"), list):
        logger.warning(f"Blocklist catalog is not a tree listing: {type(raw_tree)}")
        return StageError(ErrorKind.UPSTREAM_UNAVAILABLE, "blocklist catalog did not return a file tree")

    if raw_tree.get("truncated"):
        logger.warning("Blocklist catalog listing is truncated, scanning the files returned")

    files = []
    for entry in raw_tree["tree"]:
        if not isinstance(entry, dict):
            continue
        path = entry.get("path")
        if not isinstance(path, str) or not path.endswith(settings.suffix):
            continue
        if entry.get("type", "blob") != "blob":
            continue
        size = entry.get("size", 0)
        sha = entry.get("sha", "")
        url = entry.get("url", "")
        if isinstance(size, bool) or not isinstance(size, int) or not isinstance(sha, str) or not isinstance(url, str):
            logger.warning(f"Blocklist catalog entry {path} has malformed fields: size={size!r}, sha={sha!r}, url={url!r}")
            return StageError(ErrorKind.UPSTREAM_UNAVAILABLE, f"blocklist catalog entry {path} is malformed")
        files.append(BlocklistFile(
            path=path,
            size=size,
            sha=sha,
            url=url,
            download_url=settings.raw_url(path),
        ))

    logger.info(f"Normalized blocklist catalog: {len(files)} of {len(raw_tree['tree'])} entries end in {settings.suffix}")
    return files


def sanitize_ipset_lines(content: str) -> List[str]:
    """
    Split blocklist content into lines, dropping comment lines.

    Only lines whose first character is the comment marker are dropped; a marker
    later in the line keeps it. No other parsing is applied.
    """
    return [line for line in content.splitlines() if not line.startswith(COMMENT_MARKER)]
