"""
FireHOL query module - catalog listing and ipset downloads from GitHub
"""
import aiohttp
import asyncio
import logging
from typing import Optional, Dict, Any, List, Union
from utils.config import Settings
from utils.modules.base import BlocklistFile, ErrorKind, StageError
from .normalizer import normalize_catalog, sanitize_ipset_lines

logger = logging.getLogger(__name__)


def create_session(settings: Settings) -> aiohttp.ClientSession:
    """Create the HTTP session used for a single check"""
    timeout = aiohttp.ClientTimeout(total=settings.timeout_total, connect=settings.timeout_connect)
    return aiohttp.ClientSession(timeout=timeout, headers={'User-Agent': settings.user_agent})


def _upstream_error(message: str) -> StageError:
    return StageError(ErrorKind.UPSTREAM_UNAVAILABLE, message)


async def fetch_catalog_async(
    session: aiohttp.ClientSession,
    settings: Settings,
) -> Union[List[BlocklistFile], StageError]:
    """
    Retrieve the recursive file tree of the blocklist repository.

    Args:
        session: HTTP session for this check
        settings: Repository coordinates and suffix

    Returns:
        list: Descriptors of the blocklist files, in listing order.
        StageError: If the listing cannot be retrieved or is not a tree.
    """
    url = settings.catalog_url
    headers = {"Accept": "application/vnd.github+json"}
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"

    logger.info(f"Fetching blocklist catalog from {url}")

    try:
        async with session.get(url, headers=headers, params={"recursive": "1"}) as response:
            if response.status != 200:
                logger.warning(f"Blocklist catalog returned status {response.status}")
                return _upstream_error(f"blocklist catalog returned status {response.status}")

            try:
                raw_tree: Optional[Dict[str, Any]] = await response.json(content_type=None)
            except ValueError as e:
                logger.warning(f"Blocklist catalog body is not JSON: {e}")
                return _upstream_error("blocklist catalog did not return a file tree")

    except asyncio.TimeoutError:
        logger.warning(f"Timeout fetching blocklist catalog from {url}")
        return _upstream_error("timeout while fetching blocklist catalog")
    except aiohttp.ClientError as e:
        logger.warning(f"Client error fetching blocklist catalog from {url}: {e}")
        return _upstream_error(f"network error while fetching blocklist catalog: {e}")

    return normalize_catalog(raw_tree, settings)


async def read_ipset_async(
    session: aiohttp.ClientSession,
    blocklist_file: BlocklistFile,
) -> Union[List[str], StageError]:
    """
    Download one blocklist file and strip its comment lines.

    Args:
        session: HTTP session for this check
        blocklist_file: Descriptor from the catalog

    Returns:
        list: Remaining lines, in file order.
        StageError: If the download fails.
    """
    url = blocklist_file.download_url
    logger.debug(f"Downloading blocklist {blocklist_file.path} from {url}")

    try:
        async with session.get(url) as response:
            if response.status != 200:
                logger.warning(f"Blocklist {blocklist_file.path} returned status {response.status}")
                return _upstream_error(f"blocklist {blocklist_file.path} returned status {response.status}")
            content = await response.text(errors='ignore')
    except asyncio.TimeoutError:
        logger.warning(f"Timeout downloading blocklist {blocklist_file.path}")
        return _upstream_error(f"timeout while reading blocklist {blocklist_file.path}")
    except aiohttp.ClientError as e:
        logger.warning(f"Client error downloading blocklist {blocklist_file.path}: {e}")
        return _upstream_error(f"network error while reading blocklist {blocklist_file.path}: {e}")

    lines = sanitize_ipset_lines(content)
    logger.debug(f"Read {len(lines)} entries from {blocklist_file.path} ({len(content)} chars)")
    return lines
