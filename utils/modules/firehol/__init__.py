"""
FireHOL module - blocklist-ipsets hosted on GitHub
Lists the .ipset files of the repository and reads their contents
"""
import logging
from typing import List, Optional, Union
import aiohttp
from utils.config import Settings, load_settings
from utils.modules.base import BlocklistSource, BlocklistFile, StageError
from .query import create_session, fetch_catalog_async, read_ipset_async
from .normalizer import normalize_catalog, sanitize_ipset_lines

logger = logging.getLogger(__name__)


class FireholSource(BlocklistSource):
    """
    FireHOL blocklist source.
    Wraps the HTTP session of one check; holds no state between checks.
    """

    SOURCE_NAME = "FireHOL"

    def __init__(self, session: aiohttp.ClientSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or load_settings()

    async def list_files(self) -> Union[List[BlocklistFile], StageError]:
        """List the ipset files of the repository"""
        return await fetch_catalog_async(self.session, self.settings)

    async def read_file(self, blocklist_file: BlocklistFile) -> Union[List[str], StageError]:
        """Read one ipset file without its comment lines"""
        return await read_ipset_async(self.session, blocklist_file)


__all__ = [
    'FireholSource',
    'create_session',
    'fetch_catalog_async',
    'read_ipset_async',
    'normalize_catalog',
    'sanitize_ipset_lines',
]
