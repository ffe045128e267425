"""
Base types shared by the blocklist sources and the check pipeline.
A source implements the catalog/content contract; the pipeline only talks to this interface.
"""
from typing import List, Union
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Failure kinds reported to the caller"""
    MALFORMED_REQUEST = "MalformedRequest"
    INVALID_ADDRESS = "InvalidAddress"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"


@dataclass(frozen=True)
class StageError:
    """Error value returned by a pipeline stage instead of raising"""
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class BlocklistFile:
    """
    Descriptor of one blocklist file in the remote repository.

    Attributes:
        path: Location of the file within the repository
        size: Size in bytes
        sha: Content hash reported by the listing
        url: Blob API URL reported by the listing
        download_url: URL serving the raw file content
    """
    path: str
    size: int
    sha: str
    url: str
    download_url: str


class BlocklistSource(ABC):
    """
    Base class for remote blocklist data sources.

    A source is built per request around an injected HTTP client, so the
    pipeline can be run against a fake source without network access.
    """

    SOURCE_NAME: str = ""

    @abstractmethod
    async def list_files(self) -> Union[List[BlocklistFile], StageError]:
        """
        Retrieve the blocklist catalog.

        Returns:
            Ordered list of file descriptors, or a StageError
        """
        pass

    @abstractmethod
    async def read_file(self, blocklist_file: BlocklistFile) -> Union[List[str], StageError]:
        """
        Retrieve the sanitized lines of one blocklist file.

        Args:
            blocklist_file: Descriptor from list_files()

        Returns:
            Ordered list of non-comment lines, or a StageError
        """
        pass
