"""
Match scanner - looks for an exact candidate address in blocklist files, in catalog order
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import List, Union, Dict, Any
from utils.modules.base import BlocklistSource, BlocklistFile, StageError
from utils.request_evaluator import Origin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of a scan; counts cover only the files actually read"""
    blocked: bool
    found_in: str
    files_searched: int
    addresses_searched: int


@dataclass(frozen=True)
class Verdict:
    """Final answer for one check"""
    ip: str
    blocked: bool
    found_in: str
    files_searched: int
    addresses_searched: int
    origin: Origin

    @classmethod
    def from_scan(cls, ip: str, scan: ScanResult, origin: Origin) -> "Verdict":
        return cls(
            ip=ip,
            blocked=scan.blocked,
            found_in=scan.found_in,
            files_searched=scan.files_searched,
            addresses_searched=scan.addresses_searched,
            origin=origin,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ip": self.ip,
            "blocked": self.blocked,
            "foundIn": self.found_in,
            "files_searched": self.files_searched,
            "addresses_searched": self.addresses_searched,
            "origin": self.origin.to_dict(),
        }


class _Tally:
    def __init__(self):
        self.files = 0
        self.addresses = 0

    def add(self, lines: List[str]):
        self.files += 1
        self.addresses += len(lines)

    def result(self, found_in: str = "") -> ScanResult:
        return ScanResult(
            blocked=bool(found_in),
            found_in=found_in,
            files_searched=self.files,
            addresses_searched=self.addresses,
        )


async def scan_blocklists_async(
    ip: str,
    files: List[BlocklistFile],
    source: BlocklistSource,
    concurrency: int = 1,
) -> Union[ScanResult, StageError]:
    """
    Scan blocklist files for an exact match of the candidate address.

    Files are resolved strictly in catalog order and the scan stops at the first
    file containing the address. With concurrency > 1 the files of a batch are
    downloaded together, but the batch is still resolved in catalog order, so the
    result is the same as a sequential scan.

    Args:
        ip: Validated candidate address
        files: Catalog, in order
        source: Source used to read each file
        concurrency: Number of files downloaded at once

    Returns:
        ScanResult, or the StageError of the first failed read
    """
    tally = _Tally()
    batch_size = max(1, concurrency)

    for start in range(0, len(files), batch_size):
        batch = files[start:start + batch_size]
        if batch_size == 1:
            contents = [await source.read_file(batch[0])]
        else:
            contents = await asyncio.gather(*(source.read_file(f) for f in batch))

        for blocklist_file, lines in zip(batch, contents):
            if isinstance(lines, StageError):
                logger.warning(f"Aborting scan for {ip}: {lines.message}")
                return lines
            tally.add(lines)
            if ip in lines:
                logger.info(f"IP {ip} found in {blocklist_file.path} after {tally.files} files")
                return tally.result(found_in=blocklist_file.path)

    logger.info(f"IP {ip} not found in {tally.files} files ({tally.addresses} addresses)")
    return tally.result()
