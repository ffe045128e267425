"""
Check executor - runs the blocklist check pipeline for one request.
Works with sources through the BlocklistSource interface.
"""
import logging
from typing import Dict, Any, Tuple, Union
from utils.ip_validator import is_valid_ip, ip_version
from utils.modules.base import BlocklistSource, ErrorKind, StageError
from utils.request_evaluator import ExtractedRequest
from utils.response_builder import build_response
from utils.scanner import Verdict, scan_blocklists_async

logger = logging.getLogger(__name__)

MISSING_ADDRESS_MESSAGE = "no ip address was supplied and none could be inferred from the request"


def validate_candidate(extracted: ExtractedRequest) -> Union[str, StageError]:
    """
    Turn the validator's verdict into a pipeline result.

    Args:
        extracted: Output of the request evaluator

    Returns:
        The candidate address, or a StageError for a missing or invalid address
    """
    if extracted.ip is None:
        return StageError(ErrorKind.MALFORMED_REQUEST, MISSING_ADDRESS_MESSAGE)
    if not is_valid_ip(extracted.ip):
        logger.warning(f"Invalid IP address format: {extracted.ip!r}")
        return StageError(ErrorKind.INVALID_ADDRESS, f"invalid IP address {extracted.ip}")
    return extracted.ip


async def evaluate_ip_async(
    extracted: ExtractedRequest,
    source: BlocklistSource,
    concurrency: int = 1,
) -> Union[Verdict, StageError]:
    """
    Validate the candidate and scan the source's blocklists for it.

    No network call is made unless the candidate is a syntactically valid address.

    Args:
        extracted: Output of the request evaluator
        source: Blocklist source for this check
        concurrency: Number of blocklist files downloaded at once

    Returns:
        Verdict, or the StageError of the first failing stage
    """
    ip = validate_candidate(extracted)
    if isinstance(ip, StageError):
        return ip

    logger.info(f"Checking IPv{ip_version(ip)} address {ip} against {source.SOURCE_NAME} blocklists")

    files = await source.list_files()
    if isinstance(files, StageError):
        return files

    scan = await scan_blocklists_async(ip, files, source, concurrency=concurrency)
    if isinstance(scan, StageError):
        return scan

    return Verdict.from_scan(ip, scan, extracted.origin)


async def check_ip_async(
    extracted: Union[ExtractedRequest, StageError],
    source: BlocklistSource,
    concurrency: int = 1,
) -> Tuple[Dict[str, Any], int]:
    """
    Run the full check and build the response.

    Args:
        extracted: Output of the request evaluator (may already be an error)
        source: Blocklist source for this check
        concurrency: Number of blocklist files downloaded at once

    Returns:
        (payload, status_code)
    """
    if isinstance(extracted, StageError):
        return build_response(extracted)
    result = await evaluate_ip_async(extracted, source, concurrency=concurrency)
    return build_response(result)
