"""
Response builder - standardizes the JSON payloads returned to the caller
"""
import logging
from typing import Dict, Any, Tuple, Union
from utils.modules.base import ErrorKind, StageError
from utils.scanner import Verdict

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_BAD_REQUEST = 400

# Every failure kind is reported to the caller as a bad request
ERROR_STATUS = {
    ErrorKind.MALFORMED_REQUEST: STATUS_BAD_REQUEST,
    ErrorKind.INVALID_ADDRESS: STATUS_BAD_REQUEST,
    ErrorKind.UPSTREAM_UNAVAILABLE: STATUS_BAD_REQUEST,
}


def build_message(verdict: Verdict) -> str:
    if verdict.blocked:
        return f"IP address {verdict.ip} is blocked: it was found in {verdict.found_in}"
    return (
        f"IP address {verdict.ip} is safe: it was not found in any of the "
        f"{verdict.files_searched} blocklists searched"
    )


def build_success_response(verdict: Verdict) -> Dict[str, Any]:
    """
    Build the payload for a completed check.

    Args:
        verdict: The verdict of the scan

    Returns:
        dict with message, ip, blocked, counts, foundIn and origin
    """
    payload = {"message": build_message(verdict)}
    payload.update(verdict.to_dict())
    logger.info(f"Built response for {verdict.ip}: blocked={verdict.blocked}, files={verdict.files_searched}")
    return payload


def build_error_response(error: StageError) -> Dict[str, Any]:
    """Build the payload for a failed check"""
    logger.info(f"Built error response ({error.kind.value}): {error.message}")
    return {
        "error": error.message,
        "kind": error.kind.value,
    }


def status_for(result: Union[Verdict, StageError]) -> int:
    if isinstance(result, StageError):
        return ERROR_STATUS.get(result.kind, STATUS_BAD_REQUEST)
    return STATUS_OK


def build_response(result: Union[Verdict, StageError]) -> Tuple[Dict[str, Any], int]:
    """Build the payload and status code for a verdict or an error"""
    if isinstance(result, StageError):
        return build_error_response(result), status_for(result)
    return build_success_response(result), status_for(result)
