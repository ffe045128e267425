"""
Inbound request evaluation - pulls the candidate IP and origin metadata out of a request.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, Mapping, Union, Dict, Any
from utils.modules.base import ErrorKind, StageError

logger = logging.getLogger(__name__)

IP_PARAMETER = 'ip'
MALFORMED_REQUEST_MESSAGE = "only one parameter, ip, is accepted"

# Headers set by CDNs in front of the service
COUNTRY_HEADERS = ('CloudFront-Viewer-Country', 'CF-IPCountry')


@dataclass(frozen=True)
class Origin:
    """Metadata about the connection that made the request"""
    ip: Optional[str] = None
    country: Optional[str] = None
    user_agent: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ip": self.ip,
            "country": self.country,
            "user_agent": self.user_agent,
        }


@dataclass(frozen=True)
class ExtractedRequest:
    """Candidate address (may be None) plus origin metadata"""
    ip: Optional[str]
    origin: Origin = field(default_factory=Origin)


def evaluate_request(
    query_params: Optional[Mapping[str, str]] = None,
    path_ip: Optional[str] = None,
    origin_ip: Optional[str] = None,
    country: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Union[ExtractedRequest, StageError]:
    """
    Evaluate an incoming request for an explicit ip parameter and/or its origin.

    Args:
        query_params: Query string parameters (empty or None when absent)
        path_ip: Value of the ip path segment, if the route had one
        origin_ip: Address the connection came from
        country: Client country reported by the edge, if any
        user_agent: Client user agent, if any

    Returns:
        ExtractedRequest, or a MalformedRequest StageError when the query string is unusable
    """
    origin = Origin(ip=origin_ip or None, country=country or None, user_agent=user_agent or None)
    ip = None

    if query_params:
        value = query_params.get(IP_PARAMETER)
        if not value:
            logger.warning(f"Rejecting query parameters {list(query_params.keys())}")
            return StageError(ErrorKind.MALFORMED_REQUEST, MALFORMED_REQUEST_MESSAGE)
        ip = value

    if ip is None and path_ip is not None:
        if not path_ip:
            return StageError(ErrorKind.MALFORMED_REQUEST, MALFORMED_REQUEST_MESSAGE)
        ip = path_ip

    if ip is None and origin.ip is not None:
        logger.debug(f"No ip parameter supplied, falling back to origin {origin.ip}")
        ip = origin.ip

    return ExtractedRequest(ip=ip, origin=origin)


def get_client_ip(headers, remote_addr: Optional[str]) -> Optional[str]:
    """Return the first X-Forwarded-For hop, else the socket peer address"""
    xff = headers.get('X-Forwarded-For')
    if xff:
        first = xff.split(',')[0].strip()
        if first:
            return first
    return remote_addr


def get_client_country(headers) -> Optional[str]:
    for header in COUNTRY_HEADERS:
        value = headers.get(header)
        if value:
            return value
    return None


def extract_from_flask_request(request, path_ip: Optional[str] = None) -> Union[ExtractedRequest, StageError]:
    """
    Adapt a Flask request to evaluate_request().

    Args:
        request: The Flask request object
        path_ip: The <ip> route segment, if present

    Returns:
        ExtractedRequest or StageError
    """
    headers = request.headers
    return evaluate_request(
        query_params=request.args,
        path_ip=path_ip,
        origin_ip=get_client_ip(headers, request.remote_addr),
        country=get_client_country(headers),
        user_agent=headers.get('User-Agent'),
    )
