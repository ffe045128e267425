"""
IP address syntax validation.
Validation is a pure predicate: nothing here raises, callers decide what an invalid address means.
"""
import re
from typing import Optional

_OCTET = r'(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)'
_IPV4 = rf'{_OCTET}\.{_OCTET}\.{_OCTET}\.{_OCTET}'
_HEX = r'[0-9a-f]{1,4}'

IPV4_PATTERN = re.compile(_IPV4)

IPV6_PATTERN = re.compile(
    r'(?:'
    rf'(?:{_HEX}:){{7}}{_HEX}|'
    rf'(?:{_HEX}:){{1,7}}:|'
    rf'(?:{_HEX}:){{1,6}}:{_HEX}|'
    rf'(?:{_HEX}:){{1,5}}(?::{_HEX}){{1,2}}|'
    rf'(?:{_HEX}:){{1,4}}(?::{_HEX}){{1,3}}|'
    rf'(?:{_HEX}:){{1,3}}(?::{_HEX}){{1,4}}|'
    rf'(?:{_HEX}:){{1,2}}(?::{_HEX}){{1,5}}|'
    rf'{_HEX}:(?::{_HEX}){{1,6}}|'
    rf':(?:(?::{_HEX}){{1,7}}|:)|'
    # dotted-quad tail standing in for the last two groups (RFC 4291 mixed notation)
    rf'(?:{_HEX}:){{6}}{_IPV4}|'
    rf'::(?:{_HEX}:){{5}}{_IPV4}|'
    rf'(?:{_HEX})?::(?:{_HEX}:){{4}}{_IPV4}|'
    rf'(?:(?:{_HEX}:){{0,1}}{_HEX})?::(?:{_HEX}:){{3}}{_IPV4}|'
    rf'(?:(?:{_HEX}:){{0,2}}{_HEX})?::(?:{_HEX}:){{2}}{_IPV4}|'
    rf'(?:(?:{_HEX}:){{0,3}}{_HEX})?::{_HEX}:{_IPV4}|'
    rf'(?:(?:{_HEX}:){{0,4}}{_HEX})?::{_IPV4}'
    r')'
    # optional zone/scope suffix, e.g. fe80::1%eth0
    r'(?:%[0-9a-z._~-]+)?',
    re.IGNORECASE,
)


def is_valid_ipv4(candidate: Optional[str]) -> bool:
    """Check if a string is a dotted-quad IPv4 address"""
    if not isinstance(candidate, str) or not candidate:
        return False
    return IPV4_PATTERN.fullmatch(candidate) is not None


def is_valid_ipv6(candidate: Optional[str]) -> bool:
    """Check if a string is a full or compressed IPv6 address"""
    if not isinstance(candidate, str) or not candidate:
        return False
    return IPV6_PATTERN.fullmatch(candidate) is not None


def is_valid_ip(candidate: Optional[str]) -> bool:
    """
    Validate an IP address as either IPv4 or IPv6.

    Args:
        candidate: The address to check (may be None)

    Returns:
        True if the address matches at least one of the two forms
    """
    return is_valid_ipv4(candidate) or is_valid_ipv6(candidate)


def ip_version(candidate: Optional[str]) -> Optional[int]:
    """Return 4 or 6 for a valid address, None otherwise"""
    if is_valid_ipv4(candidate):
        return 4
    if is_valid_ipv6(candidate):
        return 6
    return None
