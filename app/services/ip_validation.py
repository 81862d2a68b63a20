"""
Boundary validation for submitted IP addresses.
"""

import ipaddress

from app.core.exceptions import InvalidIpAddress
from app.models.database import IP_ADDRESS_MAX_LENGTH


def is_valid_ip_address(value: str | None) -> bool:
    """True for dotted-decimal IPv4 and colon-hex IPv6 text that fits the column."""
    if not value or len(value) > IP_ADDRESS_MAX_LENGTH:
        return False
    if value != value.strip():
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def validate_ip_address(value: str | None) -> str:
    """Return the address unchanged, or raise InvalidIpAddress."""
    if not is_valid_ip_address(value):
        raise InvalidIpAddress()
    return value
