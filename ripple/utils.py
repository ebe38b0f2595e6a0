#!/usr/bin/env python3
"""
Ripple - Utilities Module
Contains helper functions used across different modules.
"""
import ipaddress
import re
from typing import Tuple, Union

import tldextract  # Import the tldextract library

from .config import DNS_PORT

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def join_txt_chunks(chunks: list[str]) -> str:
    """Join multi-chunk TXT records (quoted strings) into a single string"""
    return "".join(chunks)


def ensure_fqdn(domain: str) -> str:
    """Return the domain with a trailing root label separator."""
    domain = domain.strip()
    return domain if domain.endswith(".") else domain + "."


def parse_duration(value: Union[str, int, float]) -> float:
    """
    Parse a duration into seconds.

    Accepts plain numbers (seconds) and Go-style strings such as
    '500ms', '5s', '1m30s' or '2h'.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip().lower()
    if not text:
        raise ValueError("Invalid duration: empty string")
    try:
        return float(text)
    except ValueError:
        pass

    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ValueError(f"Invalid duration: {value!r}")
    return total


def format_duration(seconds: float) -> str:
    """Format a duration in seconds for display ('42s', '3m', '1m5s')."""
    whole = int(seconds)
    if whole < 60:
        return f"{whole}s"
    mins, secs = divmod(whole, 60)
    if secs == 0:
        return f"{mins}m"
    return f"{mins}m{secs}s"


def parse_server_address(value: str) -> Tuple[str, int]:
    """
    Split 'host', 'host:port', '[v6]:port' or a bare IPv6 address into (host, port).
    The host must be an IP address literal.
    """
    text = value.strip()
    port = DNS_PORT
    if text.startswith("["):
        host, _, rest = text[1:].partition("]")
        if rest:
            if not rest.startswith(":"):
                raise ValueError(f"Invalid server address: {value!r}")
            port = int(rest[1:])
    elif text.count(":") == 1:
        host, _, port_text = text.partition(":")
        port = int(port_text)
    else:
        host = text

    ipaddress.ip_address(host)
    if not 0 < port < 65536:
        raise ValueError(f"Invalid port in server address: {value!r}")
    return host, port


def is_valid_domain(domain: str) -> bool:
    """
    Check if a given string is a syntactically valid domain name.
    This is a basic check and does not guarantee the domain exists or is resolvable.
    """
    if not isinstance(domain, str) or not domain:
        return False

    if domain.startswith("."):
        return False

    # A domain can end with a dot (FQDN)
    if domain.endswith("."):
        domain = domain[:-1]

    # Overall length check
    if len(domain) > 253:
        return False

    # Use tldextract for robust parsing
    extracted = tldextract.extract(domain)

    # A valid domain must have a domain part and a known TLD/suffix.
    if not extracted.domain or not extracted.suffix:
        return False

    # A valid public TLD cannot be all-numeric.
    if extracted.suffix.isdigit():
        return False

    # Check each part (label) of the domain
    labels = (extracted.subdomain + "." + extracted.domain).strip(".").split(".")
    for label in labels:
        if not (0 < len(label) <= 63) or label.startswith("-") or label.endswith("-"):
            return False

    return True
