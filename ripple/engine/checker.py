#!/usr/bin/env python3
"""
Ripple - Target Checkers
Single-attempt lookups against one authoritative server or one resolver.
Any network or protocol failure counts as "no match" for that attempt.
"""
import asyncio
import logging
from typing import Optional

import dns.exception
import dns.resolver

from ..config import QUERY_TIMEOUT
from .authoritative import query_dns
from .matcher import answer_records, match_record
from .models import Endpoint, MatchCriteria

logger = logging.getLogger(__name__)


async def check_authoritative(
    endpoint: Endpoint,
    domain: str,
    criteria: MatchCriteria,
    timeout: float = QUERY_TIMEOUT,
) -> Optional[str]:
    """Queries an authoritative server directly and matches its answer section."""
    try:
        response = await query_dns(endpoint, domain, criteria.record_type, timeout)
    except (dns.exception.DNSException, OSError) as e:
        logger.debug(f"Authoritative check against {endpoint.name} failed: {type(e).__name__}: {e}")
        return None
    return match_record(answer_records(response), criteria.record_type, criteria.value)


def _build_resolver(endpoint: Endpoint, timeout: float) -> dns.resolver.Resolver:
    if endpoint.is_system:
        # Reads /etc/resolv.conf (or the platform equivalent)
        resolver = dns.resolver.Resolver()
    else:
        # configure=False keeps the system settings (and the DO bit) out of the query
        resolver = dns.resolver.Resolver(configure=False)
        resolver.nameservers = [endpoint.address]
        resolver.port = endpoint.port
    resolver.timeout = timeout
    resolver.lifetime = timeout
    return resolver


async def check_resolver(
    endpoint: Endpoint,
    domain: str,
    criteria: MatchCriteria,
    timeout: float = QUERY_TIMEOUT,
) -> Optional[str]:
    """Performs a recursive lookup through a resolver and matches the answer."""
    try:
        resolver = _build_resolver(endpoint, timeout)
        answers = await asyncio.to_thread(resolver.resolve, domain, criteria.record_type)
    except (dns.exception.DNSException, OSError) as e:
        logger.debug(f"Resolver check against {endpoint.name} failed: {type(e).__name__}: {e}")
        return None
    return match_record(answers, criteria.record_type, criteria.value)
