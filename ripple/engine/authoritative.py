#!/usr/bin/env python3
"""
Ripple - Authoritative Nameserver Discovery
Walks the delegation chain from the root servers down to the zone that is
authoritative for a domain, without relying on a recursive resolver.
"""
import asyncio
import logging
from typing import Dict, List, Optional, Sequence

import dns.exception
import dns.flags
import dns.message
import dns.name
import dns.query
import dns.rdatatype
import dns.resolver

from ..config import MAX_REFERRAL_DEPTH, QUERY_TIMEOUT
from .models import Endpoint

logger = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Authoritative nameservers could not be discovered."""


class NoResponseError(DiscoveryError):
    pass


class NoReferralError(DiscoveryError):
    pass


class MaxDepthExceededError(DiscoveryError):
    pass


async def query_dns(
    server: Endpoint, domain: str, rdtype: str, timeout: float = QUERY_TIMEOUT
) -> dns.message.Message:
    """
    Sends a single non-recursive query to a specific server.
    Falls back to TCP when the UDP answer is truncated.
    """
    request = dns.message.make_query(domain, rdtype)
    request.flags &= ~dns.flags.RD
    response, _ = await asyncio.to_thread(
        dns.query.udp_with_fallback,
        request,
        server.address,
        timeout=timeout,
        port=server.port,
    )
    return response


async def lookup_address(name: str, timeout: float = QUERY_TIMEOUT) -> Optional[str]:
    """Forward A lookup through the system resolver. Returns the first address."""
    try:
        resolver = dns.resolver.Resolver()
        resolver.timeout = timeout
        resolver.lifetime = timeout
        answers = await asyncio.to_thread(resolver.resolve, name, "A")
    except (dns.exception.DNSException, OSError) as e:
        logger.debug(f"Forward lookup of {name} failed: {e}")
        return None
    for rdata in answers:
        return rdata.address
    return None


async def _first_response(
    candidates: Sequence[Endpoint], domain: str, rdtype: str, timeout: float
) -> Optional[dns.message.Message]:
    """Tries each candidate in order; the first one that answers wins."""
    for server in candidates:
        try:
            return await query_dns(server, domain, rdtype, timeout)
        except (dns.exception.DNSException, OSError) as e:
            logger.debug(f"{rdtype} query for {domain} to {server.address} failed: {e}")
    return None


def _ns_names(rrsets) -> List[dns.name.Name]:
    return [
        rdata.target
        for rrset in rrsets
        if rrset.rdtype == dns.rdatatype.NS
        for rdata in rrset
    ]


def _glue(message: dns.message.Message) -> Dict[dns.name.Name, str]:
    glue: Dict[dns.name.Name, str] = {}
    for rrset in message.additional:
        if rrset.rdtype != dns.rdatatype.A:
            continue
        for rdata in rrset:
            glue.setdefault(rrset.name, rdata.address)
    return glue


async def _resolve_names(
    names: List[dns.name.Name], glue: Dict[dns.name.Name, str], timeout: float
) -> List[Endpoint]:
    """Turns nameserver names into endpoints, preferring glue over a lookup."""
    endpoints = []
    for name in names:
        address = glue.get(name)
        if address is None:
            address = await lookup_address(name.to_text(), timeout)
        if address is None:
            logger.debug(f"Skipping nameserver {name}: no address")
            continue
        endpoints.append(Endpoint(name=name.to_text(omit_final_dot=True), address=address))
    return endpoints


async def _enumerate_nameservers(
    domain: str, candidates: List[Endpoint], timeout: float
) -> List[Endpoint]:
    """
    Asks the authoritative zone for its NS set. If that yields nothing usable,
    the candidates that gave the authoritative answer are returned as-is.
    That fallback may include servers that are not strictly authoritative.
    """
    response = await _first_response(candidates, domain, "NS", timeout)
    endpoints: List[Endpoint] = []
    if response is not None:
        names = _ns_names(response.answer) or _ns_names(response.authority)
        endpoints = await _resolve_names(names, _glue(response), timeout)

    if not endpoints:
        logger.warning(
            f"Could not enumerate NS records for {domain}; "
            f"using {len(candidates)} responding server(s) as authoritative"
        )
        return list(candidates)
    return endpoints


async def find_authoritative_servers(
    domain: str,
    root_servers: Sequence[Endpoint],
    *,
    timeout: float = QUERY_TIMEOUT,
    max_depth: int = MAX_REFERRAL_DEPTH,
) -> List[Endpoint]:
    """
    Follows referrals from the root servers until a server answers
    authoritatively for the domain, then returns every authoritative nameserver.

    Raises:
        NoResponseError: No candidate answered at some depth.
        NoReferralError: A referral did not lead to any reachable nameserver.
        MaxDepthExceededError: The delegation chain was longer than max_depth.
    """
    candidates = list(root_servers)

    for depth in range(max_depth):
        response = await _first_response(candidates, domain, "A", timeout)
        if response is None:
            raise NoResponseError(f"no response from nameservers at depth {depth}")

        if response.flags & dns.flags.AA:
            logger.debug(f"Authoritative answer for {domain} at depth {depth}")
            return await _enumerate_nameservers(domain, candidates, timeout)

        names = _ns_names(response.authority)
        logger.debug(
            f"Referral at depth {depth}: {', '.join(n.to_text() for n in names) or 'none'}"
        )
        referred = await _resolve_names(names, _glue(response), timeout)
        if not referred:
            raise NoReferralError(f"no more referrals at depth {depth}")
        candidates = referred

    raise MaxDepthExceededError("max depth exceeded")
