"""
Pytest shared fixtures for Ripple.
"""
from datetime import datetime, timezone

import dns.flags
import dns.message
import dns.rdata
import dns.rrset
import pytest

from ripple.engine.models import (
    AUTHORITATIVE,
    RESOLVER,
    Endpoint,
    MatchCriteria,
    PropagationResult,
    RunConfig,
    TargetStatus,
)


def build_response(qname, rdtype, *, aa=False, answer=(), authority=(), additional=()):
    """
    Builds a dnspython response message for `qname`/`rdtype`.

    Each section entry is a tuple of (owner, rdtype, *rdata_texts).
    """
    query = dns.message.make_query(qname, rdtype)
    response = dns.message.make_response(query)
    if aa:
        response.flags |= dns.flags.AA
    for section, entries in (
        (response.answer, answer),
        (response.authority, authority),
        (response.additional, additional),
    ):
        for owner, rtype, *texts in entries:
            section.append(dns.rrset.from_text(owner, 300, "IN", rtype, *texts))
    return response


def rdata(rtype, text):
    """Parses a single rdata in presentation format."""
    return dns.rdata.from_text("IN", rtype, text)


@pytest.fixture
def make_response():
    """Provides the response builder to tests."""
    return build_response


@pytest.fixture
def make_rdata():
    """Provides the rdata parser to tests."""
    return rdata


@pytest.fixture
def run_config():
    """A fast-ticking run config with one root server and one public resolver."""
    return RunConfig(
        domain="example.com",
        criteria=MatchCriteria(record_type="a", value="93.184.216.34"),
        poll_interval=0.1,
        deadline=1.0,
        root_servers=("198.41.0.4:53",),
        public_resolvers=("8.8.8.8:53",),
        query_timeout=1.0,
    )


@pytest.fixture
def sample_result():
    """A timed-out run: both nameservers propagated, one of two resolvers did."""
    criteria = MatchCriteria(record_type="A", value="93.184.216.34")
    return PropagationResult(
        domain="example.com.",
        criteria=criteria,
        outcome="timeout",
        elapsed=60.2,
        authoritative=[
            TargetStatus(
                endpoint=Endpoint(name="ns1.example.com", address="192.0.2.1"),
                role=AUTHORITATIVE,
                propagated=True,
                found_after=0.3,
                matched_record="A 93.184.216.34",
            ),
            TargetStatus(
                endpoint=Endpoint(name="ns2.example.com", address="192.0.2.2"),
                role=AUTHORITATIVE,
                propagated=True,
                found_after=5.1,
                matched_record="A 93.184.216.34",
            ),
        ],
        resolvers=[
            TargetStatus(
                endpoint=Endpoint(name="8.8.8.8", address="8.8.8.8"),
                role=RESOLVER,
                propagated=True,
                found_after=45.0,
                matched_record="A 93.184.216.34",
            ),
            TargetStatus(endpoint=Endpoint(name="local"), role=RESOLVER),
        ],
        checked_at=datetime(2025, 11, 12, 20, 30, tzinfo=timezone.utc),
    )
