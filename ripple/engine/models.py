#!/usr/bin/env python3
"""
Ripple - Engine Data Model
Endpoints, match criteria, run configuration and per-target status.
"""
import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..config import DNS_PORT, QUERY_TIMEOUT
from ..utils import ensure_fqdn, format_duration, parse_server_address

AUTHORITATIVE = "authoritative"
RESOLVER = "resolver"


@dataclass(frozen=True)
class Endpoint:
    """A DNS server to query. An empty address means the system resolver."""

    name: str
    address: str = ""
    port: int = DNS_PORT

    @property
    def is_system(self) -> bool:
        return not self.address

    @property
    def display_address(self) -> str:
        return self.address or "system"


@dataclass(frozen=True)
class MatchCriteria:
    record_type: str
    value: str

    def __post_init__(self):
        object.__setattr__(self, "record_type", self.record_type.upper())


@dataclass(frozen=True)
class RunConfig:
    """
    Everything one propagation check needs. The domain is stored as an FQDN.
    Server addresses must be IP literals with an optional port; a malformed
    one raises ValueError here rather than part-way through a run.
    """

    domain: str
    criteria: MatchCriteria
    poll_interval: float
    deadline: float
    root_servers: Tuple[str, ...]
    public_resolvers: Tuple[str, ...]
    query_timeout: float = QUERY_TIMEOUT

    def __post_init__(self):
        object.__setattr__(self, "domain", ensure_fqdn(self.domain))
        object.__setattr__(self, "root_servers", tuple(self.root_servers))
        object.__setattr__(self, "public_resolvers", tuple(self.public_resolvers))
        for address in self.root_servers + self.public_resolvers:
            parse_server_address(address)


@dataclass
class TargetStatus:
    """Propagation progress of one endpoint during a run."""

    endpoint: Endpoint
    role: str
    propagated: bool = False
    found_after: Optional[float] = None
    matched_record: str = ""

    def snapshot(self) -> "TargetStatus":
        return dataclasses.replace(self)

    def to_dict(self) -> Dict[str, Any]:
        status: Dict[str, Any] = {
            "name": self.endpoint.name,
            "address": self.endpoint.display_address,
            "propagated": self.propagated,
        }
        if self.propagated:
            status["found_after"] = format_duration(self.found_after or 0.0)
            status["record"] = self.matched_record
        return status


@dataclass
class PropagationResult:
    """Summary of a finished run."""

    domain: str
    criteria: MatchCriteria
    outcome: str
    elapsed: float = 0.0
    error: Optional[str] = None
    authoritative: List[TargetStatus] = field(default_factory=list)
    resolvers: List[TargetStatus] = field(default_factory=list)
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def targets(self) -> List[TargetStatus]:
        return self.authoritative + self.resolvers

    @property
    def all_propagated(self) -> bool:
        targets = self.targets
        return bool(targets) and all(t.propagated for t in targets)

    @property
    def propagated_count(self) -> int:
        return sum(1 for t in self.targets if t.propagated)

    def to_dict(self) -> Dict[str, Any]:
        report: Dict[str, Any] = {
            "domain": self.domain.rstrip("."),
            "record_type": self.criteria.record_type,
            "match": self.criteria.value,
            "outcome": self.outcome,
            "elapsed": format_duration(self.elapsed),
            "authoritative": [t.to_dict() for t in self.authoritative],
            "resolvers": [t.to_dict() for t in self.resolvers],
            "all_propagated": self.all_propagated,
            "checked_at": self.checked_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        if self.error:
            report["error"] = self.error
        return report
