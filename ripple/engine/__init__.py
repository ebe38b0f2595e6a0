"""
Propagation Engine Package
"""
from .authoritative import (
    DiscoveryError,
    MaxDepthExceededError,
    NoReferralError,
    NoResponseError,
    find_authoritative_servers,
)
from .checker import check_authoritative, check_resolver
from .events import (
    Cancelled,
    Complete,
    Discovered,
    Error,
    EventQueue,
    ProgressEvent,
    ResolversInitialized,
    TargetPropagated,
    Timeout,
)
from .matcher import match_record
from .models import Endpoint, MatchCriteria, PropagationResult, RunConfig, TargetStatus
from .poller import PropagationPoller, check_propagation, stream_propagation
