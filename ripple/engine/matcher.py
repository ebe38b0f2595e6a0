#!/usr/bin/env python3
"""
Ripple - Record Matcher
Decides whether decoded DNS records carry the value being watched for.
"""
from typing import Any, Iterable, List, Optional

import dns.message
import dns.rdatatype

from ..utils import join_txt_chunks


def answer_records(message: dns.message.Message) -> List[Any]:
    """Flatten the answer section of a response into rdata objects."""
    return [rdata for rrset in message.answer for rdata in rrset]


def _match_one(rdata: Any, record_type: str, target: str) -> Optional[str]:
    if record_type in ("A", "AAAA"):
        if rdata.address == target:
            return f"{record_type} {rdata.address}"
    elif record_type == "TXT":
        # One TXT resource can hold several character-strings
        joined = join_txt_chunks([s.decode("utf-8", "ignore") for s in rdata.strings])
        if target in joined:
            return joined
    elif record_type == "CNAME":
        cname = rdata.target.to_text()
        if target in cname:
            return f"CNAME {cname}"
    elif record_type == "MX":
        host = rdata.exchange.to_text()
        if target in host:
            return f"MX {host} (pref {rdata.preference})"
    return None


def match_record(records: Iterable[Any], record_type: str, target: str) -> Optional[str]:
    """
    Returns a human-readable rendering of the first record that matches, or None.

    A/AAAA records must equal the target address exactly. TXT, CNAME and MX
    records match when their text contains the target.
    """
    record_type = record_type.upper()
    try:
        rdtype = dns.rdatatype.from_text(record_type)
    except dns.rdatatype.UnknownRdatatype:
        return None

    for rdata in records:
        if getattr(rdata, "rdtype", None) != rdtype:
            continue
        matched = _match_one(rdata, record_type, target)
        if matched is not None:
            return matched
    return None
