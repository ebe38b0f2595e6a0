import pytest

from ripple.engine.matcher import answer_records, match_record


def test_txt_match_returns_full_text(make_rdata):
    records = [make_rdata("TXT", '"v=spf1 include:_spf.example.com ~all"')]
    assert match_record(records, "TXT", "v=spf1") == "v=spf1 include:_spf.example.com ~all"


def test_txt_no_match(make_rdata):
    records = [make_rdata("TXT", '"v=spf1 include:_spf.example.com ~all"')]
    assert match_record(records, "TXT", "nomatch") is None


def test_txt_segments_are_joined_without_separator(make_rdata):
    """A value split across character-strings still matches."""
    records = [make_rdata("TXT", '"site-verification=abc" "123"')]
    assert match_record(records, "TXT", "abc123") == "site-verification=abc123"


@pytest.mark.parametrize(
    "rtype, text, target, expected",
    [
        ("A", "93.184.216.34", "93.184.216.34", "A 93.184.216.34"),
        ("A", "93.184.216.34", "93.184.216", None),  # addresses must match exactly
        ("AAAA", "2001:db8::1", "2001:db8::1", "AAAA 2001:db8::1"),
        ("CNAME", "edge.cdn.example.net.", "cdn.example", "CNAME edge.cdn.example.net."),
        ("MX", "10 mail.example.com.", "mail.example", "MX mail.example.com. (pref 10)"),
        ("MX", "10 mail.example.com.", "mx.other", None),
    ],
)
def test_match_by_type(make_rdata, rtype, text, target, expected):
    assert match_record([make_rdata(rtype, text)], rtype, target) == expected


def test_record_type_is_case_insensitive(make_rdata):
    assert match_record([make_rdata("A", "192.0.2.1")], "a", "192.0.2.1") == "A 192.0.2.1"


def test_other_record_types_are_skipped(make_rdata):
    """A CNAME in an A answer (as in a chased alias) does not break the match."""
    records = [
        make_rdata("CNAME", "target.example.net."),
        make_rdata("A", "192.0.2.10"),
        make_rdata("A", "192.0.2.20"),
    ]
    assert match_record(records, "A", "192.0.2.20") == "A 192.0.2.20"


def test_unsupported_or_unknown_type_is_no_match(make_rdata):
    records = [make_rdata("NS", "ns1.example.com.")]
    assert match_record(records, "NS", "ns1") is None
    assert match_record(records, "BOGUS", "ns1") is None


def test_empty_records():
    assert match_record([], "A", "192.0.2.1") is None


def test_answer_records_flattens_answer_section(make_response):
    response = make_response(
        "example.com.",
        "A",
        answer=[("example.com.", "A", "192.0.2.1", "192.0.2.2")],
        authority=[("example.com.", "NS", "ns1.example.com.")],
    )
    records = answer_records(response)
    assert sorted(r.address for r in records) == ["192.0.2.1", "192.0.2.2"]
