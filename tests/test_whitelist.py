import pytest

from dosevasive.whitelist import Whitelist


def test_exact_match():
    wl = Whitelist(["10.0.0.1"])
    assert "10.0.0.1" in wl
    assert "10.0.0.2" not in wl


@pytest.mark.parametrize("pattern", ["192.*.*.*", "192.168.*.*", "192.168.1.*"])
def test_wildcard_levels(pattern):
    wl = Whitelist([pattern])
    assert "192.168.1.20" in wl


def test_wildcard_does_not_match_other_prefix():
    wl = Whitelist(["192.168.*.*"])
    assert "192.169.1.20" not in wl
    assert "10.168.1.20" not in wl


def test_candidates_order():
    wl = Whitelist()
    assert wl.candidates("192.168.1.20") == (
        "192.168.1.20",
        "192.*.*.*",
        "192.168.*.*",
        "192.168.1.*",
    )


def test_long_octet_is_blank_in_wildcards():
    wl = Whitelist()
    candidates = wl.candidates("1234.5.6.7")
    assert candidates[0] == "1234.5.6.7"
    assert candidates[1] == ".*.*.*"
    assert candidates[3] == ".5.6.*"


def test_short_address_pads_octets():
    wl = Whitelist()
    assert wl.candidates("10")[2] == "10..*.*"


def test_add_and_len_counts_unique_entries():
    wl = Whitelist()
    wl.add("10.*.*.*")
    wl.add("10.*.*.*")
    wl.add("127.0.0.1")
    assert len(wl) == 2
    assert "10.9.9.9" in wl
    assert "127.0.0.1" in wl


def test_non_string_is_not_contained():
    wl = Whitelist(["10.0.0.1"])
    assert (10, 0, 0, 1) not in wl


def test_empty_whitelist_matches_nothing():
    wl = Whitelist()
    assert len(wl) == 0
    assert "127.0.0.1" not in wl