"""
Unit Tests for utils/scanner.py

Tests first-match-in-catalog-order scanning and its counters.
"""

import asyncio

import pytest

from conftest import FakeSource, make_file
from utils.modules.base import ErrorKind, StageError
from utils.scanner import ScanResult, scan_blocklists_async


def run_scan(source, ip, concurrency=1):
    files = asyncio.run(source.list_files())
    return asyncio.run(scan_blocklists_async(ip, files, source, concurrency=concurrency))


class TestSequentialScan:
    """Test suite for the default one-file-at-a-time scan."""

    def test_match_reports_first_file_in_catalog_order(self, fake_source):
        result = run_scan(fake_source, "127.0.0.1")

        assert isinstance(result, ScanResult)
        assert result.blocked is True
        assert result.found_in == "botscout_30d.ipset"
        assert result.files_searched == 2
        # all lines of the files read, up to and including the matching file
        assert result.addresses_searched == 3 + 2

    def test_scan_stops_after_match(self, fake_source):
        run_scan(fake_source, "127.0.0.1")
        assert fake_source.read_paths == ["alpha.ipset", "botscout_30d.ipset"]

    def test_no_match_scans_everything(self, fake_source):
        result = run_scan(fake_source, "203.0.113.1")

        assert result.blocked is False
        assert result.found_in == ""
        assert result.files_searched == 3
        assert result.addresses_searched == 3 + 2 + 4

    def test_match_is_exact(self):
        source = FakeSource({"a.ipset": ["10.0.0.1 # trailing", "10.0.0.10", "110.0.0.1"]})
        result = run_scan(source, "10.0.0.1")
        assert result.blocked is False

    def test_empty_catalog(self):
        result = asyncio.run(scan_blocklists_async("127.0.0.1", [], FakeSource({})))
        assert result == ScanResult(blocked=False, found_in="", files_searched=0, addresses_searched=0)

    def test_read_failure_aborts_scan(self):
        error = StageError(ErrorKind.UPSTREAM_UNAVAILABLE, "blocklist b.ipset returned status 500")
        source = FakeSource({"a.ipset": ["1.1.1.1"], "b.ipset": error, "c.ipset": ["127.0.0.1"]})

        result = run_scan(source, "127.0.0.1")

        assert result == error
        assert source.read_paths == ["a.ipset", "b.ipset"]

    def test_repeated_scans_are_identical(self, fake_source):
        first = run_scan(fake_source, "127.0.0.1")
        second = run_scan(fake_source, "127.0.0.1")
        assert first == second


class TestConcurrentScan:
    """Batched downloads resolve to the same verdict as the sequential scan."""

    @pytest.mark.parametrize("concurrency", [2, 3, 10])
    def test_same_verdict_as_sequential(self, blocklist_contents, concurrency):
        sequential = run_scan(FakeSource(blocklist_contents), "127.0.0.1")
        concurrent = run_scan(FakeSource(blocklist_contents), "127.0.0.1", concurrency=concurrency)
        assert concurrent == sequential

    @pytest.mark.parametrize("concurrency", [2, 10])
    def test_no_match_counts(self, blocklist_contents, concurrency):
        result = run_scan(FakeSource(blocklist_contents), "203.0.113.1", concurrency=concurrency)
        assert result.files_searched == 3
        assert result.addresses_searched == 9

    def test_failure_after_match_is_ignored(self):
        error = StageError(ErrorKind.UPSTREAM_UNAVAILABLE, "blocklist c.ipset returned status 500")
        source = FakeSource({"a.ipset": ["1.1.1.1"], "b.ipset": ["127.0.0.1"], "c.ipset": error})

        result = run_scan(source, "127.0.0.1", concurrency=3)

        assert result.found_in == "b.ipset"
        assert result.files_searched == 2

    def test_failure_before_match_aborts(self):
        error = StageError(ErrorKind.UPSTREAM_UNAVAILABLE, "blocklist a.ipset returned status 500")
        source = FakeSource({"a.ipset": error, "b.ipset": ["127.0.0.1"]})

        assert run_scan(source, "127.0.0.1", concurrency=2) == error

    def test_scan_uses_given_file_order(self, blocklist_contents):
        source = FakeSource(blocklist_contents)
        files = [make_file("gamma.ipset"), make_file("botscout_30d.ipset")]
        result = asyncio.run(scan_blocklists_async("127.0.0.1", files, source, concurrency=2))
        assert result.found_in == "gamma.ipset"
        assert result.addresses_searched == 4
