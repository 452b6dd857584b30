"""Tests for the dependency update audit."""

from registry.maven.client import fetch_versions
from versioning.audit import DependencyAudit
from versioning.models import AuditReport, DependencyPin


def _fetcher(table):
    def fetch(module, repositories):
        value = table[module]
        if isinstance(value, Exception):
            raise value
        return value
    return fetch


GEMFIRE = DependencyPin("gemfire-core", "com.vmware.gemfire:gemfire-core", "10.1.0")
SESSION = DependencyPin("spring-session-core", "org.springframework.session:spring-session-core", "3.3.1")


class TestDependencyAudit:
    """Candidate filtering and result bookkeeping."""

    def test_picks_latest_acceptable_patch(self):
        audit = DependencyAudit(
            ["https://repo.example"],
            fetcher=_fetcher({GEMFIRE.module: ["9.15.0", "10.0.0", "10.1.0", "10.1.10", "10.1.2", "10.1.3-rc1", "10.2.0"]}),
        )
        result = audit.check(GEMFIRE)
        assert result.latest_acceptable == "10.1.10"
        assert result.accepted == ["10.1.2", "10.1.10"]
        # 9.15.0, 10.0.0, 10.1.3-rc1 and 10.2.0 are rejected by the policy
        assert result.rejected_count == 4
        assert result.candidate_count == 7
        assert result.has_update
        assert result.error is None

    def test_current_version_is_not_an_update(self):
        audit = DependencyAudit([], fetcher=_fetcher({SESSION.module: ["3.3.0", "3.3.1"]}))
        result = audit.check(SESSION)
        assert result.latest_acceptable is None
        assert result.accepted == []
        assert not result.has_update

    def test_unorderable_candidates_are_skipped(self):
        audit = DependencyAudit([], fetcher=_fetcher({SESSION.module: ["3.3.x", "3.3.2"]}))
        result = audit.check(SESSION)
        assert result.accepted == ["3.3.2"]

    def test_missing_metadata_is_reported(self):
        audit = DependencyAudit([], fetcher=_fetcher({SESSION.module: None}))
        result = audit.check(SESSION)
        assert result.latest_acceptable is None
        assert result.error == "No metadata found"

    def test_invalid_coordinate_is_reported(self):
        pin = DependencyPin("bad", "not-a-coordinate:x", "1.0.0")
        audit = DependencyAudit([], fetcher=_fetcher({pin.module: ValueError("Invalid Maven coordinate")}))
        result = audit.check(pin)
        assert "Invalid Maven coordinate" in result.error

    def test_two_segment_pin_never_updates(self):
        pin = DependencyPin("lombok", "io.freefair:lombok", "8.4")
        audit = DependencyAudit([], fetcher=_fetcher({pin.module: ["8.4", "8.4.1", "8.5"]}))
        result = audit.check(pin)
        assert result.latest_acceptable is None
        assert result.rejected_count == 3

    def test_run_collects_results_in_order(self):
        audit = DependencyAudit(
            [],
            fetcher=_fetcher({GEMFIRE.module: ["10.1.1"], SESSION.module: ["3.3.1"]}),
        )
        report = audit.run([GEMFIRE, SESSION])
        assert isinstance(report, AuditReport)
        assert [r.pin for r in report.results] == [GEMFIRE, SESSION]
        assert [r.pin for r in report.updates] == [GEMFIRE]

    def test_module_shared_by_aliases_is_fetched_once(self):
        calls = []

        def fetch(module, repositories):
            calls.append(module)
            return ["10.1.1"]

        twin = DependencyPin("gemfire-core-test", GEMFIRE.module, "10.1.0")
        report = DependencyAudit([], fetcher=fetch).run([GEMFIRE, twin])
        assert calls == [GEMFIRE.module]
        assert len(report.updates) == 2

    def test_default_fetcher_is_maven_client(self):
        audit = DependencyAudit(["https://repo.example"])
        assert audit.fetcher is fetch_versions
        assert audit.repositories == ["https://repo.example"]


def test_result_to_dict():
    audit = DependencyAudit([], fetcher=_fetcher({GEMFIRE.module: ["10.1.1"]}))
    data = audit.check(GEMFIRE).to_dict()
    assert data == {
        "alias": "gemfire-core",
        "module": "com.vmware.gemfire:gemfire-core",
        "currentVersion": "10.1.0",
        "latestAcceptable": "10.1.1",
        "accepted": ["10.1.1"],
        "rejectedCount": 0,
        "candidateCount": 1,
        "error": None,
    }
