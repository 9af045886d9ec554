from concurrent.futures import ThreadPoolExecutor

from certsweep.aggregate import Aggregator
from certsweep.models import Group, RunResult, Severity, ValidationOutcome
from certsweep.errors import FatalIOError


def outcome(severity, message="/c/site.crt - expired on 2024-01-01", path="/c/site.crt"):
    return ValidationOutcome(severity, message, path)


def test_zero_file_group_is_dropped():
    agg = Aggregator()
    agg.aggregate(Group("/c/empty"), [])
    result = agg.finalize()
    assert result.validated_groups == []
    assert result.notifications == {}


def test_failures_are_bucketed_by_severity():
    agg = Aggregator()
    group = Group("/c/site", ["/c/site.crt"], domains=["a.com", "b.com"])
    agg.aggregate(group, [outcome(Severity.DANGER), outcome(Severity.WARNING, "/c/site.crt - expiring soon")])
    result = agg.finalize()
    assert len(result.failures) == 2
    assert [f.title for f in result.notifications[Severity.DANGER]] == ["a.com, b.com"]
    assert result.notifications[Severity.DANGER][0].value == "/c/site.crt\nexpired on 2024-01-01"
    assert result.notifications[Severity.WARNING][0].value == "/c/site.crt\nexpiring soon"
    assert Severity.GOOD not in result.notifications


def test_unknown_title_without_domains():
    agg = Aggregator()
    agg.aggregate(Group("/c/site", ["/c/site.key"]), [outcome(Severity.DANGER, path="/c/site.key")])
    assert agg.result.notifications[Severity.DANGER][0].title == "Unknown"


def test_passing_group_only_recorded():
    agg = Aggregator()
    group = Group("/c/site", ["/c/site.crt"])
    agg.aggregate(group, [outcome(Severity.INFO, "/c/site.crt - ok")])
    result = agg.finalize()
    assert result.validated_groups == [group]
    assert result.failures == []
    assert result.notifications[Severity.GOOD][0].value == "Validated 1 certificate(s) - Processed 1 file(s)"


def test_no_summary_after_fatal_error():
    agg = Aggregator(RunResult(error=FatalIOError("/c", "Permission denied")))
    agg.aggregate(Group("/c/site", ["/c/site.crt"]), [])
    assert Severity.GOOD not in agg.finalize().notifications


def test_concurrent_appends():
    agg = Aggregator()
    groups = [Group(f"/c/{i}", [f"/c/{i}.crt"]) for i in range(200)]

    def work(g):
        agg.aggregate(g, [outcome(Severity.DANGER, f"{g.files[0]} - modulus mismatch", g.files[0])])

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(work, groups))

    result = agg.finalize()
    assert len(result.validated_groups) == 200
    assert len(result.failures) == 200
    assert len(result.notifications[Severity.DANGER]) == 200
    assert {f.outcome.source_file for f in result.failures} == {g.files[0] for g in groups}
