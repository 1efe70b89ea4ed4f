from pathlib import Path

import pytest

from kubepug_executor.models import AffectedObject, DeletedFinding, ObjectScope, ScanReport
from kubepug_executor.parsing import ReportParseError, parse_scan_report
from kubepug_executor.parsing.report_parser import EXCERPT_LIMIT

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def test_null_finding_lists_parse_to_empty_report():
    report = parse_scan_report('{"DeprecatedAPIs":null,"DeletedAPIs":null}')

    assert report == ScanReport()
    assert report.deprecated_apis == ()
    assert report.deleted_apis == ()


@pytest.mark.parametrize("raw", ["{}", '{"DeprecatedAPIs": [], "DeletedAPIs": []}'])
def test_absent_and_empty_lists_are_equivalent(raw):
    assert parse_scan_report(raw) == parse_scan_report('{"DeprecatedAPIs":null}')


def test_invalid_json_raises():
    with pytest.raises(ReportParseError) as excinfo:
        parse_scan_report("invalid JSON")

    assert excinfo.value.raw_excerpt == "invalid JSON"
    assert excinfo.value.__cause__ is not None


def test_non_object_top_level_raises():
    with pytest.raises(ReportParseError):
        parse_scan_report('[{"DeprecatedAPIs": []}]')


@pytest.mark.parametrize(
    "raw",
    [
        '{"DeprecatedAPIs": {"Kind": "Ingress"}}',
        '{"DeletedAPIs": ["ingresses"]}',
        '{"DeletedAPIs": [{"Name": 3}]}',
        '{"DeletedAPIs": [{"Deleted": "yes"}]}',
    ],
)
def test_wrong_shapes_raise(raw):
    with pytest.raises(ReportParseError):
        parse_scan_report(raw)


def test_null_document_is_an_empty_report():
    assert parse_scan_report("null") == ScanReport()


def test_unknown_and_missing_scopes_kept_verbatim():
    report = parse_scan_report(
        '{"DeletedAPIs": [{"Name": "x", "Items": ['
        '{"Scope": "NAMESPACE", "ObjectName": "a", "Namespace": "team"},'
        '{"ObjectName": "b"},'
        '{"Scope": "OBJECT", "ObjectName": "c", "Namespace": "team"}]}]}'
    )

    unknown, missing, known = report.deleted_apis[0].items
    assert unknown.scope == "NAMESPACE"
    assert unknown.namespace == "team"
    assert str(unknown) == "team/a (NAMESPACE)"
    assert missing.scope == ""
    assert missing.object_name == "b"
    assert known.scope is ObjectScope.OBJECT


def test_excerpt_is_bounded():
    raw = "x" * (EXCERPT_LIMIT * 2)
    with pytest.raises(ReportParseError) as excinfo:
        parse_scan_report(raw)

    assert excinfo.value.raw_excerpt == "x" * EXCERPT_LIMIT + "..."


def test_deprecated_finding_parsed():
    report = parse_scan_report(read_fixture("kubepug-deprecated.json"))

    assert report.deleted_apis == ()
    assert len(report.deprecated_apis) == 1

    finding = report.deprecated_apis[0]
    assert finding.kind == "ComponentStatus"
    assert finding.group == ""
    assert finding.version == "v1"
    assert finding.name == ""
    assert finding.deprecated is True
    assert finding.description.startswith("ComponentStatus (and ComponentStatusList)")
    assert [item.object_name for item in finding.items] == [
        "scheduler",
        "etcd-0",
        "etcd-1",
        "controller-manager",
    ]
    assert all(item.scope is ObjectScope.GLOBAL for item in finding.items)
    assert all(item.namespace == "" for item in finding.items)


def test_deleted_findings_parsed_in_order():
    report = parse_scan_report(read_fixture("kubepug-deleted.json"))

    assert report.deprecated_apis == ()
    assert [finding.name for finding in report.deleted_apis] == [
        "ingresses",
        "podsecuritypolicies",
    ]

    ingress, psp = report.deleted_apis
    assert ingress == DeletedFinding(
        group="extensions",
        kind="Ingress",
        version="v1beta1",
        name="ingresses",
        deleted=True,
        items=tuple(
            AffectedObject(scope=ObjectScope.OBJECT, object_name=name, namespace="testkube")
            for name in (
                "cli-testkube-api-server-testkube",
                "oauth2-proxy",
                "testapi",
                "testdash",
                "testkube-dashboard-testkube",
                "ui-testkube-api-server-testkube",
            )
        ),
    )
    assert psp.items == (
        AffectedObject(scope=ObjectScope.GLOBAL, object_name="gce.gke-metrics-agent"),
    )


def test_unknown_fields_ignored_and_parsing_idempotent():
    raw = read_fixture("kubepug-mixed.json")

    first = parse_scan_report(raw)
    second = parse_scan_report(raw)

    assert first == second
    assert first.finding_count == 3
    assert first.has_findings is True
