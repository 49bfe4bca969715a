import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from src.core.constants import AGE_BUCKETS, NO_DISTANCE, SERVICE_NAME_MAP
from src.schemas.search import DocumentSubmissionStats
from src.services.search.filter_options import (
    FilterOptionsError,
    _stats_statement,
    build_filter_options,
    category_label,
    load_filter_options,
    status_label,
    submission_filters,
)
from src.services.search.store import StoreError
from tests.conftest import FakeSessionFactory


def _sql(clause) -> str:
    return str(clause.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))


STATS = DocumentSubmissionStats(
    total_profiles=10,
    profiles_with_documents=7,
    profiles_with_all_approved=4,
    profiles_with_any_rejected=2,
    profiles_with_pending=3,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("WORKING_RIGHTS", "Working Rights"),
        ("TRAINING", "Training"),
        ("mandatory_checks", "Mandatory Checks"),
    ],
)
def test_category_label(raw, expected):
    assert category_label(raw) == expected


def test_status_label():
    assert status_label("APPROVED") == "Approved"
    assert status_label("PENDING") == "Pending"


def test_submission_filters_count_profiles_without_documents():
    options = submission_filters(STATS)
    assert [o.value for o in options] == [
        "has_documents",
        "no_documents",
        "all_approved",
        "any_rejected",
        "pending_review",
    ]
    assert [o.count for o in options] == [7, 3, 4, 2, 3]
    assert options[1].label == "No Documents (3)"
    assert options[3].label == "Has Rejected (2)"


def test_build_filter_options_drops_excluded_documents_and_blanks():
    data = build_filter_options(
        categories=["WORKING_RIGHTS", None, "TRAINING", "WORKING_RIGHTS"],
        statuses=["APPROVED", "", "REJECTED"],
        documents=[
            ("police-check", "Police Check", "WORKING_RIGHTS"),
            ("identity-passport", "Passport", "IDENTITY"),
            ("abn", "ABN", "BUSINESS"),
            ("first-aid", "First Aid", "TRAINING"),
        ],
        stats=STATS,
    )
    assert [(o.value, o.label) for o in data.document_categories] == [
        ("WORKING_RIGHTS", "Working Rights"),
        ("TRAINING", "Training"),
    ]
    assert [o.label for o in data.document_statuses] == ["Approved", "Rejected"]
    assert [(o.value, o.category) for o in data.document_types] == [
        ("police-check", "WORKING_RIGHTS"),
        ("first-aid", "TRAINING"),
    ]
    assert data.stats == STATS
    assert len(data.document_submission_filters) == 5


def test_build_filter_options_static_lists():
    data = build_filter_options([], [], [], DocumentSubmissionStats())
    assert [o.value for o in data.services] == list(SERVICE_NAME_MAP)
    assert [o.value for o in data.age_buckets] == list(AGE_BUCKETS)
    assert data.distances[0].value == NO_DISTANCE
    assert [o.value for o in data.distances[1:]] == ["5", "10", "20", "50", "100"]
    assert data.distances[3].label == "Within 20 km"


def test_stats_statement_counts_distinct_profiles_over_outer_join():
    sql = _sql(_stats_statement())
    assert sql.count("count(DISTINCT") == 5
    assert "LEFT OUTER JOIN verification_requirements" in sql
    assert "verification_requirements.worker_profile_id = worker_profiles.id" in sql
    assert "CASE WHEN" in sql
    assert "verification_requirements.status = 'APPROVED'" in sql
    assert "verification_requirements.status = 'REJECTED'" in sql
    assert "IN ('PENDING', 'SUBMITTED')" in sql
    assert "worker_profiles.is_deleted IS false" in sql


async def test_load_filter_options_assembles_query_results():
    factory = FakeSessionFactory(
        results=[
            [("TRAINING",), ("WORKING_RIGHTS",)],
            [("APPROVED",), ("PENDING",)],
            [("first-aid", "First Aid", "TRAINING"), ("police-check", "Police Check", "WORKING_RIGHTS")],
            [(10, 7, 4, 2, 3)],
        ]
    )
    data = await load_filter_options(factory)
    assert len(factory.statements) == 4
    assert [o.label for o in data.document_categories] == ["Training", "Working Rights"]
    assert [o.value for o in data.document_statuses] == ["APPROVED", "PENDING"]
    assert [o.label for o in data.document_types] == ["First Aid", "Police Check"]
    assert data.stats == STATS
    assert "NOT IN" in _sql(factory.statements[2])


async def test_load_filter_options_maps_database_errors():
    factory = FakeSessionFactory(error=OperationalError("SELECT 1", {}, Exception("server closed the connection")))
    with pytest.raises(FilterOptionsError) as excinfo:
        await load_filter_options(factory)
    assert isinstance(excinfo.value, StoreError)
    assert "server closed the connection" in str(excinfo.value)
