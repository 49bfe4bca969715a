from datetime import date, datetime, timezone
from typing import Optional

import pytest

from src.core import create_access_token, limiter
from src.providers.geocoding import GeocodeResult, GeocodingProvider, GeocodingServiceError
from src.services.geocoding import GeocodeCache, Geocoder
from src.services.search.memory_store import DocumentRecord, InMemoryProfileStore, WorkerRecord

limiter.enabled = False

SYDNEY = (-33.8688, 151.2093)


class FakeGeocodingProvider(GeocodingProvider):
    """Answers from a fixed table; counts calls; can be told to fail or to raise a given error."""

    def __init__(
        self,
        table: Optional[dict[str, tuple[float, float]]] = None,
        fail: bool = False,
        error: Optional[Exception] = None,
    ):
        self.table = {k.lower(): v for k, v in (table or {}).items()}
        self.fail = fail
        self.error = error
        self.calls: list[str] = []

    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        if self.fail:
            raise GeocodingServiceError("provider down")
        coords = self.table.get(address.strip().lower())
        if coords is None:
            return None
        return GeocodeResult(latitude=coords[0], longitude=coords[1], formatted_address=address)


class FakeResult:
    def __init__(self, rows):
        self._rows = list(rows)

    def all(self):
        return list(self._rows)

    def scalars(self):
        return FakeResult(r[0] if isinstance(r, tuple) else r for r in self._rows)

    def scalar_one(self):
        (row,) = self._rows
        return row[0] if isinstance(row, tuple) else row


class FakeSessionFactory:
    """Stands in for async_sessionmaker: sessions answer execute() from a queue of row lists, or raise."""

    def __init__(self, results=(), error: Optional[Exception] = None):
        self.results = [FakeResult(rows) for rows in results]
        self.error = error
        self.statements: list = []

    def __call__(self) -> "_FakeSession":
        return _FakeSession(self)


class _FakeSession:
    def __init__(self, factory: FakeSessionFactory):
        self._factory = factory

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, stmt):
        self._factory.statements.append(stmt)
        if self._factory.error is not None:
            raise self._factory.error
        return self._factory.results.pop(0)


def _years_ago(years: int, month: int = 6, day: int = 15) -> str:
    return f"{date.today().year - years:04d}-{month:02d}-{day:02d}"


def _created(day: int) -> datetime:
    return datetime(2025, 1, day, tzinfo=timezone.utc)


@pytest.fixture
def records() -> list[WorkerRecord]:
    return [
        WorkerRecord(
            id="w1",
            user_id="u1",
            first_name="Liam",
            last_name="Nguyen",
            mobile="0411000001",
            email="liam@example.com",
            gender="Male",
            date_of_birth=_years_ago(30),
            languages=("English",),
            services=("Support Worker",),
            documents=(DocumentRecord("police-check", "WORKING_RIGHTS", "APPROVED"),),
            city="Sydney",
            state="NSW",
            latitude=-33.8688,
            longitude=151.2093,
            created_at=_created(1),
        ),
        WorkerRecord(
            id="w2",
            user_id="u2",
            first_name="Emma",
            last_name="Smith",
            mobile="0411000002",
            gender="Female",
            date_of_birth=_years_ago(40),
            languages=("English",),
            additional_languages=("Mandarin", "English"),
            services=("Support Worker", "Therapeutic Supports", "Support Worker"),
            therapeutic_subcategories=("physiotherapy",),
            documents=(
                DocumentRecord("first-aid", "TRAINING", "PENDING"),
                DocumentRecord("police-check", "WORKING_RIGHTS", "REJECTED"),
            ),
            city="Hornsby",
            state="NSW",
            latitude=-33.70,
            longitude=151.10,
            created_at=_created(2),
        ),
        WorkerRecord(
            id="w3",
            user_id="u3",
            first_name="Noah",
            last_name="Brown",
            mobile="0411000003",
            gender="Male",
            date_of_birth=_years_ago(50),
            languages=("Greek",),
            services=("Support Worker",),
            city="Mittagong",
            state="NSW",
            latitude=-34.50,
            longitude=150.00,
            created_at=_created(3),
        ),
        WorkerRecord(
            id="w4",
            user_id="u4",
            first_name="Olivia",
            last_name="Taylor",
            mobile="0411000004",
            gender="Female",
            age=65,
            languages=("Italian",),
            services=("Cleaning Services",),
            city="Melbourne",
            state="VIC",
            created_at=_created(4),
        ),
        WorkerRecord(
            id="w5",
            user_id="u5",
            first_name="Ava",
            last_name="Wilson",
            mobile="0411000005",
            gender="Female",
            date_of_birth=_years_ago(58, month=1, day=1),
            age=61,
            services=("Nursing Services",),
            city="Sydney",
            state="NSW",
            latitude=-33.87,
            longitude=151.21,
            created_at=_created(5),
        ),
        WorkerRecord(
            id="w6",
            user_id="u6",
            first_name="Deleted",
            last_name="Worker",
            mobile="0411000006",
            gender="Male",
            services=("Support Worker",),
            latitude=-33.8688,
            longitude=151.2093,
            is_deleted=True,
            created_at=_created(6),
        ),
        WorkerRecord(
            id="w7",
            user_id="u7",
            first_name="Ethan",
            last_name="Lee",
            mobile="0411000007",
            gender="Male",
            date_of_birth=_years_ago(25),
            services=("Support Worker",),
            city="Strathfield",
            state="NSW",
            latitude=-33.80,
            longitude=151.08,
            created_at=_created(7),
        ),
    ]


@pytest.fixture
def store(records) -> InMemoryProfileStore:
    return InMemoryProfileStore(records)


@pytest.fixture
def provider() -> FakeGeocodingProvider:
    return FakeGeocodingProvider({"Sydney NSW": SYDNEY})


@pytest.fixture
def geocoder(provider) -> Geocoder:
    return Geocoder(provider, GeocodeCache(ttl_seconds=3600, max_entries=10))


@pytest.fixture
def admin_token() -> str:
    return create_access_token("admin-1", "ADMIN")


@pytest.fixture
def worker_token() -> str:
    return create_access_token("worker-1", "WORKER")
