"""Shared search constants."""

# Flat-earth approximation used for bounding boxes
KM_PER_DEGREE_LAT = 111.32
# Mean Earth radius used by the haversine distance
EARTH_RADIUS_KM = 6371.0

DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# Radius used when a location is given but the distance selector is "none".
# Application-level default, not a physical limit.
DEFAULT_RADIUS_KM = 500.0
RADIUS_PRESETS_KM = (5, 10, 20, 50, 100)
NO_DISTANCE = "none"

AGE_BUCKETS = ("18-25", "26-35", "36-45", "46-60", "60+")
# Upper bound for the open-ended "60+" bucket
MAX_AGE = 120

# Sentinel used by single-select filters in the admin UI
ALL = "all"

SORTABLE_FIELDS = ("createdAt", "firstName", "lastName", "city", "state")
DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_SORT_ORDER = "desc"

# Frontend sends kebab-case tokens; the store holds display names
SERVICE_NAME_MAP = {
    "support-worker": "Support Worker",
    "therapeutic-supports": "Therapeutic Supports",
    "home-modifications": "Home Modifications",
    "fitness-rehabilitation": "Fitness and Rehabilitation",
    "cleaning-services": "Cleaning Services",
    "nursing-services": "Nursing Services",
    "home-yard-maintenance": "Home and Yard Maintenance",
}
THERAPEUTIC_SUPPORTS_ID = "therapeutic-supports"

# Identity and business documents are managed elsewhere and never offered as filters
EXCLUDED_FILTER_DOCUMENT_IDS = (
    "identity-points-100",
    "identity-passport",
    "identity-birth-certificate",
    "identity-drivers-license",
    "identity-medicare-card",
    "identity-utility-bill",
    "identity-bank-statement",
    "business-abn",
    "abn",
    "abn-contractor",
)
