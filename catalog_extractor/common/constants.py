"""
Shared constants for the project.

Defaults used when config/scan_settings.yaml omits a key. The YAML file is
the place to tune a deployment; these are the single source of truth for
the shipped behaviour.
"""

# Catalog search endpoint (VTEX catalog_system)
SEARCH_API_PATH = "/api/catalog_system/pub/products/search"
SEARCH_ORDER = "OrderByTopSaleDESC"

# Pagination
PAGE_SIZE = 24
MAX_PAGES = 20
MAX_CONSECUTIVE_FAILURES = 3

# Delays in seconds
SAFE_PAGE_DELAY = 3.0
FAST_PAGE_DELAY = 1.5
FAILURE_BACKOFF_STEP = 3.0
RELAY_RETRY_DELAY = 1.5

# Relay transport
DEFAULT_RELAY_TIMEOUT_MS = 30000
BLOCKING_MARKERS = ("Captcha",)

# Snapshot extraction
STRUCTURED_SUFFICIENT_COUNT = 5
MIN_NAME_LENGTH = 3

# Product defaults
MISSING_REFERENCE = "N/A"
