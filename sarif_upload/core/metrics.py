"""
Prometheus metrics for the SARIF upload pipeline.

All metrics are registered in the default registry; a pushgateway job or an
embedding service decides how they are exposed.
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

from prometheus_client import Counter, Histogram, Info

# =============================================================================
# Build Info
# =============================================================================

try:
    APP_VERSION = get_version("sarif-upload")
except PackageNotFoundError:
    APP_VERSION = "unknown"

build_info = Info("sarif_upload_build", "Version of the sarif-upload package")
build_info.info({"version": APP_VERSION})

# =============================================================================
# GitHub API Calls
# =============================================================================

api_requests_total = Counter(
    "sarif_upload_api_requests_total",
    "Requests sent to an external API, by service and HTTP method",
    ["service", "method"],
)

api_transport_errors_total = Counter(
    "sarif_upload_api_transport_errors_total",
    "Requests that failed without a response (timeouts, connection errors)",
    ["service", "method"],
)

api_request_seconds = Histogram(
    "sarif_upload_api_request_seconds",
    "Wall time of one API request",
    ["service", "method"],
    buckets=(0.05, 0.25, 1.0, 2.5, 5.0, 15.0, 30.0, 60.0),
)

# =============================================================================
# Uploads
# =============================================================================

sarif_uploads_total = Counter(
    "sarif_uploads_total",
    "SARIF upload attempts by mode and outcome",
    ["mode", "outcome"],
)

sarif_upload_size_bytes = Histogram(
    "sarif_upload_size_bytes",
    "Upload size: raw fingerprinted JSON bytes, or length of the zipped base64 text",
    ["kind"],
    buckets=(1_000, 10_000, 100_000, 1_000_000, 10_000_000, 100_000_000),
)

sarif_results_uploaded_total = Counter(
    "sarif_results_uploaded_total",
    "SARIF results included in successful uploads",
)

# =============================================================================
# Status Reports
# =============================================================================

status_reports_total = Counter(
    "status_reports_total",
    "Status reports by action, status and what happened to them",
    ["action", "status", "outcome"],
)
