from flask import request
from prometheus_client import Counter

# Counter for HTTP errors
ERROR_COUNTER = Counter(
    "styleswap_http_error_total",
    "Count of HTTP responses with status >= 400",
    ["endpoint", "method", "code"],
)

ORDERS_PLACED_COUNTER = Counter(
    "styleswap_orders_placed_total",
    "Vendor orders created by successful checkouts",
)

CHECKOUT_FAILURE_COUNTER = Counter(
    "styleswap_checkout_failures_total",
    "Checkouts rolled back while staging vendor orders",
)

STOCK_CLAMP_COUNTER = Counter(
    "styleswap_stock_clamp_total",
    "Availability adjustments cut short by the stock bounds",
    ["bound"],
)


def init_app(app):
    """Attach metric hooks to the app."""

    @app.after_request
    def track_errors(resp):
        if resp.status_code >= 400:
            endpoint = request.endpoint or "unknown"
            ERROR_COUNTER.labels(endpoint, request.method, resp.status_code).inc()
        return resp
