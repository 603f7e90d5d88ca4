from prometheus_client import Counter, Histogram

# Transactional workflow
ecomm_order_placement_total = Counter(
    "ecomm_order_placement_total",
    "Cart-to-order placements attempted",
    ["status"] # Labels: 'success', 'empty_cart', 'insufficient_stock', 'failed'
)

ecomm_order_placement_duration_seconds = Histogram(
    "ecomm_order_placement_duration_seconds",
    "Order placement unit-of-work duration in seconds"
)

ecomm_order_cancellation_total = Counter(
    "ecomm_order_cancellation_total",
    "Order cancellations attempted",
    ["status"] # Labels: 'success', 'not_found', 'invalid_state'
)

ecomm_stock_units_restored_total = Counter(
    "ecomm_stock_units_restored_total",
    "Stock units returned to products by cancellations"
)

# Federated workflow
ecomm_collaborator_requests_total = Counter(
    "ecomm_collaborator_requests_total",
    "Calls to the user and product collaborators",
    ["collaborator", "outcome"] # Labels: outcome='ok', 'not_found', 'unavailable'
)

ecomm_order_enrichment_total = Counter(
    "ecomm_order_enrichment_total",
    "Best-effort order decoration results",
    ["result"] # Labels: 'enriched', 'bare'
)
