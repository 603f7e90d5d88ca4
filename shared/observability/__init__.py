from .setup import setup_observability
from .metrics import (
    ecomm_order_placement_total,
    ecomm_order_placement_duration_seconds,
    ecomm_order_cancellation_total,
    ecomm_stock_units_restored_total,
    ecomm_collaborator_requests_total,
    ecomm_order_enrichment_total,
)
