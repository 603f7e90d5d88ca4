"""
Local cluster: every deployable mounted into one ASGI app.

    uvicorn main:app

Each service is also runnable on its own, e.g.
``uvicorn services.user_service.main:user_app --port 3001``. The federated
order service reaches its collaborators over HTTP through USER_SERVICE_URL
and PRODUCT_SERVICE_URL, so point those at the standalone services (or at
``http://localhost:8000/user-service`` and ``/catalog-service`` when running
this cluster).
"""
from fastapi import FastAPI

from services.storefront.main import storefront_app
from services.user_service.main import user_app
from services.catalog_service.main import catalog_app
from services.federated_order_service.main import federated_order_app

app = FastAPI(title="Ecommerce Cluster")

app.mount("/api", storefront_app)
app.mount("/user-service", user_app)
app.mount("/catalog-service", catalog_app)
app.mount("/order-service", federated_order_app)

SERVICES = (storefront_app, user_app, catalog_app, federated_order_app)


@app.on_event("startup")
async def startup_event():
    # Mounted apps do not receive lifespan events of their own
    for service in SERVICES:
        await service.router.startup()


@app.on_event("shutdown")
async def shutdown_event():
    for service in SERVICES:
        await service.router.shutdown()
