"""
Health check endpoint.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

from fastapi import APIRouter, Depends

from ledger_engine.api.dependencies import get_store
from ledger_engine.errors import StoreFailureError
from ledger_engine.services.ledger_store import SqlLedgerStore

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(store: SqlLedgerStore = Depends(get_store)):
    """
    Return application health status including database connectivity.

    If the database cannot answer a trivial query the service
    reports itself degraded rather than failing the request.
    """
    try:
        store.ping()
        db_status = "healthy"
    except StoreFailureError:
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "ledger-engine",
        "database": db_status,
    }
