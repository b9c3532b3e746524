"""
FreightOps back office: FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI

from freight_ops.config import get_settings
from freight_ops.api.accounting import router as accounting_router
from freight_ops.api.health import router as health_router
from freight_ops.api.ltas import router as ltas_router
from freight_ops.api.master_data import router as master_data_router
from freight_ops.api.payments import router as payments_router
from freight_ops.api.treasury import router as treasury_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Air waybill workflow, pricing and bookkeeping for a freight forwarder",
)

# Register routers
app.include_router(health_router)
app.include_router(master_data_router)
app.include_router(ltas_router)
app.include_router(payments_router)
app.include_router(accounting_router)
app.include_router(treasury_router)
