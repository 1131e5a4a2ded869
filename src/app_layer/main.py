"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.app_layer.routers import customers, roasting
from src.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Roast simulation API ready")
    yield


app = FastAPI(
    title="Roast-Sim: Coffee Roasting & Customer Learning API",
    description="로스팅 화학 시뮬레이션과 고객 취향 학습",
    version="0.3.0",
    lifespan=lifespan,
)

app.include_router(
    roasting.router, prefix="/api/v1/roasting", tags=["roasting"]
)
app.include_router(
    customers.router, prefix="/api/v1/customers", tags=["customers"]
)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
