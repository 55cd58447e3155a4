from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.core.auth import token_service
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.services.upstream_client import upstream_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    setup_logging(settings.LOG_LEVEL)
    await token_service.initialize(settings)
    try:
        await upstream_client.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeUpstreamClient - continuing without upstream")
    yield
    await upstream_client.close()
    await token_service.close()


app = FastAPI(
    title="Employee API",
    description="Employee facade over the upstream mock employee provider",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Employee API"}
