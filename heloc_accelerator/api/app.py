"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from heloc_accelerator.api.routes import calculate
from heloc_accelerator.config import settings

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="HELOC Accelerator",
    description="Traditional vs HELOC sweep mortgage payoff comparison",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculate.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
