"""Entrypoint for the record store HTTP API"""

import logging

from fastapi import FastAPI

from api.errors import register_error_handlers
from api.routes import records, repositories

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Git Record Store API",
    version="0.1.0",
    description="JSON records persisted and versioned in a git repository",
)

register_error_handlers(app)
app.include_router(repositories.router)
app.include_router(records.router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
