"""Main module for the portfolio tracker service."""
import logging
import math
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from portfolio_tracker.config import AppConfig, configure_logging
from portfolio_tracker.container import init_container
from portfolio_tracker.routers import (
    portfolio_router,
    quotes_router,
    rates_router,
    simulator_router,
)

logger = logging.getLogger(__name__)


def _printable_input(value):
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _printable_input(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_printable_input(v) for v in value]
    return value


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 with the usual detail list; Infinity/NaN inputs are echoed as strings."""
    errors = [
        {**error, "input": _printable_input(error["input"])} if "input" in error else error
        for error in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the FastAPI app. The container is created in the lifespan."""
    config = config or AppConfig.from_env()

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Build services at startup, start polling; stop and close on shutdown."""
        container = getattr(fastapi_app.state, "container", None) or init_container(config)
        database = container.database()
        database.init_db()

        board = container.market_board()
        board.start()

        fastapi_app.state.container = container
        fastapi_app.state.market_board = board
        fastapi_app.state.portfolio_service = container.portfolio_service()

        yield

        await board.close()
        database.dispose()

    fastapi_app = FastAPI(
        title="Portfolio Tracker",
        description="Argentine market quotes, investment portfolio valuation and simulators",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.add_exception_handler(RequestValidationError, validation_error_handler)
    fastapi_app.include_router(quotes_router)
    fastapi_app.include_router(rates_router)
    fastapi_app.include_router(portfolio_router)
    fastapi_app.include_router(simulator_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


def run():
    """Run the server (uvicorn). Use for `poetry run start`."""
    config = AppConfig.from_env()
    configure_logging(config.log_level)
    uvicorn.run(create_app(config), host="127.0.0.1", port=8001)


app = create_app()
