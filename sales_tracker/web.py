from __future__ import annotations

import functools
import logging
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List

import anyio
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from sales_tracker.config import Settings
from sales_tracker.database import (
    category_breakdown,
    count_transactions,
    price_histogram,
    query_transactions,
    transaction_statistics,
)
from sales_tracker.errors import InvalidParameterError, QueryError
from sales_tracker.logging_config import setup_logging
from sales_tracker.seed import seed_database

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100
# SQLite binds OFFSET as a signed 64-bit integer.
MAX_PAGE = (2**63 - 1) // MAX_PER_PAGE


def _parse_month(value: str | None) -> int:
    if value is None or value.strip() == "":
        raise InvalidParameterError("month is required")
    try:
        month = int(value)
    except ValueError as exc:
        raise InvalidParameterError(f"month must be an integer between 1 and 12, got {value!r}") from exc
    if not 1 <= month <= 12:
        raise InvalidParameterError(f"month must be an integer between 1 and 12, got {value!r}")
    return month


def _parse_int(value: str | None, name: str, default: int, minimum: int = 1, maximum: int | None = None) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except ValueError as exc:
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}") from exc
    if number < minimum or (maximum is not None and number > maximum):
        upper = f" and at most {maximum}" if maximum is not None else ""
        raise InvalidParameterError(f"{name} must be at least {minimum}{upper}, got {number}")
    return number


def get_db_path(request: Request) -> str:
    return request.app.state.db_path


async def _run_query(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    try:
        return await anyio.to_thread.run_sync(functools.partial(func, *args, **kwargs))
    except Exception as exc:
        logger.exception("Query %s failed", func.__name__)
        raise QueryError(str(exc)) from exc


async def _gather(*calls: Callable[[], Any]) -> List[Any]:
    """Await every coroutine factory in *calls* concurrently.

    Results come back in call order. The first failure cancels the remaining
    calls and is re-raised on its own.
    """
    results: List[Any] = [None] * len(calls)

    async def _run(index: int, call: Callable[[], Any]) -> None:
        results[index] = await call()

    try:
        async with anyio.create_task_group() as tg:
            for index, call in enumerate(calls):
                tg.start_soon(_run, index, call)
    except BaseExceptionGroup as group:
        raise group.exceptions[0] from None
    return results


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application serving the sales dashboard API.

    The database path is stored on ``app.state`` and handed to each route
    through the ``get_db_path`` dependency. When ``seed_on_startup`` is set,
    the dataset is loaded before the first request is served and a
    ``SeedError`` aborts startup.
    """
    settings = settings or Settings()
    setup_logging(settings.log_level, settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.seed_on_startup:
            await anyio.to_thread.run_sync(
                functools.partial(
                    seed_database,
                    settings.db_path,
                    settings.seed_url,
                    timeout=settings.seed_timeout,
                )
            )
        yield

    app = FastAPI(title="Sales Dashboard API", lifespan=lifespan)
    app.state.db_path = settings.db_path

    @app.exception_handler(InvalidParameterError)
    async def invalid_parameter_handler(request: Request, exc: InvalidParameterError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(QueryError)
    async def query_error_handler(request: Request, exc: QueryError):
        return JSONResponse({"error": str(exc)}, status_code=500)

    @app.get("/transactions")
    async def list_transactions(
        month: str | None = None,
        search: str | None = None,
        page: str | None = None,
        perPage: str | None = None,
        db_path: str = Depends(get_db_path),
    ):
        return await _run_query(
            query_transactions,
            db_path,
            _parse_month(month),
            search=search or None,
            page=_parse_int(page, "page", default=1, maximum=MAX_PAGE),
            per_page=_parse_int(perPage, "perPage", default=10, maximum=MAX_PER_PAGE),
        )

    @app.get("/statistics")
    async def statistics(month: str | None = None, db_path: str = Depends(get_db_path)):
        return await _run_query(transaction_statistics, db_path, _parse_month(month))

    @app.get("/bar-chart")
    async def bar_chart(month: str | None = None, db_path: str = Depends(get_db_path)):
        return await _run_query(price_histogram, db_path, _parse_month(month))

    @app.get("/pie-chart")
    async def pie_chart(month: str | None = None, db_path: str = Depends(get_db_path)):
        return await _run_query(category_breakdown, db_path, _parse_month(month))

    @app.get("/combined")
    async def combined(month: str | None = None, db_path: str = Depends(get_db_path)):
        number = _parse_month(month)
        transactions, stats, bar, pie = await _gather(
            functools.partial(_run_query, query_transactions, db_path, number, per_page=None),
            functools.partial(_run_query, transaction_statistics, db_path, number),
            functools.partial(_run_query, price_histogram, db_path, number),
            functools.partial(_run_query, category_breakdown, db_path, number),
        )
        return {
            "transactions": transactions,
            "stats": stats,
            "barChart": bar,
            "pieChart": pie,
        }

    @app.get("/health")
    async def health(db_path: str = Depends(get_db_path)):
        return {"status": "ok", "transactions": await _run_query(count_transactions, db_path)}

    return app
