"""FastAPI entrypoint for expense tracker HTTP endpoints."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from backend.factory import build_finance_service
from backend.reporting import DashboardReportData, generate_dashboard_report_pdf
from backend.services.finance_service import FinanceService
from shared import config as _config
from shared.models import (
    Budget,
    BudgetComparison,
    BudgetFilters,
    BudgetOverview,
    Category,
    DashboardSummary,
    ServiceError,
    ServiceErrorCode,
    Transaction,
    TransactionFilters,
)


logger = logging.getLogger(__name__)


_STATUS_BY_ERROR_CODE = {
    ServiceErrorCode.VALIDATION_ERROR: 422,
    ServiceErrorCode.NOT_FOUND: 404,
    ServiceErrorCode.STORAGE_ERROR: 503,
}


@lru_cache(maxsize=1)
def get_finance_service() -> FinanceService:
    """Return the process-wide finance service."""

    return build_finance_service()


def _unwrap(result: Any) -> Any:
    if isinstance(result, ServiceError):
        raise HTTPException(
            status_code=_STATUS_BY_ERROR_CODE.get(result.code, 400),
            detail={
                "code": result.code.value,
                "message": result.message,
                "field_errors": result.field_errors,
            },
        )
    return result


app = FastAPI(title="Expense Tracker API")

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    logger.exception(
        "unhandled_exception method=%s path=%s exception_type=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""

    return {"status": "ok"}


@app.get("/finance/dashboard", response_model=DashboardSummary)
def get_dashboard() -> DashboardSummary:
    return get_finance_service().get_dashboard_summary()


@app.get("/finance/transactions", response_model=list[Transaction])
def list_transactions(
    month: str | None = None,
    type: str | None = None,
    category: str | None = None,
) -> list[Transaction]:
    try:
        filters = TransactionFilters(month=month, type=type, category=category)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid filters. Expected month=YYYY-MM and type=income|expense") from exc
    return get_finance_service().list_transactions(filters)


@app.post("/finance/transactions", response_model=Transaction, status_code=201)
def create_transaction(payload: dict[str, Any] = Body(...)) -> Transaction:
    return _unwrap(get_finance_service().create_transaction(payload))


@app.get("/finance/transactions/{transaction_id}", response_model=Transaction)
def get_transaction(transaction_id: str) -> Transaction:
    return _unwrap(get_finance_service().get_transaction(transaction_id))


@app.patch("/finance/transactions/{transaction_id}", response_model=Transaction)
def update_transaction(transaction_id: str, payload: dict[str, Any] = Body(...)) -> Transaction:
    return _unwrap(get_finance_service().update_transaction(transaction_id, payload))


@app.delete("/finance/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str) -> Response:
    _unwrap(get_finance_service().delete_transaction(transaction_id))
    return Response(status_code=204)


@app.get("/finance/budgets", response_model=list[Budget])
def list_budgets(month: str | None = None) -> list[Budget]:
    try:
        filters = BudgetFilters(month=month)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid filters. Expected month=YYYY-MM") from exc
    return _unwrap(get_finance_service().list_budgets(filters.month))


@app.post("/finance/budgets", response_model=Budget, status_code=201)
def create_budget(payload: dict[str, Any] = Body(...)) -> Budget:
    return _unwrap(get_finance_service().create_budget(payload))


@app.get("/finance/budgets/overview", response_model=BudgetOverview)
def get_budget_overview(month: str | None = None) -> BudgetOverview:
    return _unwrap(get_finance_service().get_budget_overview(month))


@app.get("/finance/budgets/comparison", response_model=list[BudgetComparison])
def get_budget_comparison(month: str | None = None) -> list[BudgetComparison]:
    return _unwrap(get_finance_service().compare_budgets(month))


@app.patch("/finance/budgets/{budget_id}", response_model=Budget)
def update_budget(budget_id: str, payload: dict[str, Any] = Body(...)) -> Budget:
    return _unwrap(get_finance_service().update_budget(budget_id, payload))


@app.delete("/finance/budgets/{budget_id}", status_code=204)
def delete_budget(budget_id: str) -> Response:
    _unwrap(get_finance_service().delete_budget(budget_id))
    return Response(status_code=204)


@app.get("/finance/categories", response_model=list[Category])
def list_categories(budgetable: bool = False) -> list[Category]:
    return get_finance_service().list_categories(budgetable_only=budgetable)


@app.get("/finance/reports/dashboard.pdf")
def get_dashboard_report_pdf(month: str | None = None) -> Response:
    service = get_finance_service()
    overview = _unwrap(service.get_budget_overview(month))
    logger.info("finance_dashboard_report_requested month=%s", overview.month)

    pdf_bytes = generate_dashboard_report_pdf(
        DashboardReportData(
            summary=service.get_dashboard_summary(),
            budget_overview=overview,
            currency=_config.currency(),
            generated_on=service.clock(),
        )
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="expense-report-{overview.month}.pdf"'},
    )
