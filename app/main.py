import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.api.v1.routes.balances import router as balances_router
from app.api.v1.routes.expense import router as expense_router
from app.api.v1.routes.spending import router as spending_router
from app.core.config import settings
from app.core.exceptions import DataIntegrityError, SplitValidationError
from app.core.logging_config import configure_logging
from app.core.utils import money

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

@app.exception_handler(SplitValidationError)
async def split_validation_handler(request: Request, exc: SplitValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": exc.reason,
            "message": exc.message,
            "method": exc.method,
            "expected": money(exc.expected),
            "actual": money(exc.actual),
        },
    )

@app.exception_handler(DataIntegrityError)
async def data_integrity_handler(request: Request, exc: DataIntegrityError):
    logger.warning("Rejected snapshot: %s", exc)
    return JSONResponse(
        status_code=422,
        content={
            "error": "data_integrity",
            "record_id": exc.record_id,
            "message": exc.reason,
        },
    )

@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} is live"}

app.include_router(expense_router, prefix="/api/v1/expense")
app.include_router(balances_router, prefix="/api/v1/balances")
app.include_router(spending_router, prefix="/api/v1/spending")
