from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Settings, configure_logging, load_settings
from .display import format_parameters_for_display
from .llm import analyze_equation
from .polynomial import analyze_polynomial
from .schemas import (
    ConicResult,
    DisplayResponse,
    ErrorResponse,
    ParseRequest,
    ParseResponse,
    PolynomialAnalysis,
    PolynomialRequest,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings


app = FastAPI(title="Conic Assistant", version="0.1.0")


def _error(message: str, details: object = None) -> JSONResponse:
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True, exclude_none=True))


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("rejected %s: %s", request.url.path, exc.errors())
    return _error("Richiesta non valida", [err.get("msg") for err in exc.errors()])


@app.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict:
    return {"status": "ok", "ai": settings.ai_available}


@app.post("/conic/parse", response_model=ParseResponse, response_model_exclude_none=True, response_model_by_alias=True)
def parse_endpoint(payload: ParseRequest, settings: Settings = Depends(get_settings)):
    if payload.equation is None or not payload.equation.strip():
        return _error("Equazione non fornita")
    result, source = analyze_equation(payload.equation, settings=settings, use_ai=payload.use_ai)
    return ParseResponse(**result.model_dump(), source=source)


@app.post(
    "/conic/polynomial",
    response_model=PolynomialAnalysis,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
def polynomial_endpoint(payload: PolynomialRequest):
    if payload.equation is None or not payload.equation.strip():
        return _error("Equazione non fornita")
    return analyze_polynomial(payload.equation)


@app.post("/conic/display", response_model=DisplayResponse, response_model_by_alias=True)
def display_endpoint(result: ConicResult) -> DisplayResponse:
    return DisplayResponse(rows=format_parameters_for_display(result))
