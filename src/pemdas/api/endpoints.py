"""Evaluation API endpoints."""

import logging
import math
from decimal import Decimal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pemdas.config import CalculatorConfig
from pemdas.errors import EvaluationError
from pemdas.evaluator import evaluate_from_string
from pemdas.numeric import Number, NumberDomain, format_integer, is_wide_integer

logger = logging.getLogger(__name__)


class EvaluateRequest(BaseModel):
    expression: str
    domain: NumberDomain | None = None
    strict: bool | None = None


def _json_number(value: Number) -> int | float | str:
    """Values JSON cannot carry faithfully (inf, nan, decimals, huge ints) go as strings."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, int) and is_wide_integer(value):
        return format_integer(value)
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "nan"
        return "inf" if value > 0 else "-inf"
    return value


def create_evaluate_router() -> APIRouter:
    router = APIRouter(prefix="/api")

    @router.get("/health")
    async def health():
        return {"status": "ok"}

    @router.post("/evaluate")
    def evaluate_expression(body: EvaluateRequest, request: Request):
        config: CalculatorConfig = request.app.state.config
        domain = body.domain or config.domain
        strict = config.strict if body.strict is None else body.strict

        try:
            result = evaluate_from_string(body.expression, strict=strict, domain=domain)
        except EvaluationError as e:
            logger.info("Evaluation of %r failed: %s", body.expression, e)
            return JSONResponse(status_code=422, content={"error": e.to_dict()})

        return {
            "expression": body.expression,
            "domain": domain.value,
            "result": _json_number(result),
        }

    return router
