"""FastAPI router exposing expression evaluation and parsing."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from unitcalc.calculator import CALC_ERRORS, evaluate, parse
from unitcalc.numeric import format_number
from unitcalc.parser.nodes import to_dict
from unitcalc.units.builtin import default_registry
from unitcalc.units.display import format_exponent


router = APIRouter(prefix="/v1/calc", tags=["calc"])


def _error_detail(exc: Exception) -> Dict[str, str]:
    return {"kind": type(exc).__name__, "message": str(exc)}


class ExpressionReq(BaseModel):
    expression: str = Field(..., description="Expression such as '6 feet 1 inch -> inches'")


class UnitEntryModel(BaseModel):
    name: str
    exponent: str


class EvaluateResp(BaseModel):
    ok: bool
    result: str
    value: str
    units: List[UnitEntryModel]


@router.post("/evaluate", response_model=EvaluateResp)
def evaluate_expression(req: ExpressionReq) -> EvaluateResp:
    try:
        quantity = evaluate(req.expression)
    except CALC_ERRORS as exc:
        raise HTTPException(status_code=422, detail=_error_detail(exc))

    units = [
        UnitEntryModel(name=c.unit.singular_name, exponent=format_exponent(c.exponent))
        for c in quantity.unit.components
    ]
    return EvaluateResp(
        ok=True,
        result=str(quantity),
        value=format_number(quantity.value),
        units=units,
    )


class ParseResp(BaseModel):
    ok: bool
    ast: Dict[str, Any]


@router.post("/parse", response_model=ParseResp)
def parse_expression(req: ExpressionReq) -> ParseResp:
    try:
        tree = parse(req.expression)
    except CALC_ERRORS as exc:
        raise HTTPException(status_code=422, detail=_error_detail(exc))
    return ParseResp(ok=True, ast=to_dict(tree))


class UnitsResp(BaseModel):
    units: List[str]


@router.get("/units", response_model=UnitsResp)
def list_units() -> UnitsResp:
    return UnitsResp(units=default_registry().names())


__all__ = ["router"]
