"""Payroll rule API endpoints."""

from fastapi import APIRouter, status

from studio_payroll.api.dependencies import MonthPath, RuleManagerDep
from studio_payroll.api.schemas import (
    ErrorResponse,
    RuleHistoryResponse,
    RuleRatesPayload,
    RuleResponse,
)

router = APIRouter(prefix="/rules", tags=["rules"])


@router.get("", response_model=RuleResponse)
async def get_current_rule(rule_manager: RuleManagerDep) -> RuleResponse:
    """Get the current month's rule, creating it from last month's if missing."""
    month = rule_manager.current_month()
    rule = await rule_manager.resolve_effective_rule(month)
    return RuleResponse.from_rule(rule, editable=await rule_manager.is_editable(month))


@router.get("/history", response_model=RuleHistoryResponse)
async def get_rule_history(rule_manager: RuleManagerDep) -> RuleHistoryResponse:
    """List every rule version, most recent month first."""
    rules = await rule_manager.history()
    return RuleHistoryResponse(rules=[RuleResponse.from_rule(r) for r in rules])


@router.get(
    "/{month}",
    response_model=RuleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_rule(month: MonthPath, rule_manager: RuleManagerDep) -> RuleResponse:
    """Get the rule in effect for a month."""
    rule = await rule_manager.resolve_effective_rule(month)
    return RuleResponse.from_rule(rule, editable=await rule_manager.is_editable(month))


@router.put(
    "/{month}",
    response_model=RuleResponse,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_rule(
    month: MonthPath,
    payload: RuleRatesPayload,
    rule_manager: RuleManagerDep,
) -> RuleResponse:
    """Replace the rates of the current month's rule."""
    rule = await rule_manager.update_rule(month, payload.model_dump())
    return RuleResponse.from_rule(rule, editable=await rule_manager.is_editable(month))


@router.post(
    "/{month}/lock",
    response_model=RuleResponse,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorResponse}},
)
async def lock_rule(month: MonthPath, rule_manager: RuleManagerDep) -> RuleResponse:
    """Lock a month's rule. Idempotent."""
    rule = await rule_manager.lock_rule(month)
    return RuleResponse.from_rule(rule, editable=False)
