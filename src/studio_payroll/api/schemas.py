"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from studio_payroll.calculators.types import (
    AttendanceRecord,
    Instructor,
    MonthlyPayrollAggregate,
    MonthlyPayrollSummary,
    PayrollRule,
    SalesRecord,
)


class ErrorResponse(BaseModel):
    """Error body returned for engine errors."""

    detail: str
    code: str


# ============================================================================
# Rule schemas
# ============================================================================


class RuleRatesPayload(BaseModel):
    """Rates submitted for the current month's rule.

    Amounts are validated by the rule manager, not here, so that negative,
    non-finite or sub-cent values report as INVALID_RATE. Strings pass through
    untouched for the same reason.
    """

    tier_1_to_5: Decimal | str
    tier_6_to_10: Decimal | str
    tier_11_to_15: Decimal | str
    tier_16_plus: Decimal | str
    sales_bonus_unit: Decimal | str


class RuleResponse(BaseModel):
    """Schema for a payroll rule version."""

    effective_month: str
    tier_1_to_5: Decimal
    tier_6_to_10: Decimal
    tier_11_to_15: Decimal
    tier_16_plus: Decimal
    sales_bonus_unit: Decimal
    locked: bool
    locked_at: datetime | None = None
    editable: bool | None = None

    @classmethod
    def from_rule(cls, rule: PayrollRule, editable: bool | None = None) -> "RuleResponse":
        return cls(
            effective_month=str(rule.effective_month),
            locked=rule.locked,
            locked_at=rule.locked_at,
            editable=editable,
            **rule.rates.as_dict(),
        )


class RuleHistoryResponse(BaseModel):
    """Schema for the rule history, most recent month first."""

    rules: list[RuleResponse]


# ============================================================================
# Payroll schemas
# ============================================================================


class InstructorSummaryResponse(BaseModel):
    """Schema for one instructor's monthly payroll."""

    instructor_id: str
    instructor_name: str
    class_count: int
    student_count: int
    attendance_pay: Decimal
    sales_bonus: Decimal
    total_pay: Decimal

    @classmethod
    def from_summary(cls, summary: MonthlyPayrollSummary) -> "InstructorSummaryResponse":
        return cls(
            instructor_id=summary.instructor_id,
            instructor_name=summary.instructor_name,
            class_count=summary.class_count,
            student_count=summary.student_count,
            attendance_pay=summary.attendance_pay,
            sales_bonus=summary.sales_bonus,
            total_pay=summary.total_pay,
        )


class CalculationResponse(BaseModel):
    """Schema for a completed monthly calculation."""

    month: str
    calculated: int
    total_pay: Decimal
    results: list[InstructorSummaryResponse]


class MonthlyPayrollResponse(BaseModel):
    """Schema for the stored payroll of a month."""

    month: str
    calculated: bool
    per_instructor: list[InstructorSummaryResponse]
    total_pay: Decimal
    total_classes: int
    instructor_count: int

    @classmethod
    def from_aggregate(cls, aggregate: MonthlyPayrollAggregate) -> "MonthlyPayrollResponse":
        return cls(
            month=str(aggregate.month),
            calculated=aggregate.is_calculated,
            per_instructor=[
                InstructorSummaryResponse.from_summary(s) for s in aggregate.per_instructor
            ],
            total_pay=aggregate.total_pay,
            total_classes=aggregate.total_classes,
            instructor_count=aggregate.instructor_count,
        )


class CalculatedMonthsResponse(BaseModel):
    """Schema for months with stored payroll, most recent first."""

    months: list[str]


# ============================================================================
# Record schemas
# ============================================================================


class InstructorCreate(BaseModel):
    """Schema for adding an instructor to the roster."""

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)

    def to_domain(self) -> Instructor:
        return Instructor(id=self.id, name=self.name)


class InstructorResponse(BaseModel):
    """Schema for a roster entry."""

    id: str
    name: str

    @classmethod
    def from_instructor(cls, instructor: Instructor) -> "InstructorResponse":
        return cls(id=instructor.id, name=instructor.name)


class InstructorListResponse(BaseModel):
    """Schema for the roster, ordered by id."""

    instructors: list[InstructorResponse]


class AttendanceCreate(BaseModel):
    """Schema for recording one taught class."""

    instructor_id: str = Field(min_length=1)
    course_id: str = Field(min_length=1)
    class_date: date
    student_count: int = Field(ge=0)

    def to_domain(self) -> AttendanceRecord:
        return AttendanceRecord(
            instructor_id=self.instructor_id,
            course_id=self.course_id,
            date=self.class_date,
            student_count=self.student_count,
        )


class AttendanceResponse(AttendanceCreate):
    """Schema for a stored class."""

    @classmethod
    def from_record(cls, record: AttendanceRecord) -> "AttendanceResponse":
        return cls(
            instructor_id=record.instructor_id,
            course_id=record.course_id,
            class_date=record.date,
            student_count=record.student_count,
        )


class SaleCreate(BaseModel):
    """Schema for recording one product sale."""

    instructor_id: str = Field(min_length=1)
    sale_date: date
    product: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0, decimal_places=2)

    def to_domain(self) -> SalesRecord:
        return SalesRecord(
            instructor_id=self.instructor_id,
            date=self.sale_date,
            product=self.product,
            quantity=self.quantity,
            unit_price=self.unit_price,
        )


class SaleResponse(SaleCreate):
    """Schema for a stored sale."""

    @classmethod
    def from_record(cls, record: SalesRecord) -> "SaleResponse":
        return cls(
            instructor_id=record.instructor_id,
            sale_date=record.date,
            product=record.product,
            quantity=record.quantity,
            unit_price=record.unit_price,
        )
