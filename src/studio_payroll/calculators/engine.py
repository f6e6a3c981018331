"""Monthly payroll aggregation - main orchestrator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from studio_payroll.calculators.sales_bonus import sale_bonus
from studio_payroll.calculators.tiers import attendance_pay_for
from studio_payroll.calculators.types import (
    ZERO,
    Instructor,
    MonthlyPayrollAggregate,
    MonthlyPayrollSummary,
    PayrollRule,
)
from studio_payroll.errors import NoInstructorsError
from studio_payroll.months import Month

if TYPE_CHECKING:
    from studio_payroll.services.rule_manager import RuleManager
    from studio_payroll.stores.base import (
        AttendanceStore,
        InstructorDirectory,
        PayrollSummaryStore,
        SalesStore,
    )

logger = logging.getLogger(__name__)


class PayrollAggregator:
    """Computes and stores each instructor's pay for a month.

    Calculation pipeline:
    1) Resolve the month's rule through the rule manager
    2) Load the instructor roster (must not be empty)
    3) Per instructor: tier pay per class, package bonus per sale
    4) Replace the month's stored summaries with the new set

    Summaries carry no timestamps, so recalculating with unchanged inputs
    stores identical values. Instructors are independent of each other.
    """

    def __init__(
        self,
        rule_manager: RuleManager,
        instructors: InstructorDirectory,
        attendance: AttendanceStore,
        sales: SalesStore,
        summaries: PayrollSummaryStore,
    ):
        self.rule_manager = rule_manager
        self.instructors = instructors
        self.attendance = attendance
        self.sales = sales
        self.summaries = summaries

    async def calculate_month(self, month: Month) -> list[MonthlyPayrollSummary]:
        """Calculate and store payroll for every instructor on the roster.

        Raises:
            RuleNotFoundError: No rule for a month other than the current one.
            NoInstructorsError: The roster is empty.
        """
        rule = await self.rule_manager.resolve_effective_rule(month)

        roster = await self.instructors.list_all()
        if not roster:
            raise NoInstructorsError(month)

        results: list[MonthlyPayrollSummary] = []
        for instructor in roster:
            results.append(await self._calculate_instructor(instructor, month, rule))

        await self.summaries.replace_month(month, results)

        logger.info(
            "Calculated payroll for %s: %d instructors, total %s",
            month,
            len(results),
            sum((s.total_pay for s in results), ZERO),
        )
        return results

    async def _calculate_instructor(
        self, instructor: Instructor, month: Month, rule: PayrollRule
    ) -> MonthlyPayrollSummary:
        """Calculate one instructor's summary for a month."""
        start, end = month.first_day, month.last_day

        classes = await self.attendance.find_by_instructor_and_range(
            instructor.id, start, end
        )
        attendance_pay = ZERO
        student_count = 0
        for record in classes:
            attendance_pay += attendance_pay_for(record.student_count, rule)
            student_count += record.student_count

        sales = await self.sales.find_by_instructor_and_range(instructor.id, start, end)
        bonus = ZERO
        for sale in sales:
            bonus += sale_bonus(sale, rule)

        return MonthlyPayrollSummary(
            month=month,
            instructor_id=instructor.id,
            instructor_name=instructor.name,
            class_count=len(classes),
            student_count=student_count,
            attendance_pay=attendance_pay,
            sales_bonus=bonus,
            total_pay=attendance_pay + bonus,
        )

    async def summary_for_month(self, month: Month) -> MonthlyPayrollAggregate:
        """Totals over the stored summaries; zeroed when not yet calculated."""
        stored = await self.summaries.find_by_month(month)
        return MonthlyPayrollAggregate(
            month=month,
            per_instructor=tuple(stored),
            total_pay=sum((s.total_pay for s in stored), ZERO),
            total_classes=sum(s.class_count for s in stored),
            instructor_count=len(stored),
        )

    async def calculated_months(self) -> list[Month]:
        """Months with stored summaries, most recent first."""
        return sorted(await self.summaries.list_months(), reverse=True)
