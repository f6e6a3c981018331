"""Store contracts and their implementations."""

from studio_payroll.stores.base import (
    AttendanceStore,
    InstructorDirectory,
    PayrollSummaryStore,
    RuleStore,
    SalesStore,
)
from studio_payroll.stores.memory import (
    InMemoryAttendanceStore,
    InMemoryInstructorDirectory,
    InMemoryPayrollSummaryStore,
    InMemoryRuleStore,
    InMemorySalesStore,
)
from studio_payroll.stores.sql import (
    SqlAttendanceStore,
    SqlInstructorDirectory,
    SqlPayrollSummaryStore,
    SqlRuleStore,
    SqlSalesStore,
)

__all__ = [
    "AttendanceStore",
    "InstructorDirectory",
    "PayrollSummaryStore",
    "RuleStore",
    "SalesStore",
    "InMemoryAttendanceStore",
    "InMemoryInstructorDirectory",
    "InMemoryPayrollSummaryStore",
    "InMemoryRuleStore",
    "InMemorySalesStore",
    "SqlAttendanceStore",
    "SqlInstructorDirectory",
    "SqlPayrollSummaryStore",
    "SqlRuleStore",
    "SqlSalesStore",
]
