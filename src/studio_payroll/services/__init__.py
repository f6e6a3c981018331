"""Studio payroll services."""

from studio_payroll.services.records import RecordService
from studio_payroll.services.rule_manager import RuleManager, coerce_rate, coerce_rates

__all__ = [
    "RecordService",
    "RuleManager",
    "coerce_rate",
    "coerce_rates",
]
