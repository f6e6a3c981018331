"""Studio payroll command line interface.

Provides operational tools for:
- Roster and attendance/sales intake
- Monthly payroll calculation and reports
- Rule history and locking
- The payday job that locks last month's rule

Usage:
    python -m studio_payroll.cli init-db
    python -m studio_payroll.cli add-instructor --id coach-a --name Amy
    python -m studio_payroll.cli record-attendance --instructor coach-a --course yoga \
        --date 2026-02-03 --students 12
    python -m studio_payroll.cli record-sale --instructor coach-a --date 2026-02-03 \
        --product "ten-session package" --quantity 1 --unit-price 3000
    python -m studio_payroll.cli calculate --month 2026-02
    python -m studio_payroll.cli summary --month 2026-02
    python -m studio_payroll.cli lock --month 2026-01
    python -m studio_payroll.cli lock-previous --payment-day 5
    python -m studio_payroll.cli history
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studio_payroll.calculators.engine import PayrollAggregator
from studio_payroll.calculators.types import AttendanceRecord, Instructor, SalesRecord
from studio_payroll.config import get_settings
from studio_payroll.database import get_engine
from studio_payroll.errors import PayrollError
from studio_payroll.models import Base
from studio_payroll.months import Clock, Month
from studio_payroll.services.records import RecordService
from studio_payroll.services.rule_manager import RuleManager
from studio_payroll.stores.sql import (
    SqlAttendanceStore,
    SqlInstructorDirectory,
    SqlPayrollSummaryStore,
    SqlRuleStore,
    SqlSalesStore,
)


def parse_month(s: str) -> Month:
    """Parse a YYYY-MM month argument."""
    try:
        return Month.parse(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_date(s: str) -> date:
    """Parse a YYYY-MM-DD date argument."""
    try:
        return date.fromisoformat(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{s}', expected YYYY-MM-DD")


def parse_amount(s: str) -> Decimal:
    """Parse a money argument."""
    try:
        return Decimal(s)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"Invalid amount '{s}'")


class PayrollCli:
    """Studio payroll command line interface."""

    def __init__(self, database_url: str | None = None, clock: Clock | None = None) -> None:
        settings = get_settings()
        self.database_url = database_url or settings.database_url
        self.clock = clock or settings.clock()
        self.default_payment_day = settings.payment_day
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m studio_payroll.cli",
            description="Studio payroll operational tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser("init-db", help="Create database tables")

        add_instructor = subparsers.add_parser(
            "add-instructor",
            help="Add an instructor to the roster",
        )
        add_instructor.add_argument("--id", dest="instructor_id", required=True, help="Instructor ID")
        add_instructor.add_argument("--name", required=True, help="Display name")

        attendance = subparsers.add_parser(
            "record-attendance",
            help="Record one taught class",
        )
        attendance.add_argument("--instructor", required=True, help="Instructor ID")
        attendance.add_argument("--course", required=True, help="Course ID")
        attendance.add_argument("--date", type=parse_date, required=True, help="YYYY-MM-DD")
        attendance.add_argument("--students", type=int, required=True, help="Headcount")

        sale = subparsers.add_parser("record-sale", help="Record one product sale")
        sale.add_argument("--instructor", required=True, help="Instructor ID")
        sale.add_argument("--date", type=parse_date, required=True, help="YYYY-MM-DD")
        sale.add_argument("--product", required=True, help="Product label")
        sale.add_argument("--quantity", type=int, default=1, help="Units sold (default: 1)")
        sale.add_argument("--unit-price", type=parse_amount, required=True, help="Price per unit")

        calculate = subparsers.add_parser(
            "calculate",
            help="Calculate and store payroll for a month",
        )
        calculate.add_argument("--month", type=parse_month, required=True, help="YYYY-MM")

        summary = subparsers.add_parser(
            "summary",
            help="Show stored payroll for a month",
        )
        summary.add_argument("--month", type=parse_month, required=True, help="YYYY-MM")

        lock = subparsers.add_parser("lock", help="Lock a month's rule")
        lock.add_argument("--month", type=parse_month, required=True, help="YYYY-MM")

        lock_previous = subparsers.add_parser(
            "lock-previous",
            help="Lock last month's rule if today is the payment day",
        )
        lock_previous.add_argument(
            "--payment-day",
            type=int,
            default=None,
            help="Day of month payroll is paid (default: PAYMENT_DAY setting)",
        )

        subparsers.add_parser("history", help="List rule versions, most recent first")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[[argparse.Namespace], Awaitable[int]]] = {
            "init-db": self._cmd_init_db,
            "add-instructor": self._cmd_add_instructor,
            "record-attendance": self._cmd_record_attendance,
            "record-sale": self._cmd_record_sale,
            "calculate": self._cmd_calculate,
            "summary": self._cmd_summary,
            "lock": self._cmd_lock,
            "lock-previous": self._cmd_lock_previous,
            "history": self._cmd_history,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return asyncio.run(handler(parsed))
        except PayrollError as e:
            print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
            return 1

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """One session per command, committed on success."""
        engine = get_engine(self.database_url)
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with factory() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        finally:
            await engine.dispose()

    def _rule_manager(self, session: AsyncSession) -> RuleManager:
        return RuleManager(SqlRuleStore(session), clock=self.clock)

    def _records(self, session: AsyncSession) -> RecordService:
        return RecordService(
            SqlInstructorDirectory(session),
            SqlAttendanceStore(session),
            SqlSalesStore(session),
        )

    def _aggregator(self, session: AsyncSession) -> PayrollAggregator:
        return PayrollAggregator(
            self._rule_manager(session),
            SqlInstructorDirectory(session),
            SqlAttendanceStore(session),
            SqlSalesStore(session),
            SqlPayrollSummaryStore(session),
        )

    async def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create tables."""
        engine = get_engine(self.database_url)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        finally:
            await engine.dispose()
        print("Database tables created.")
        return 0

    async def _cmd_add_instructor(self, args: argparse.Namespace) -> int:
        """Add an instructor."""
        async with self._session() as session:
            instructor = await self._records(session).add_instructor(
                Instructor(id=args.instructor_id, name=args.name)
            )
        print(f"Added instructor {instructor.id} ({instructor.name})")
        return 0

    async def _cmd_record_attendance(self, args: argparse.Namespace) -> int:
        """Record a class."""
        record = AttendanceRecord(
            instructor_id=args.instructor,
            course_id=args.course,
            date=args.date,
            student_count=args.students,
        )
        async with self._session() as session:
            await self._records(session).record_attendance(record)
        print(f"Recorded {record.course_id} on {record.date}: {record.student_count} students")
        return 0

    async def _cmd_record_sale(self, args: argparse.Namespace) -> int:
        """Record a sale."""
        record = SalesRecord(
            instructor_id=args.instructor,
            date=args.date,
            product=args.product,
            quantity=args.quantity,
            unit_price=args.unit_price,
        )
        async with self._session() as session:
            await self._records(session).record_sale(record)
        print(f"Recorded sale on {record.date}: {record.quantity} x {record.product}")
        return 0

    async def _cmd_calculate(self, args: argparse.Namespace) -> int:
        """Calculate payroll for a month."""
        async with self._session() as session:
            results = await self._aggregator(session).calculate_month(args.month)

        print(f"Payroll for {args.month}: {len(results)} instructor(s)")
        for r in results:
            print(
                f"  {r.instructor_name:<20} classes={r.class_count:<4} "
                f"attendance={r.attendance_pay:>12,.2f} "
                f"bonus={r.sales_bonus:>10,.2f} total={r.total_pay:>12,.2f}"
            )
        return 0

    async def _cmd_summary(self, args: argparse.Namespace) -> int:
        """Show stored payroll for a month."""
        async with self._session() as session:
            aggregate = await self._aggregator(session).summary_for_month(args.month)

        if not aggregate.is_calculated:
            print(f"Payroll for {args.month} has not been calculated.")
            return 0

        print(f"Payroll for {args.month}")
        for s in aggregate.per_instructor:
            print(f"  {s.instructor_name:<20} {s.total_pay:>12,.2f}")
        print(f"\n  Instructors: {aggregate.instructor_count}")
        print(f"  Classes:     {aggregate.total_classes}")
        print(f"  Total pay:   {aggregate.total_pay:,.2f}")
        return 0

    async def _cmd_lock(self, args: argparse.Namespace) -> int:
        """Lock a month's rule."""
        async with self._session() as session:
            rule = await self._rule_manager(session).lock_rule(args.month)
        print(f"Rule for {rule.effective_month} locked at {rule.locked_at}")
        return 0

    async def _cmd_lock_previous(self, args: argparse.Namespace) -> int:
        """Payday job."""
        payment_day = args.payment_day or self.default_payment_day
        async with self._session() as session:
            rule = await self._rule_manager(session).lock_previous_month_if_payday(payment_day)

        if rule is None:
            print("Nothing to lock today.")
        else:
            print(f"Rule for {rule.effective_month} locked at {rule.locked_at}")
        return 0

    async def _cmd_history(self, args: argparse.Namespace) -> int:
        """List rule versions."""
        async with self._session() as session:
            rules = await self._rule_manager(session).history()

        if not rules:
            print("No rules yet.")
            return 0

        print(f"{'Month':<8} {'1-5':>8} {'6-10':>8} {'11-15':>8} {'16+':>8} {'Bonus':>8}  Status")
        for r in rules:
            state = "open"
            if r.locked:
                state = f"locked {r.locked_at:%Y-%m-%d}" if r.locked_at else "locked"
            print(
                f"{str(r.effective_month):<8} {r.tier_1_to_5:>8} {r.tier_6_to_10:>8} "
                f"{r.tier_11_to_15:>8} {r.tier_16_plus:>8} {r.sales_bonus_unit:>8}  {state}"
            )
        return 0


def main() -> int:
    """CLI entry point."""
    logging.basicConfig(level=get_settings().log_level)
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
