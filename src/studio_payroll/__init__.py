"""Studio payroll: versioned monthly pay rules and instructor payroll aggregation."""

__version__ = "0.1.0"
