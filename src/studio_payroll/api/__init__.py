"""HTTP API over the rule manager and the payroll aggregator."""
