"""
Core modules for CostPilot.

This package contains the budget pipeline: parameter validation, rate
tables, line item construction, aggregation and result comparison.
"""
