"""
Command-line interface for CostPilot.
"""
