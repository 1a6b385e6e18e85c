"""
Configuration loading for CostPilot.
"""
