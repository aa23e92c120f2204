"""
Escalator Flow Analyzer

This package provides statistical analysis and reporting tools
for escalator crowd-flow data.

Components:
- FlowStatistics: Broker listener recording finishes and snapshots
"""

__version__ = "0.1.0"

from .statistics import FlowStatistics

__all__ = ['FlowStatistics']
