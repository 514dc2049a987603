"""
Third Time - Proportional Break Scheduler

A work/break scheduling engine where each break is a fixed fraction of the
work interval just completed, adjusted by a running bank of break time
owed to or by the user.
"""

__version__ = "0.1.0"
__author__ = "Third Time Team"
