"""
Attendance analytics engine.

Turns a flat list of per-person attendance records into filtered,
time-bucketed, trend-annotated series and keeps cross-filter and
drill-down navigation state for a dashboard session.
"""

__version__ = "1.0.0"
