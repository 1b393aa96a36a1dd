"""
Pydantic schemas for the attendance analytics engine.

- common: base classes, enums and filter schemas
- attendance: input attendance records
- analytics: snapshots, series and session state
"""
