"""
Service layer for the attendance analytics engine.
"""
