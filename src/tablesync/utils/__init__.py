"""
Ambient utilities for tablesync

Provides:
- logging: structured and console logging setup
- tracing: OpenTelemetry spans around reconcile and render operations
"""

__all__ = ["logging", "tracing"]
