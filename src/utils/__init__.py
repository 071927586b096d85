"""
Shared infrastructure for the reconciliation tool

Provides:
- logging: console/JSON logging setup and context loggers
- metrics: Prometheus metrics for validation runs
- tracing: OpenTelemetry spans around runs and checks
"""

__version__ = "1.0.0"
__all__ = ["logging", "metrics", "tracing"]
