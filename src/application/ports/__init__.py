"""
Application Layer Ports (Interfaces)

Contains Protocol definitions for dependency inversion.
Infrastructure Layer implements these protocols.
"""

from src.application.ports.metrics_sink import MetricsSinkProtocol

__all__ = ["MetricsSinkProtocol"]
