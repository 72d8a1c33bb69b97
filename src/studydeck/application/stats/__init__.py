# Application Stats Package
from .metrics_calculator import MetricsCalculator
from .service import StatsService

__all__ = ["MetricsCalculator", "StatsService"]
