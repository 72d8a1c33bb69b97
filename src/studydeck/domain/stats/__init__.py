# Domain Stats Package
from .ports import StatsStore

__all__ = ["StatsStore"]
