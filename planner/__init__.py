"""Conditional market trade planner."""

__version__ = "0.1.0"

from planner.redeem import RedemptionPlanner  # noqa: E402
from planner.service import MarketService  # noqa: E402
from planner.trade import TradePlanner  # noqa: E402

__all__ = ["MarketService", "RedemptionPlanner", "TradePlanner", "__version__"]
