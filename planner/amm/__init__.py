"""AMM quote estimation."""

from planner.amm.constant_product import ConstantProductAMM, Quote, constant_product, quote

__all__ = ["ConstantProductAMM", "Quote", "constant_product", "quote"]
