"""
Core math modules

Целочисленные примитивы (uint256) и формулы constant-product кривой.
"""

# Uint Math
from src.core.math.uint_math import (
    # Constants
    BPS_DENOMINATOR,
    UINT256_MAX,
    WAD,
    # Checked arithmetic
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    mul_div,
    # Basis points
    apply_bps,
    validate_bps,
    # Validation
    validate_positive_uint,
    validate_uint,
)

# Constant-Product Curve
from src.core.math.curve import (
    FeeSplit,
    get_amount_out,
    is_degenerate,
    reserve_product,
    split_fee,
    spot_price,
)

__all__ = [
    # Uint Math — Constants
    "BPS_DENOMINATOR",
    "UINT256_MAX",
    "WAD",
    # Uint Math — Checked arithmetic
    "checked_add",
    "checked_div",
    "checked_mul",
    "checked_sub",
    "mul_div",
    # Uint Math — Basis points
    "apply_bps",
    "validate_bps",
    # Uint Math — Validation
    "validate_positive_uint",
    "validate_uint",
    # Curve — Types
    "FeeSplit",
    # Curve — Functions
    "get_amount_out",
    "is_degenerate",
    "reserve_product",
    "split_fee",
    "spot_price",
]
