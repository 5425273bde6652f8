"""
Test suite for the single-asset liquidity pool

Contains:
- tests/unit/          : Unit tests for individual modules and the composed pool
"""
