"""
Core domain models, integer math primitives, and event contracts.

This module contains the foundational building blocks that are independent
of the pool's external collaborators (token, native currency, registry).
"""
