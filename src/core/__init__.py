"""
Core domain models, integer math primitives, and state contracts.

This module contains the foundational building blocks that are independent
of the ledger, the registries and the orchestration layer.
"""
