"""
Test suite for Transfer Guard

Contains:
- tests/unit/          : Unit tests for individual modules and end-to-end transfer scenarios
"""
