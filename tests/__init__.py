"""
Test suite for the calculation engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
