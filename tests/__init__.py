"""
Test suite for hypernum

Contains:
- tests/unit/          : Unit tests for core math, structures and configuration
"""
