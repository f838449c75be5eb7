"""
Test suite for noisy-float

Contains:
- tests/unit/          : Unit tests for individual modules
"""
