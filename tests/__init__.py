#!/usr/bin/env python3
"""
Test suite for LabMatch.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v

Database tests use in-memory SQLite and need no external services. Redis is
always mocked.
"""
