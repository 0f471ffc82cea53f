"""
MedReminder Test Suite
======================

This package contains all tests for the MedReminder reminder and adherence system.

Test Structure:
- test_tools/: Offset parsing, planning, notification channels, adherence metrics
- test_services/: Repository and analytics services against in-memory SQLite
- test_actions/: Reminder scheduler runs, delivery and cancellation
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_api/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "integration"
"""
