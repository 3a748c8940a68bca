"""Time Mentor Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - emotion/: Sentiment scorer, aggregate analyzer, snapshot builder, config
  - automation/: Reminder policy and reminder queue
  - test_logging_config.py: structlog setup and sample redaction

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/emotion/

    # With coverage
    pytest --cov=mentor --cov-report=term-missing
"""
