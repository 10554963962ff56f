"""Helper script to run pytest with coverage programmatically."""

import logging
import sys

import coverage
import pytest

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Start coverage measurement
# We are interested in the chained_steps package
cov = coverage.Coverage(source=["chained_steps"])
cov.start()

# Run pytest on the unit tests and the chained scenarios
exit_code = pytest.main(["tests/"])

# Stop coverage and generate report
cov.stop()
cov.save()

# Print report to console
cov.report(show_missing=True)
sys.exit(exit_code)
