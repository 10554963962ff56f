"""Step definitions package for the chained scenario tests.

Every module registers its definitions on ``registry`` at import time. All
modules are imported by the root conftest.py, which copies the registry for
each test.
"""

from chained_steps.definitions import StepDefinitionRegistry

registry = StepDefinitionRegistry()
