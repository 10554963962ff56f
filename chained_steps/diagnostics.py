"""Diagnostic step definitions backed by a Selenium WebDriver.

ChainedStepTester runs these around every step under the texts configured
in the ``diagnostics`` section. Register them on the registry the
SingleStepTester searches:

    diagnostics = BrowserDiagnostics(lambda: session.driver, config)
    diagnostics.register(registry)

Without a driver provider the session is read from the ``driver`` attribute
of the environment handed to the step.

Without a running browser session both steps pass immediately, so the same
registry can drive non-browser scenarios.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support.ui import WebDriverWait

from chained_steps.config import CoordinatorConfig, load_config
from chained_steps.definitions import StepDefinitionRegistry

logger = logging.getLogger(__name__)

DriverProvider = Callable[[], Optional[WebDriver]]


class BrowserDiagnostics:
    """Wait for pending javascript and look for errors shown on the page."""

    def __init__(
        self,
        driver_provider: Optional[DriverProvider] = None,
        config: Optional[CoordinatorConfig] = None,
    ) -> None:
        self._driver_provider = driver_provider
        self.config = (config or load_config()).diagnostics

    def _driver(self, env: Any) -> Optional[WebDriver]:
        # Without a provider the session is taken from the step environment.
        if self._driver_provider is None:
            return getattr(env, "driver", None)
        return self._driver_provider()

    def wait_for_pending_javascript(self, env: Any = None) -> None:
        """Block until the pending javascript script returns a truthy value.

        Raises:
            TimeoutException: If javascript is still pending after
                javascript_timeout seconds
        """
        driver = self._driver(env)
        if driver is None:
            return
        wait = WebDriverWait(
            driver,
            self.config.javascript_timeout,
            poll_frequency=self.config.poll_frequency,
        )
        wait.until(
            lambda d: d.execute_script(self.config.pending_js_script),
            message=(
                f"Javascript still pending after {self.config.javascript_timeout}s"
            ),
        )

    def look_for_exceptions(self, env: Any = None) -> None:
        """Fail if the page shows an error box or captured javascript errors.

        Raises:
            AssertionError: Listing every message found
        """
        driver = self._driver(env)
        if driver is None:
            return

        messages: list[str] = []
        for selector in self.config.error_selectors:
            for element in driver.find_elements(By.CSS_SELECTOR, selector):
                text = (element.text or "").strip()
                messages.append(f"{selector}: {text}" if text else selector)

        try:
            captured = driver.execute_script(self.config.captured_errors_script) or []
        except WebDriverException as e:
            # Pages without the capture hook still count as clean.
            logger.debug("Captured errors script failed: %s", e)
            captured = []
        messages.extend(f"javascript: {error}" for error in captured)

        if messages:
            raise AssertionError(
                "Errors found on the page:\n" + "\n".join(f"  - {m}" for m in messages)
            )

    def register(self, registry: StepDefinitionRegistry) -> None:
        registry.add(self.config.keyword, self.config.wait_step_text, self.wait_for_pending_javascript)
        registry.add(self.config.keyword, self.config.exceptions_step_text, self.look_for_exceptions)
