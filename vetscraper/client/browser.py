"""
Browser-Client für JavaScript-Rendering.

Verwendet Playwright für die Navigation auf tel.search.ch.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from playwright.sync_api import (
    sync_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout
)

from vetscraper.config.settings import BrowserConfig


logger = logging.getLogger(__name__)


class NavigationError(Exception):
    """Eine Seite konnte nicht geladen werden."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Navigation zu {url} fehlgeschlagen: {reason}")
        self.url = url
        self.reason = reason


@dataclass
class BrowserResponse:
    """Antwort vom Browser."""
    success: bool
    content: str
    url: str
    final_url: str
    error: Optional[str] = None


class BrowserClient:
    """
    Playwright-basierter Browser.

    Features:
    - Chromium (headless oder sichtbar)
    - Navigation mit Warten auf Netzwerk-Ruhe
    - Best-effort Bestätigung des Cookie-Banners
    """

    def __init__(self, config: Optional[BrowserConfig] = None):
        """
        Initialisiert den BrowserClient.

        Args:
            config: Browser-Konfiguration.
        """
        self._config = config or BrowserConfig()
        self._timeout = self._config.navigation_timeout
        self._viewport = {
            "width": self._config.viewport_width,
            "height": self._config.viewport_height
        }

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

        self._request_count = 0

        logger.info(f"BrowserClient initialisiert (headless={self._config.headless})")

    def start(self) -> None:
        """Startet den Browser."""
        if self._browser is not None:
            return

        self._playwright = sync_playwright().start()

        launch_options: Dict[str, Any] = {
            "headless": self._config.headless,
        }
        if not self._config.headless:
            launch_options["args"] = ["--start-maximized"]

        self._browser = self._playwright.chromium.launch(**launch_options)
        self._create_context()

        logger.info("Browser gestartet")

    def _create_context(self) -> None:
        """Erstellt einen neuen Browser-Context."""
        context_options: Dict[str, Any] = {
            "viewport": self._viewport,
            "locale": self._config.locale,
            "timezone_id": self._config.timezone_id,
        }

        self._context = self._browser.new_context(**context_options)
        self._page = self._context.new_page()

    def navigate(self, url: str, wait_until: Optional[str] = None) -> BrowserResponse:
        """
        Navigiert zu einer URL.

        Args:
            url: Die Ziel-URL.
            wait_until: Warten bis Event ("load", "domcontentloaded", "networkidle").
                Default aus der Konfiguration.

        Returns:
            BrowserResponse mit Inhalt oder Fehler.
        """
        if not self._page:
            self.start()

        self._request_count += 1

        try:
            self._page.goto(
                url,
                wait_until=wait_until or self._config.wait_until,
                timeout=self._timeout
            )

            return BrowserResponse(
                success=True,
                content=self._page.content(),
                url=url,
                final_url=self._page.url
            )

        except PlaywrightTimeout as e:
            return BrowserResponse(
                success=False,
                content="",
                url=url,
                final_url=url,
                error=f"Timeout: {e}"
            )

        except Exception as e:
            logger.error(f"Browser-Fehler bei {url}: {e}")
            return BrowserResponse(
                success=False,
                content="",
                url=url,
                final_url=url,
                error=str(e)
            )

    def dismiss_consent_banner(self) -> bool:
        """
        Bestätigt den Cookie-Banner, falls vorhanden.

        Wartet begrenzt auf Buttons und klickt den, dessen Text den
        konfigurierten Zustimmungstext enthält. Fehlt der Banner, wird
        nur geloggt.

        Returns:
            True wenn ein Button geklickt wurde.
        """
        if not self._page:
            return False

        try:
            self._page.wait_for_selector("button", timeout=self._config.consent_timeout)

            button = self._page.locator(
                "button", has_text=self._config.consent_button_text
            ).first
            if button.count() == 0:
                logger.info("Kein Zustimmungs-Button im Cookie-Banner gefunden")
                return False

            button.click(timeout=self._config.consent_timeout)

            # Banner ausblenden lassen
            self._page.wait_for_timeout(self._config.consent_settle_ms)
            logger.info("Cookie-Banner bestätigt")
            return True

        except PlaywrightTimeout:
            logger.info("Kein Cookie-Banner erkannt oder bereits bestätigt")
            return False

        except PlaywrightError as e:
            logger.info(f"Cookie-Banner konnte nicht bestätigt werden: {e}")
            return False

    def wait_for_selector(
        self,
        selector: str,
        timeout: Optional[int] = None,
        state: str = "attached"
    ) -> bool:
        """
        Wartet auf ein Element.

        Args:
            selector: CSS-Selector.
            timeout: Timeout in ms (default: Navigations-Timeout).
            state: "visible", "hidden", "attached", "detached".

        Returns:
            True wenn Element gefunden.
        """
        if not self._page:
            return False

        try:
            self._page.wait_for_selector(
                selector,
                timeout=timeout or self._timeout,
                state=state
            )
            return True
        except PlaywrightTimeout:
            return False

    def get_content(self) -> str:
        """Gibt den aktuellen Seiteninhalt zurück."""
        if not self._page:
            return ""
        return self._page.content()

    def close(self) -> None:
        """Schließt den Browser."""
        if self._context:
            self._context.close()
            self._context = None
            self._page = None

        if self._browser:
            self._browser.close()
            self._browser = None

        if self._playwright:
            self._playwright.stop()
            self._playwright = None

        logger.info("Browser geschlossen")

    def get_stats(self) -> Dict:
        """Gibt Statistiken zurück."""
        return {
            "request_count": self._request_count,
            "browser_running": self._browser is not None,
            "headless": self._config.headless
        }

