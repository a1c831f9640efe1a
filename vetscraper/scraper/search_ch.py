"""
tel.search.ch Scraper.

Lädt die Suchergebnis-Seiten eines Kantons nacheinander und sammelt die
Tierarzt-Einträge, bis kein "Nächste Seite"-Link mehr vorhanden ist.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

from vetscraper.client.browser import BrowserClient, NavigationError
from vetscraper.client.rate_limiter import RateLimiter
from vetscraper.parser.listing import ListingParser, RESULT_SELECTORS
from vetscraper.models.listing import Listing
from vetscraper.config.settings import Settings


logger = logging.getLogger(__name__)


# Zeichen, die encodeURIComponent unkodiert lässt
URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Kodiert wie JavaScripts encodeURIComponent (UTF-8, Prozent-Kodierung)."""
    return quote(value, safe=URI_COMPONENT_SAFE)


class SearchChScraper:
    """
    Scraper für tel.search.ch

    Pro Kanton:
    1. Ergebnisseite laden (Netzwerk-Ruhe abwarten)
    2. Einträge extrahieren
    3. Pagination prüfen, ggf. nach Pause nächste Seite
    """

    def __init__(
        self,
        browser: BrowserClient,
        rate_limiter: Optional[RateLimiter] = None,
        settings: Optional[Settings] = None
    ):
        """
        Initialisiert den Scraper.

        Args:
            browser: Gestarteter Browser-Client.
            rate_limiter: Rate Limiter für die Pausen zwischen Seiten.
            settings: Scraper-Einstellungen.
        """
        self._browser = browser
        self._settings = settings or Settings()
        self._rate_limiter = rate_limiter or RateLimiter(self._settings.rate_limit)
        self._parser = ListingParser()

        # Statistiken
        self._pages_scraped = 0
        self._listings_found = 0
        self._page_limit_hits: List[str] = []
        self._count_mismatches: List[str] = []

    def build_search_url(self, kanton: str, page: int = 1) -> str:
        """
        Baut die Such-URL.

        URL-Format: https://tel.search.ch/recherche?was={begriff}&wo={kanton}&page={page}
        """
        config = self._settings.scraper
        return (
            f"{config.search_url}"
            f"?was={encode_uri_component(config.search_term)}"
            f"&wo={encode_uri_component(kanton)}"
            f"&page={page}"
        )

    def collect_region(self, kanton: str, max_pages: Optional[int] = None) -> List[Listing]:
        """
        Sammelt alle Einträge eines Kantons.

        Args:
            kanton: Kanton (z.B. "Vaud").
            max_pages: Obergrenze für Seiten (None = aus Settings).

        Returns:
            Einträge in Seiten-Reihenfolge.

        Raises:
            NavigationError: Wenn eine Ergebnisseite nicht geladen werden kann.
        """
        if max_pages is None:
            max_pages = self._settings.scraper.max_pages

        listings: List[Listing] = []
        expected_total: Optional[int] = None
        has_next = True
        page = 1

        logger.info(f"Starte Suche in '{kanton}' (max {max_pages} Seiten)")

        while has_next:
            if page > max_pages:
                message = f"{kanton}: Seitenlimit ({max_pages}) erreicht, Pagination abgebrochen"
                logger.warning(message)
                self._page_limit_hits.append(message)
                break

            search_url = self.build_search_url(kanton, page)
            html = self._load_page(search_url)

            page_listings = self._parser.parse(html, kanton, search_url)
            listings.extend(page_listings)
            self._listings_found += len(page_listings)

            if page == 1:
                expected_total = self._parser.extract_total_results(html)

            has_next = self._parser.has_next_page(html)
            self._rate_limiter.mark_finished(search_url)
            logger.debug(
                f"{kanton} Seite {page}: {len(page_listings)} Einträge, "
                f"weitere Seite: {'ja' if has_next else 'nein'}"
            )
            page += 1

        self._check_total(kanton, len(listings), expected_total)

        logger.info(f"Suche in '{kanton}' abgeschlossen: {len(listings)} Einträge")
        return listings

    def _load_page(self, url: str) -> str:
        """
        Lädt eine Ergebnisseite und gibt den HTML-Inhalt zurück.

        Ein Timeout beim Warten auf Ergebniskarten ist kein Fehler: die
        Seite wird trotzdem geparst (und liefert dann ggf. nichts).
        """
        self._rate_limiter.wait(url)

        logger.debug(f"Lade Seite: {url}")
        response = self._browser.navigate(url)

        if not response.success:
            self._rate_limiter.report_error(url)
            raise NavigationError(url, response.error or "unbekannter Fehler")

        self._rate_limiter.report_success(url)
        self._pages_scraped += 1

        found = self._browser.wait_for_selector(
            ", ".join(RESULT_SELECTORS),
            timeout=self._settings.scraper.result_wait_timeout
        )
        if not found:
            logger.debug(f"Keine Ergebniskarten auf {url}")
            return response.content

        return self._browser.get_content()

    def _check_total(self, kanton: str, collected: int, expected: Optional[int]) -> None:
        """Vergleicht gesammelte Anzahl mit der angezeigten Gesamtanzahl."""
        if expected is None:
            return
        if collected < expected:
            message = f"{kanton}: {collected} von {expected} angezeigten Einträgen gesammelt"
            logger.warning(message)
            self._count_mismatches.append(message)

    @property
    def stats(self) -> dict:
        """Gibt Scraper-Statistiken zurück."""
        return {
            "pages_scraped": self._pages_scraped,
            "listings_found": self._listings_found,
            "page_limit_hits": list(self._page_limit_hits),
            "count_mismatches": list(self._count_mismatches),
            "parser": self._parser.stats
        }
