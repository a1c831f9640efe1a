"""
Pipeline Orchestrator - Hauptsteuerung des Scraping-Prozesses.

Koordiniert Browser, Scraper und Export für alle Kantone.
"""

import logging
from typing import List, Optional, Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from vetscraper.client.browser import BrowserClient, NavigationError
from vetscraper.client.rate_limiter import RateLimiter
from vetscraper.scraper.search_ch import SearchChScraper
from vetscraper.export.csv_export import CSVExporter
from vetscraper.models.listing import ScrapingResult
from vetscraper.config.settings import Settings


logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    """Statistiken des Pipeline-Durchlaufs."""
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    consent_accepted: bool = False
    kantone_done: int = 0
    pages_scraped: int = 0
    listings_found: int = 0
    checkpoints_written: int = 0
    page_limit_hits: List[str] = field(default_factory=list)
    count_mismatches: List[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Dauer in Sekunden."""
        end = self.end_time or datetime.now()
        return (end - self.start_time).total_seconds()

    def to_dict(self) -> dict:
        """Konvertiert zu Dictionary."""
        return {
            "duration_seconds": self.duration_seconds,
            "consent_accepted": self.consent_accepted,
            "kantone_done": self.kantone_done,
            "pages_scraped": self.pages_scraped,
            "listings_found": self.listings_found,
            "checkpoints_written": self.checkpoints_written,
            "page_limit_hits": list(self.page_limit_hits),
            "count_mismatches": list(self.count_mismatches)
        }


class Pipeline:
    """
    Orchestriert den gesamten Scraping-Prozess.

    Flow:
    1. Browser starten, Startseite laden
    2. Cookie-Banner bestätigen (best-effort)
    3. Pro Kanton alle Ergebnisseiten sammeln (optional Zwischenstand schreiben)
    4. CSV schreiben
    5. Browser schließen (immer)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        browser: Optional[BrowserClient] = None
    ):
        """
        Initialisiert die Pipeline.

        Args:
            settings: Pipeline-Einstellungen.
            browser: Optional vorbereiteter Browser-Client (sonst aus Settings erstellt).
        """
        self._settings = settings or Settings()
        self._browser = browser or BrowserClient(self._settings.browser)
        self._rate_limiter = RateLimiter(self._settings.rate_limit)
        self._scraper = SearchChScraper(self._browser, self._rate_limiter, self._settings)
        self._exporter = CSVExporter(self._settings.export)

        # Callbacks
        self._progress_callback: Optional[Callable[[str, int, int], None]] = None

        # Stats
        self._stats = PipelineStats()

    def run(
        self,
        kantone: Optional[List[str]] = None,
        output_path: Optional[Path] = None
    ) -> ScrapingResult:
        """
        Führt die komplette Pipeline aus.

        Args:
            kantone: Kantone (überschreibt Settings).
            output_path: Ziel-CSV (überschreibt Settings).

        Returns:
            ScrapingResult mit allen Einträgen.

        Raises:
            NavigationError: Wenn eine Seite nicht geladen werden kann.
        """
        if kantone is None:
            kantone = self._settings.kantone
        if output_path is None:
            output_path = self._settings.export.output_path

        self._stats = PipelineStats()
        result = ScrapingResult(output_path=str(output_path))
        total = len(kantone)

        logger.info(f"=== Pipeline Start: {total} Kantone ===")

        try:
            self._open_start_page()

            for idx, kanton in enumerate(kantone, 1):
                self._report_progress(f"Sammle Daten für Kanton: {kanton}", idx, total)

                region_listings = self._scraper.collect_region(kanton)
                result.add_region(kanton, region_listings)
                self._stats.kantone_done += 1

                self._report_progress(
                    f"{len(region_listings)} Tierärzte gefunden für {kanton}", idx, total
                )

                if self._settings.export.flush_per_region and idx < total:
                    self._exporter.export(result.listings, output_path)
                    self._stats.checkpoints_written += 1
                    logger.debug(f"Zwischenstand nach {kanton}: {result.total} Einträge")

            self._exporter.export(result.listings, output_path)

        finally:
            self._collect_scraper_stats(result)
            self._stats.end_time = datetime.now()
            result.dauer_sekunden = self._stats.duration_seconds
            self._cleanup()

        logger.info(
            f"=== Pipeline abgeschlossen: {result.total} Einträge in "
            f"{self._stats.duration_seconds:.1f}s ==="
        )
        return result

    def _open_start_page(self) -> None:
        """Lädt die Startseite und bestätigt den Cookie-Banner."""
        self._browser.start()

        start_url = self._settings.scraper.base_url
        response = self._browser.navigate(start_url, wait_until="load")
        if not response.success:
            raise NavigationError(start_url, response.error or "unbekannter Fehler")

        self._stats.consent_accepted = self._browser.dismiss_consent_banner()

    def _collect_scraper_stats(self, result: ScrapingResult) -> None:
        """Übernimmt Scraper-Statistiken in Stats und Ergebnis."""
        scraper_stats = self._scraper.stats
        self._stats.pages_scraped = scraper_stats["pages_scraped"]
        self._stats.listings_found = scraper_stats["listings_found"]
        self._stats.page_limit_hits = scraper_stats["page_limit_hits"]
        self._stats.count_mismatches = scraper_stats["count_mismatches"]

        result.seiten_gescraped = self._stats.pages_scraped
        for warning in self._stats.page_limit_hits + self._stats.count_mismatches:
            result.add_warning(warning)

    def _cleanup(self) -> None:
        """Räumt Ressourcen auf."""
        self._browser.close()

    def set_progress_callback(
        self,
        callback: Callable[[str, int, int], None]
    ) -> None:
        """
        Setzt Callback für Progress-Updates.

        Args:
            callback: Funktion mit Signatur (message, current, total).
        """
        self._progress_callback = callback

    def _report_progress(self, message: str, current: int, total: int) -> None:
        """Meldet Progress."""
        if self._progress_callback:
            self._progress_callback(message, current, total)

    @property
    def stats(self) -> PipelineStats:
        """Gibt Pipeline-Statistiken zurück."""
        return self._stats

    def get_component_stats(self) -> dict:
        """Gibt detaillierte Statistiken aller Komponenten zurück."""
        return {
            "pipeline": self._stats.to_dict(),
            "rate_limiter": self._rate_limiter.get_stats(),
            "browser": self._browser.get_stats(),
            "scraper": self._scraper.stats
        }
