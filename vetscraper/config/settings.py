"""
Zentrale Konfiguration für den Tierarzt-Scraper (Suisse romande).

Alle konfigurierbaren Parameter an einem Ort.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path

from vetscraper.config.kantone import KANTONE_SUISSE_ROMANDE


DEFAULT_OUTPUT_FILENAME = "veterinaires_suisse_romande.csv"


@dataclass
class RateLimitConfig:
    """Konfiguration für Rate Limiting zwischen Ergebnisseiten."""

    # Flacher Delay zwischen zwei Seiten desselben Kantons
    page_delay: float = 1.0
    jitter: float = 0.0

    # Backoff nach Fehlern (aktuell nur für wiederholte Timeouts)
    backoff_factor: float = 2.0
    max_delay: float = 60.0


@dataclass
class ScraperConfig:
    """Konfiguration für den Scraper."""

    # Basis-URLs
    base_url: str = "https://tel.search.ch/"
    search_url: str = "https://tel.search.ch/recherche"

    # Suchbegriff
    search_term: str = "vétérinaire"

    # Pagination
    max_pages: int = 50

    # Timeouts (ms)
    result_wait_timeout: int = 5000


@dataclass
class BrowserConfig:
    """Konfiguration für den Playwright-Browser."""

    headless: bool = True
    navigation_timeout: int = 30000
    wait_until: str = "networkidle"
    viewport_width: int = 1920
    viewport_height: int = 1080
    locale: str = "fr-CH"
    timezone_id: str = "Europe/Zurich"

    # Cookie-Banner
    consent_button_text: str = "J'accepte"
    consent_timeout: int = 5000
    consent_settle_ms: int = 1000


@dataclass
class ExportConfig:
    """Konfiguration für Export."""

    # Default: aktuelles Verzeichnis (main.py schreibt neben das Programm)
    output_dir: Path = field(default_factory=Path.cwd)
    output_filename: str = DEFAULT_OUTPUT_FILENAME
    encoding: str = "utf-8"
    include_bom: bool = False

    # Zwischenstand nach jedem Kanton schreiben
    flush_per_region: bool = True

    @property
    def output_path(self) -> Path:
        """Vollständiger Pfad der CSV-Datei."""
        return Path(self.output_dir) / self.output_filename


@dataclass
class Settings:
    """Hauptkonfiguration - kombiniert alle Teilkonfigurationen."""

    # Suchparameter
    kantone: List[str] = field(default_factory=lambda: list(KANTONE_SUISSE_ROMANDE))

    # Teilkonfigurationen
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    scraper: ScraperConfig = field(default_factory=ScraperConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Logging
    verbose: bool = False
    debug: bool = False

    @classmethod
    def from_cli_args(
        cls,
        kantone: Optional[List[str]] = None,
        max_pages: int = 50,
        delay: float = 1.0,
        output: Optional[str] = None,
        headless: bool = True,
        checkpoint: bool = True,
        bom: bool = False,
        verbose: bool = False,
        debug: bool = False
    ) -> "Settings":
        """Erstellt Settings aus CLI-Argumenten."""
        settings = cls(verbose=verbose, debug=debug)

        if kantone:
            settings.kantone = list(kantone)

        settings.scraper.max_pages = max_pages
        settings.rate_limit.page_delay = delay
        settings.browser.headless = headless

        # Export-Konfiguration
        if output:
            output_path = Path(output)
            settings.export.output_dir = output_path.parent
            settings.export.output_filename = output_path.name
        settings.export.flush_per_region = checkpoint
        settings.export.include_bom = bom

        return settings
