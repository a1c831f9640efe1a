"""
Rate Limiter für kontrollierte Request-Frequenz.

Aktuell ein flacher Abstand zwischen zwei Ergebnisseiten, gemessen ab dem
Ende der vorherigen Seite. Fehler erhöhen den Abstand exponentiell,
Erfolge setzen ihn zurück.
"""

import time
import random
import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlparse

from vetscraper.config.settings import RateLimitConfig


logger = logging.getLogger(__name__)


@dataclass
class DomainState:
    """Zustand für eine spezifische Domain."""
    request_count: int = 0
    last_request_time: float = 0.0
    consecutive_errors: int = 0


class RateLimiter:
    """
    Verwaltet den Abstand zwischen Requests pro Domain.

    Features:
    - Flacher Mindestabstand (optional mit Jitter)
    - Exponentieller Backoff bei gemeldeten Fehlern
    - Statistiken pro Domain
    """

    def __init__(self, config: Optional[RateLimitConfig] = None):
        """
        Initialisiert den Rate Limiter.

        Args:
            config: Rate Limit Konfiguration. Falls None, werden Defaults verwendet.
        """
        self._config = config or RateLimitConfig()
        self._domain_states: Dict[str, DomainState] = {}
        self._global_request_count = 0

    @staticmethod
    def domain_of(url: str) -> str:
        """Extrahiert die Domain aus einer URL (oder gibt den String zurück)."""
        netloc = urlparse(url).netloc
        return netloc.lower() if netloc else url.lower()

    def _get_domain_state(self, domain: str) -> DomainState:
        """Holt oder erstellt den State für eine Domain."""
        if domain not in self._domain_states:
            self._domain_states[domain] = DomainState()
        return self._domain_states[domain]

    def _calculate_delay(self, state: DomainState) -> float:
        """
        Berechnet den Delay basierend auf Konfiguration und Zustand.

        Returns:
            Delay in Sekunden.
        """
        delay = self._config.page_delay
        if self._config.jitter > 0:
            delay += random.uniform(0, self._config.jitter)

        # Exponentieller Backoff bei konsekutiven Fehlern
        if state.consecutive_errors > 0:
            delay *= self._config.backoff_factor ** state.consecutive_errors
            delay = min(delay, self._config.max_delay)

        return delay

    def wait(self, url_or_domain: str) -> float:
        """
        Wartet die angemessene Zeit vor dem nächsten Request.

        Der erste Request auf eine Domain wird nicht verzögert.

        Args:
            url_or_domain: Ziel-URL oder Domain.

        Returns:
            Die tatsächlich gewartete Zeit in Sekunden.
        """
        domain = self.domain_of(url_or_domain)
        state = self._get_domain_state(domain)

        actual_delay = 0.0
        if state.request_count > 0:
            delay = self._calculate_delay(state)
            time_since_last = time.monotonic() - state.last_request_time
            actual_delay = max(0.0, delay - time_since_last)

        if actual_delay > 0:
            logger.debug(f"Warte {actual_delay:.2f}s vor nächstem Request auf {domain}")
            time.sleep(actual_delay)

        state.request_count += 1
        state.last_request_time = time.monotonic()
        self._global_request_count += 1

        return actual_delay

    def report_success(self, url_or_domain: str) -> None:
        """Meldet einen erfolgreichen Request."""
        state = self._get_domain_state(self.domain_of(url_or_domain))
        state.consecutive_errors = 0

    def report_error(self, url_or_domain: str) -> None:
        """Meldet einen fehlgeschlagenen Request (erhöht den nächsten Delay)."""
        domain = self.domain_of(url_or_domain)
        state = self._get_domain_state(domain)
        state.consecutive_errors += 1
        state.last_request_time = time.monotonic()
        logger.debug(f"Fehler #{state.consecutive_errors} für {domain} gemeldet")

    def mark_finished(self, url_or_domain: str) -> None:
        """
        Markiert das Ende der Verarbeitung einer Seite.

        Der Abstand zum nächsten Request zählt ab hier, nicht ab dem Start
        der Navigation.
        """
        state = self._get_domain_state(self.domain_of(url_or_domain))
        state.last_request_time = time.monotonic()

    def get_stats(self, domain: Optional[str] = None) -> dict:
        """
        Gibt Statistiken zurück.

        Args:
            domain: Optional - spezifische Domain. Falls None, globale Stats.
        """
        if domain:
            state = self._get_domain_state(self.domain_of(domain))
            return {
                "domain": domain,
                "request_count": state.request_count,
                "consecutive_errors": state.consecutive_errors
            }
        return {
            "global_request_count": self._global_request_count,
            "tracked_domains": len(self._domain_states),
            "domains": list(self._domain_states.keys())
        }

    def reset(self, domain: Optional[str] = None) -> None:
        """Setzt den State zurück (eine Domain oder alles)."""
        if domain:
            self._domain_states.pop(self.domain_of(domain), None)
        else:
            self._domain_states.clear()
            self._global_request_count = 0
