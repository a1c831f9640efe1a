"""
CSV Export für Tierarzt-Einträge.

Format wie die ursprüngliche Ausgabe: französische Kopfzeile ohne
Anführungszeichen, jeder Wert in Anführungszeichen, Zeilen durch "\\n"
getrennt, kein abschließender Zeilenumbruch.
"""

import csv
import io
import logging
from typing import List, Optional
from pathlib import Path

from vetscraper.models.listing import Listing
from vetscraper.config.settings import ExportConfig


logger = logging.getLogger(__name__)


# Spalten in Ausgabe-Reihenfolge
COLUMNS = [
    "Nom",
    "Adresse",
    "Téléphone",
    "Email",
    "Site Web",
    "Spécialité",
    "Canton",
]

LINE_TERMINATOR = "\n"


class CSVExporter:
    """
    Exportiert Tierarzt-Einträge nach CSV.

    Features:
    - Feste Spaltenreihenfolge
    - Alle Werte gequotet, eingebettete Anführungszeichen verdoppelt
    - UTF-8, optional mit BOM (Excel-kompatibel)
    """

    def __init__(self, config: Optional[ExportConfig] = None):
        """
        Initialisiert den CSV-Exporter.

        Args:
            config: Export-Konfiguration.
        """
        self._config = config or ExportConfig()

    def to_csv(self, listings: List[Listing]) -> str:
        """
        Rendert die Einträge als CSV-Text.

        Args:
            listings: Einträge in Ausgabe-Reihenfolge.

        Returns:
            CSV-Text ohne abschließenden Zeilenumbruch.
        """
        buffer = io.StringIO()

        # Kopfzeile ungequotet (keine Sonderzeichen in den Labels)
        header_writer = csv.writer(
            buffer,
            quoting=csv.QUOTE_MINIMAL,
            lineterminator=LINE_TERMINATOR
        )
        header_writer.writerow(COLUMNS)

        row_writer = csv.writer(
            buffer,
            quoting=csv.QUOTE_ALL,
            doublequote=True,
            lineterminator=LINE_TERMINATOR
        )
        for listing in listings:
            row_writer.writerow(listing.to_row())

        text = buffer.getvalue()
        if text.endswith(LINE_TERMINATOR):
            text = text[:-len(LINE_TERMINATOR)]
        return text

    def export(self, listings: List[Listing], output_path: Optional[Path] = None) -> Path:
        """
        Schreibt die Einträge in eine CSV-Datei (überschreibt bestehende).

        Args:
            listings: Einträge.
            output_path: Ziel-Dateipfad. Falls None, aus der Konfiguration.

        Returns:
            Path zur geschriebenen Datei.
        """
        if output_path is None:
            output_path = self._config.output_path
        output_path = Path(output_path)

        encoding = "utf-8-sig" if self._config.include_bom else self._config.encoding
        content = self.to_csv(listings)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", newline="", encoding=encoding) as f:
            f.write(content)

        logger.info(f"Exportiert: {len(listings)} Einträge nach {output_path}")
        return output_path
