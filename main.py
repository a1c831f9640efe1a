#!/usr/bin/env python3
"""
Tierarzt-Scraper Suisse romande - CLI Entry Point

Sammelt Tierärzte aus tel.search.ch für die Kantone der Westschweiz
und schreibt sie in eine CSV-Datei.
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

# Projekt-Root zum Path hinzufügen
PROGRAM_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(PROGRAM_DIR))

from vetscraper.config.settings import Settings, DEFAULT_OUTPUT_FILENAME
from vetscraper.config.kantone import KANTONE_SUISSE_ROMANDE, get_kantone
from vetscraper.pipeline.orchestrator import Pipeline
from vetscraper.models.listing import ScrapingResult


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Konfiguriert das Logging."""
    if debug:
        level = logging.DEBUG
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif verbose:
        level = logging.INFO
        format_str = "%(asctime)s - %(levelname)s - %(message)s"
    else:
        level = logging.WARNING
        format_str = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def create_parser() -> argparse.ArgumentParser:
    """Erstellt den Argument Parser."""
    parser = argparse.ArgumentParser(
        prog="vet-scraper",
        description="""
Tierarzt-Scraper Suisse romande - sammelt Vétérinaires von tel.search.ch.

Durchsucht die Kantone der Westschweiz nacheinander, folgt der Pagination
und exportiert alle Einträge als CSV.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Beispiele:
  %(prog)s
  %(prog)s --kanton Vaud --kanton Genève
  %(prog)s --max-pages 10 --delay 2 --output daten/veterinaires.csv
  %(prog)s --no-headless --debug
        """
    )

    # Such-Optionen
    search = parser.add_argument_group("Such-Optionen")
    search.add_argument(
        "--kanton", "-k",
        action="append",
        metavar="KANTON",
        help=f"Nur diesen Kanton durchsuchen (mehrfach möglich): {', '.join(KANTONE_SUISSE_ROMANDE)}"
    )
    search.add_argument(
        "--max-pages",
        type=int,
        default=50,
        help="Maximale Anzahl Ergebnisseiten pro Kanton (default: 50)"
    )
    search.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Pause zwischen zwei Ergebnisseiten in Sekunden (default: 1.0)"
    )

    # Browser
    browser = parser.add_argument_group("Browser")
    browser.add_argument(
        "--no-headless",
        action="store_true",
        help="Browser sichtbar anzeigen (für Debugging)"
    )

    # Export
    export = parser.add_argument_group("Export-Optionen")
    export.add_argument(
        "--output", "-o",
        type=str,
        help="Output-Datei (default: veterinaires_suisse_romande.csv neben dem Programm)"
    )
    export.add_argument(
        "--no-checkpoint",
        action="store_true",
        help="Keinen Zwischenstand nach jedem Kanton schreiben"
    )
    export.add_argument(
        "--bom",
        action="store_true",
        help="UTF-8 BOM schreiben (Excel-kompatibel)"
    )

    # Logging
    logging_group = parser.add_argument_group("Logging")
    logging_group.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Ausführliche Ausgabe"
    )
    logging_group.add_argument(
        "--debug",
        action="store_true",
        help="Debug-Ausgabe (sehr ausführlich)"
    )
    logging_group.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Nur Fehler ausgeben"
    )

    return parser


def print_progress(message: str, current: int, total: int) -> None:
    """Gibt eine Progress-Zeile aus."""
    print(f"[{current}/{total}] {message}", flush=True)


def print_summary(result: ScrapingResult, stats: dict) -> None:
    """Gibt Zusammenfassung aus."""
    print("\n" + "=" * 60)
    print("ZUSAMMENFASSUNG")
    print("=" * 60)
    for kanton, count in result.pro_kanton.items():
        print(f"  {kanton:<20} {count:>5}")
    print("-" * 60)
    print(f"  Total:                {result.total} Tierärzte")
    print(f"  Seiten gescraped:     {result.seiten_gescraped}")
    print(f"  Cookie-Banner:        {'bestätigt' if stats['consent_accepted'] else 'nicht gefunden'}")
    print(f"  Dauer:                {result.dauer_sekunden:.1f} Sekunden")
    if result.warnungen:
        print("-" * 60)
        print("  Warnungen:")
        for warning in result.warnungen:
            print(f"    - {warning}")
    print("=" * 60)
    print(f"\nDaten gespeichert in: {result.output_path}\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Hauptfunktion."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        kantone = get_kantone(args.kanton)
    except ValueError as e:
        parser.error(str(e))

    if args.max_pages < 1:
        parser.error("--max-pages muss mindestens 1 sein")

    # Logging einrichten
    if args.quiet:
        setup_logging(verbose=False, debug=False)
        logging.disable(logging.WARNING)
    else:
        setup_logging(verbose=args.verbose, debug=args.debug)

    settings = Settings.from_cli_args(
        kantone=kantone,
        max_pages=args.max_pages,
        delay=args.delay,
        output=args.output or str(PROGRAM_DIR / DEFAULT_OUTPUT_FILENAME),
        headless=not args.no_headless,
        checkpoint=not args.no_checkpoint,
        bom=args.bom,
        verbose=args.verbose,
        debug=args.debug
    )

    if not args.quiet:
        print("\n" + "=" * 60)
        print("  TIERARZT-SCRAPER SUISSE ROMANDE")
        print("=" * 60)
        print(f"  Kantone:        {', '.join(settings.kantone)}")
        print(f"  Max. Seiten:    {settings.scraper.max_pages} pro Kanton")
        print(f"  Output:         {settings.export.output_path}")
        print("=" * 60 + "\n")

    pipeline = Pipeline(settings)

    if not args.quiet:
        pipeline.set_progress_callback(print_progress)

    try:
        result = pipeline.run()
    except KeyboardInterrupt:
        print("\n\nAbgebrochen durch Benutzer.")
        return 1
    except Exception as e:
        logging.exception(f"Pipeline-Fehler: {e}")
        if args.debug:
            raise
        return 1

    if not args.quiet:
        print_summary(result, pipeline.stats.to_dict())

    return 0


if __name__ == "__main__":
    sys.exit(main())
