from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .main import extract_to_files
from .options import ExtractionOptions

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconstruye tablas a partir de fragmentos de texto posicionados (JSON u hOCR)."
    )
    parser.add_argument("input_path", type=str, help="Archivo de entrada (.json con fragmentos o .hocr)")
    parser.add_argument("--format", dest="input_format", default="auto", choices=["auto", "json", "hocr"],
                        help="Formato de entrada (default: según la extensión)")
    parser.add_argument("--csv", dest="csv_path", type=str, help="Ruta del CSV de salida")
    parser.add_argument("--json", dest="json_path", type=str, help="Ruta del JSON de salida")
    parser.add_argument("--objects", action="store_true",
                        help="Convertir las tablas en registros con cabeceras y números")
    parser.add_argument("--options", dest="options_path", type=str,
                        help="JSON con opciones de extracción; los flags explícitos tienen prioridad")
    parser.add_argument("--x-tolerance", type=float, help="default: 3.0")
    parser.add_argument("--y-tolerance", type=float, help="default: 3.0")
    parser.add_argument("--min-columns", type=int, help="default: 2")
    parser.add_argument("--max-columns", type=int, help="default: 15")
    parser.add_argument("--header", dest="headers", action="append", metavar="LABEL",
                        help="Cabecera esperada (repetible; '\\n' separa partes apiladas)")
    parser.add_argument("--end-whitespace", type=float,
                        help="Hueco vertical que marca el fin de tabla (extracción guiada)")
    parser.add_argument("--decimal-separator", help="Separador decimal (default: '.')")
    parser.add_argument("--loglevel", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Nivel de verbosidad del log (default: INFO)")
    return parser


def options_from_args(args: argparse.Namespace) -> ExtractionOptions:
    """Opciones del archivo --options (si lo hay) sobrescritas por los flags explícitos."""
    data: Dict[str, Any] = {}
    if args.options_path:
        with open(args.options_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Options file must contain a JSON object: {args.options_path}")

    flags = {
        "x_tolerance": args.x_tolerance,
        "y_tolerance": args.y_tolerance,
        "min_column_count": args.min_columns,
        "max_column_count": args.max_columns,
        "end_of_table_whitespace": args.end_whitespace,
        "decimal_separator": args.decimal_separator,
    }
    if args.headers:
        flags["column_headers"] = [h.replace("\\n", "\n") for h in args.headers]
    data.update({k: v for k, v in flags.items() if v is not None})
    return ExtractionOptions.from_dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.loglevel, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        options = options_from_args(args)
    except (OSError, TypeError, ValueError) as e:
        parser.error(str(e))

    try:
        extract_to_files(
            args.input_path,
            csv_path=args.csv_path,
            json_path=args.json_path,
            as_objects=args.objects,
            input_format=args.input_format,
            options=options,
        )
        log.info("✔ Proceso completado.")
    except FileNotFoundError:
        log.error("Error: No se encontró el archivo de entrada: %s", args.input_path)
        return 1
    except Exception as e:
        log.error("Ocurrió un error inesperado: %s", e, exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
