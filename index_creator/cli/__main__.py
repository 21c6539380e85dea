from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config, resolve_config_path
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import IndexerConfig
from ..parsing.table_parser import parse_table
from ..services.orchestrator import ProcessingError, build_all, check_all, read_source, scan_source_files
from ..services.replacements import extract_replacements
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load ``.env`` (may set INDEXER_CONFIG), then the YAML config
- ``--inspect-data``: print what the parser sees for each source file and exit
- ``--check`` / ``--update-expected``: compare against ``.expected.json`` files
- otherwise build every source file and write the configured exports
- Emit the SUMMARY line and map the result to an exit code
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = False) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="index-creator", description="Markdown/CSV index tables -> sorted book index"
    )
    p.add_argument("--config", help="Path to the YAML config (default: $INDEXER_CONFIG or config/indexer.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print parsed rows per source file then exit")
    p.add_argument("--check", action="store_true", help="Compare output against <name>.expected.json files")
    p.add_argument(
        "--update-expected",
        metavar="NAME",
        help="Rewrite <NAME>.expected.json from the current output (implies --check)",
    )
    return p.parse_args(argv)


def _inspect_data(cfg: IndexerConfig) -> int:
    try:
        files = scan_source_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no source files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            text = read_source(f)
        except (OSError, UnicodeDecodeError) as e:
            print(f"  read_error: {e}")
            continue
        parsed = parse_table(text, fmt=cfg.input_format, has_header=cfg.has_header, source=f.name)
        print(f"  format={parsed.format} header={parsed.has_header} rows={len(parsed.rows)}")
        if parsed.metadata is not None:
            print(f"  metadata={parsed.metadata}")
        print(f"  replacements={extract_replacements(parsed.rows)}")
        sample = [r.as_dict() | {"ignored": r.ignored} for r in parsed.rows[:INSPECT_SAMPLE_ROWS]]
        print("    sample_rows=", sample)
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    _load_env_file(Path(".env"))
    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        if args.check or args.update_expected:
            logger.info(f"Checking files in: {directory}")
            result = check_all(cfg, update=args.update_expected)
        else:
            logger.info(f"Processing files from: {directory}")
            result = build_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
