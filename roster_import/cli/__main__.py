from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from roster_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config, save_config
from roster_import.errors import RosterImportError
from roster_import.excel.source import FileSource, Source, UrlSource, resolve_source
from roster_import.logging.init import log_summary, set_debug, setup_logging
from roster_import.models.config_models import ImportConfig
from roster_import.models.field_key import FieldKey
from roster_import.services.column_mapper import ColumnMapper
from roster_import.services.exporter import write_export
from roster_import.services.orchestrator import locate_header, run_import
from roster_import.services.search import search_records
from roster_import.services.summary import render_summary_line
from roster_import.store.records import DEFAULT_STORE_PATH, RecordStore, RecordStoreError

"""CLI entrypoint.

    python -m roster_import.cli import --url <sheet url> [--discover]
    python -m roster_import.cli import --file roster.xlsx
    python -m roster_import.cli inspect --file roster.csv
    python -m roster_import.cli config show | set-url | set-header-row | map | keywords | reset
    python -m roster_import.cli search <query>
    python -m roster_import.cli export roster.xlsx
    python -m roster_import.cli reset-data

Paths come from the environment (``.env`` is loaded first and wins):
ROSTER_CONFIG (config/import.yml), ROSTER_DATA (data/records.json),
ROSTER_HTTP_TIMEOUT (seconds, 30).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_IMPORT_FAILED = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; values override the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _config_path() -> Path:
    return Path(os.getenv("ROSTER_CONFIG", str(DEFAULT_CONFIG_PATH)))


def _store_path() -> Path:
    return Path(os.getenv("ROSTER_DATA", str(DEFAULT_STORE_PATH)))


def _http_timeout() -> float:
    raw = os.getenv("ROSTER_HTTP_TIMEOUT", "30")
    try:
        return float(raw)
    except ValueError:
        return 30.0


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="roster_import",
        description="Import a people & vehicles roster from a spreadsheet",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    def add_source_args(sp: argparse.ArgumentParser) -> None:
        g = sp.add_mutually_exclusive_group()
        g.add_argument("--url", help="Hosted spreadsheet URL (saved to config)")
        g.add_argument("--file", type=Path, help="Local .xlsx/.xls/.csv/.txt file")
        sp.add_argument("--header-row", type=int, help="1-based header row (saved to config)")

    imp = sub.add_parser("import", parents=[common], help="Import the roster, replacing stored records")
    add_source_args(imp)
    imp.add_argument(
        "--discover",
        action="store_true",
        help="Find the header row by keywords when none was discovered yet",
    )

    ins = sub.add_parser("inspect", parents=[common], help="Show header, column mapping and first rows")
    add_source_args(ins)
    ins.add_argument("--discover", action="store_true", help="Find the header row by keywords")
    ins.add_argument("--rows", type=int, default=3, help="Number of data rows to print")

    cfg = sub.add_parser("config", parents=[common], help="Show or edit the import configuration")
    cfg_sub = cfg.add_subparsers(dest="config_command", required=True)
    cfg_sub.add_parser("show", help="Print the configuration")
    su = cfg_sub.add_parser("set-url", help="Set the spreadsheet URL")
    su.add_argument("url")
    sh = cfg_sub.add_parser("set-header-row", help="Set the 1-based header row")
    sh.add_argument("number", type=int)
    mp = cfg_sub.add_parser("map", help="Assign a column index to a field (omit INDEX to clear)")
    mp.add_argument("field")
    mp.add_argument("index", nargs="?", default="")
    kw = cfg_sub.add_parser("keywords", help="Replace a field's keyword group")
    kw.add_argument("field")
    kw.add_argument("text", help='Comma separated, e.g. "NOMBRE, NAME"')
    cfg_sub.add_parser("reset", help="Restore the default configuration")

    se = sub.add_parser("search", parents=[common], help="Search stored records by name, RUT, email or plate")
    se.add_argument("query", nargs="?", default="")

    ex = sub.add_parser("export", parents=[common], help="Write stored records to .xlsx or .csv")
    ex.add_argument("path", type=Path)

    sub.add_parser("reset-data", parents=[common], help="Restore the sample records")
    return p.parse_args(argv)


def _apply_source_args(cfg: ImportConfig, args: argparse.Namespace) -> tuple[ImportConfig, bool]:
    changed = False
    if getattr(args, "url", None):
        new = cfg.with_source_url(args.url)
        changed = changed or new is not cfg
        cfg = new
    if getattr(args, "header_row", None) is not None:
        new = cfg.with_header_row(args.header_row)
        changed = changed or new is not cfg
        cfg = new
    return cfg, changed


def _source(cfg: ImportConfig, args: argparse.Namespace) -> Source | None:
    if getattr(args, "file", None) is not None:
        path: Path = args.file
        return FileSource(data=path.read_bytes(), extension=path.suffix, name=path.name)
    if cfg.source_url:
        return UrlSource(cfg.source_url)
    return None


def _cmd_import(cfg: ImportConfig, args: argparse.Namespace, config_path: Path, logger) -> int:
    try:
        source = _source(cfg, args)
    except OSError as e:
        logger.error(f"file: {e}")
        return EXIT_FATAL
    if source is None:
        logger.error("no source: pass --url or --file, or run 'config set-url' first")
        return EXIT_FATAL

    store = RecordStore(_store_path())
    logger.info(f"Importing from: {source.label}")
    try:
        result = asyncio.run(
            run_import(
                cfg,
                source,
                store=store,
                save_config=lambda c: save_config(config_path, c),
                discover=args.discover,
                timeout=_http_timeout(),
            )
        )
    except (RecordStoreError, ConfigError) as e:
        logger.error(f"storage: {e}")
        return EXIT_FATAL

    log_summary(render_summary_line(result)[len("SUMMARY "):])
    if not result.ok:
        logger.error(f"{result.error_kind}: {result.error} (stored records unchanged)")
        return EXIT_IMPORT_FAILED
    logger.info(f"{len(result.records)} records imported")
    return EXIT_SUCCESS


def _cmd_inspect(cfg: ImportConfig, args: argparse.Namespace, logger) -> int:
    try:
        source = _source(cfg, args)
    except OSError as e:
        logger.error(f"file: {e}")
        return EXIT_FATAL
    if source is None:
        logger.error("no source: pass --url or --file, or run 'config set-url' first")
        return EXIT_FATAL
    try:
        grid = asyncio.run(resolve_source(source, timeout=_http_timeout()))
        header, _ = locate_header(grid, cfg, discover=args.discover)
        print(f"SOURCE: {source.label} rows={len(grid)}")
        print(f"  HEADER row={header.row_number} labels={header.labels}")
        mapper = ColumnMapper(cfg, header.labels)
        mode = "heuristic" if mapper.heuristic else "manual"
        resolved = {k.value: mapper.resolve(k) for k in FieldKey}
        print(f"  COLUMNS mode={mode} {({k: v for k, v in resolved.items() if v is not None})}")
        for row in grid[header.row_index + 1: header.row_index + 1 + args.rows]:
            print(f"    row={row}")
    except RosterImportError as e:
        logger.error(f"{e.kind}: {e}")
        return EXIT_IMPORT_FAILED
    return EXIT_SUCCESS


def _print_config(cfg: ImportConfig) -> None:
    print(f"source_url: {cfg.source_url or '-'}")
    print(f"header_row_number: {cfg.header_row_number}")
    print(f"cached_header_labels: {list(cfg.cached_header_labels)}")
    print(f"mapping_mode: {'manual' if cfg.has_manual_mapping else 'heuristic'}")
    for key in FieldKey:
        column = cfg.column_mapping.get(key, "")
        print(f"  {key.value:<11} column={column or '-':<3} keywords={', '.join(cfg.keywords(key))}")


def _cmd_config(cfg: ImportConfig, args: argparse.Namespace, config_path: Path, logger) -> int:
    sub = args.config_command
    if sub == "show":
        _print_config(cfg)
        return EXIT_SUCCESS
    try:
        if sub == "set-url":
            cfg = cfg.with_source_url(args.url)
        elif sub == "set-header-row":
            cfg = cfg.with_header_row(args.number)
        elif sub == "map":
            cfg = cfg.with_column(FieldKey.parse(args.field), args.index)
        elif sub == "keywords":
            cfg = cfg.with_keywords(FieldKey.parse(args.field), args.text)
        elif sub == "reset":
            cfg = ImportConfig()
    except ValueError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    save_config(config_path, cfg)
    logger.info(f"config saved: {config_path}")
    return EXIT_SUCCESS


def _cmd_search(args: argparse.Namespace) -> int:
    stored = RecordStore(_store_path()).load()
    hits = search_records(stored.records, args.query)
    for r in hits:
        plates = ", ".join(f"{v.plate} ({v.brand}{', ' + v.color if v.color else ''})" for v in r.vehicles)
        print(f"{r.name} | RUT {r.rut} | {r.email or '-'} | {r.group} | {plates or 'sin vehículo'}")
    sync = stored.last_sync or "sample data"
    print(f"{len(hits)} results ({len(stored.records)} records, last sync: {sync})")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む (tests call main([...]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    config_path = _config_path()
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        if args.command in ("import", "inspect"):
            try:
                cfg, changed = _apply_source_args(cfg, args)
            except ValueError as e:
                logger.error(f"config: {e}")
                return EXIT_FATAL
            if changed:
                save_config(config_path, cfg)
            if args.command == "import":
                return _cmd_import(cfg, args, config_path, logger)
            return _cmd_inspect(cfg, args, logger)
        if args.command == "config":
            return _cmd_config(cfg, args, config_path, logger)
        if args.command == "search":
            return _cmd_search(args)
        if args.command == "export":
            stored = RecordStore(_store_path()).load()
            path = write_export(stored.records, args.path)
            logger.info(f"{len(stored.records)} records exported to {path}")
            return EXIT_SUCCESS
        if args.command == "reset-data":
            RecordStore(_store_path()).reset()
            logger.info("sample records restored")
            return EXIT_SUCCESS
    except (ConfigError, RecordStoreError) as e:
        logger.error(f"storage: {e}")
        return EXIT_FATAL
    except ValueError as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL
    return EXIT_FATAL  # pragma: no cover (argparse enforces a command)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
