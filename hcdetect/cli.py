"""Command-line interface for the Hidden Character Detector."""

import argparse
import json
import logging
import sys
import threading
from pathlib import Path

from hcdetect import __version__
from hcdetect.config import ConfigError, DetectorConfig, init_config, load_config
from hcdetect.diagnostics import format_text, status_text, to_diagnostics
from hcdetect.monitor import watch_workspace
from hcdetect.notifier import Notifier
from hcdetect.store import ResultStore
from hcdetect.workspace import (
    DocumentReadError,
    DocumentResult,
    WorkspaceScanner,
    decode_document,
)

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def _load(args: argparse.Namespace) -> DetectorConfig:
    try:
        return load_config(args.config)
    except ConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(EXIT_ERROR)


def _build_scanner(config: DetectorConfig, store: ResultStore | None = None) -> WorkspaceScanner:
    return WorkspaceScanner(
        exclude_patterns=config.scanner.exclude_patterns,
        max_file_size=config.scanner.max_file_size,
        store=store,
    )


def _result_json(result: DocumentResult) -> dict:
    data = {
        "path": result.path,
        "findings": [f.to_dict() for f in result.findings],
    }
    if result.error is not None:
        data["error"] = result.error
    return data


def _print_results(results: list[DocumentResult], fmt: str) -> None:
    if fmt == "json":
        print(json.dumps([_result_json(r) for r in results], indent=2))
        return

    for r in results:
        if r.error is not None:
            print(f"{r.path}: error: {r.error}", file=sys.stderr)
            continue
        for line in format_text(r.path, to_diagnostics(r.findings)):
            print(line)

    total = sum(len(r.findings) for r in results)
    status = status_text(total)
    if status is None:
        print("Clean - no hidden characters found.", file=sys.stderr)
    else:
        flagged = sum(1 for r in results if r.findings)
        print(f"{status} in {flagged} file(s)", file=sys.stderr)


def _exit_code(results: list[DocumentResult]) -> int:
    if any(r.error is not None for r in results):
        return EXIT_ERROR
    if any(r.findings for r in results):
        return EXIT_FINDINGS
    return EXIT_CLEAN


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan files, directories, an inline string or stdin."""
    config = _load(args)
    scanner = _build_scanner(config)
    results: list[DocumentResult] = []

    if args.text is not None:
        results.append(scanner.scan_text("<text>", args.text))
    elif not args.paths:
        try:
            text = decode_document(Path("<stdin>"), sys.stdin.buffer.read())
        except DocumentReadError as e:
            results.append(DocumentResult(path="<stdin>", error=e.reason))
        else:
            results.append(scanner.scan_text("<stdin>", text))

    for raw in args.paths:
        path = Path(raw)
        if path.is_dir():
            results.extend(scanner.scan_workspace(path))
        else:
            results.append(scanner.scan_document(path))

    _print_results(results, args.format)
    sys.exit(_exit_code(results))


def cmd_watch(args: argparse.Namespace) -> None:
    """Rescan a workspace whenever files change, and periodically if enabled."""
    config = _load(args)
    notifier = Notifier(mode=config.notifications.mode)
    store = ResultStore(args.db) if args.db else ResultStore()
    scanner = _build_scanner(config, store)
    root = Path(args.root).resolve()

    reported: dict[str, str] = {}

    def on_result(result: DocumentResult) -> None:
        # Only report a document again once its content changed.
        marker = result.error or result.content_hash
        if reported.get(result.path) == marker:
            return
        reported[result.path] = marker
        notifier.notify(result)

    full_interval = None
    if config.workspace_scan.enabled:
        full_interval = config.workspace_scan.interval_seconds

    print(f"hcdetect v{__version__} - watching {root}...", file=sys.stderr)
    print("Press Ctrl+C to stop.\n", file=sys.stderr)

    stop = threading.Event()
    try:
        watch_workspace(
            scanner,
            root,
            on_result,
            poll_interval=config.monitor.poll_interval,
            full_scan_interval=full_interval,
            scan_on_save=config.scanner.scan_on_save,
            stop=stop,
        )
    except KeyboardInterrupt:
        stop.set()
        status = status_text(scanner.total_findings()) or "No hidden characters"
        print(f"\nStopped. {status}.", file=sys.stderr)
    finally:
        store.close()


def cmd_results(args: argparse.Namespace) -> None:
    """Query stored scan results."""
    store = ResultStore(args.db) if args.db else ResultStore()

    try:
        if args.stats:
            print(json.dumps(store.stats(), indent=2))
            return

        if args.export:
            print(store.export_json(limit=args.limit))
            return

        entries = store.query(limit=args.limit, category=args.category)
        if not entries:
            print("No stored results with hidden characters.")
            return

        for e in entries:
            ts = e.scanned_at[:19].replace("T", " ")
            print(f"{ts}  findings={e.findings_count:<4} {e.path}")
            print(f"  {', '.join(e.categories)}")
    finally:
        store.close()


def cmd_init(args: argparse.Namespace) -> None:
    """Initialize a default configuration file."""
    path = init_config(args.config)
    print(f"Config created at: {path}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the HTTP API server."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Run: pip install hcdetect[server]", file=sys.stderr)
        sys.exit(EXIT_ERROR)

    print(f"Starting hcdetect API server on {args.host}:{args.port}...")
    uvicorn.run(
        "hcdetect.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hcdetect",
        description="Detect invisible and deceptive Unicode characters (ASCII smuggling)",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None,
        help="Path to config file (default: ~/.config/hcdetect/config.toml)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log scanning activity to stderr",
    )

    subparsers = parser.add_subparsers(dest="command")

    # scan
    scan_parser = subparsers.add_parser(
        "scan", help="Scan files, directories or stdin",
    )
    scan_parser.add_argument(
        "paths", nargs="*", default=[],
        help="Files or directories to scan (reads stdin if omitted)",
    )
    scan_parser.add_argument(
        "-t", "--text", default=None,
        help="Scan this string instead of files",
    )
    scan_parser.add_argument(
        "-f", "--format", choices=("text", "json"), default="text",
        help="Output format (default: text)",
    )
    scan_parser.set_defaults(func=cmd_scan)

    # watch
    watch_parser = subparsers.add_parser(
        "watch", help="Rescan a workspace as files change",
    )
    watch_parser.add_argument(
        "root", nargs="?", default=".",
        help="Workspace root (default: current directory)",
    )
    watch_parser.add_argument(
        "--db", type=Path, default=None,
        help="Results database (default: ~/.local/share/hcdetect/results.db)",
    )
    watch_parser.set_defaults(func=cmd_watch)

    # results
    results_parser = subparsers.add_parser(
        "results", help="Query stored results from watch mode",
    )
    results_parser.add_argument(
        "-n", "--limit", type=int, default=20,
        help="Number of documents to show (default: 20)",
    )
    results_parser.add_argument(
        "--category", default=None,
        help='Only documents with this category (e.g. "Zero-Width")',
    )
    results_parser.add_argument(
        "--stats", action="store_true",
        help="Show aggregate statistics",
    )
    results_parser.add_argument(
        "--export", action="store_true",
        help="Export stored results as JSON",
    )
    results_parser.add_argument(
        "--db", type=Path, default=None,
        help="Results database (default: ~/.local/share/hcdetect/results.db)",
    )
    results_parser.set_defaults(func=cmd_results)

    # init
    init_parser = subparsers.add_parser(
        "init", help="Create default config file",
    )
    init_parser.set_defaults(func=cmd_init)

    # serve
    serve_parser = subparsers.add_parser(
        "serve", help="Start the HTTP API server",
    )
    serve_parser.add_argument(
        "--host", default="127.0.0.1",
        help="Bind address (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port", type=int, default=8000,
        help="Port (default: 8000)",
    )
    serve_parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload for development",
    )
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(EXIT_ERROR)

    args.func(args)
