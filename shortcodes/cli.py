from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ShortcodesConfig, load_config, load_config_from
from .errors import ShortcodeUserError
from .jsonic import dumps as jdumps
from .processor import Document, ScanResult, ShortcodeProcessor
from .report import build_scan_report
from .version import tool_version

DEBUG_ENV = "SHORTCODES_DEBUG"


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get(DEBUG_ENV) else logging.WARNING
    root = logging.getLogger("shortcodes")
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        root.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="shortcodes",
        description="Shortcode scanner: locate and validate embedded shortcodes",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments
    def add_config(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--config",
            metavar="PATH",
            help="path to shortcodes.yaml (default: ./shortcodes.yaml if present)",
        )

    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("files", nargs="+", metavar="FILE", help="documents to scan")
        add_config(sp)
        sp.add_argument(
            "--jobs",
            type=int,
            metavar="N",
            help="number of parallel workers (default: from config)",
        )

    sp_scan = sub.add_parser("scan", help="JSON report of all shortcode locations")
    add_common(sp_scan)

    sp_check = sub.add_parser("check", help="validate documents, report errors on stderr")
    add_common(sp_check)

    sp_config = sub.add_parser("config", help="effective configuration (JSON)")
    add_config(sp_config)

    return p


def _load_config(ns: argparse.Namespace) -> ShortcodesConfig:
    cfg_arg = getattr(ns, "config", None)
    if cfg_arg:
        path = Path(cfg_arg)
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        return load_config(path)
    return load_config_from(Path.cwd())


def _read_documents(files: List[str]) -> List[Document]:
    docs: List[Document] = []
    for name in files:
        path = Path(name)
        if not path.is_file():
            raise ValueError(f"File not found: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ValueError(f"Failed to read {path}: {e}")
        docs.append(Document(content=content, source=path.resolve(), metadata={"display_path": name}))
    return docs


def _scan(ns: argparse.Namespace) -> List[ScanResult]:
    cfg = _load_config(ns)
    if ns.jobs is not None and ns.jobs < 0:
        raise ValueError(f"--jobs must be non-negative, got {ns.jobs}")
    processor = ShortcodeProcessor(config=cfg)
    return processor.scan_documents(_read_documents(ns.files), jobs=ns.jobs)


def _format_failure(result: ScanResult) -> str:
    path = result.document.metadata.get("display_path") or str(result.input_path)
    error = result.error
    cause = getattr(error, "cause", None) or error
    line, column = getattr(cause, "line", None), getattr(cause, "column", None)
    message = getattr(cause, "message", None) or str(cause)
    if line is not None:
        return f"{path}:{line}:{column}: {message}"
    return f"{path}: {message}"


def main(argv: Optional[List[str]] = None) -> int:
    _setup_logging()
    ns = _build_parser().parse_args(argv)

    try:
        if ns.cmd == "scan":
            results = _scan(ns)
            report = build_scan_report(results)
            sys.stdout.write(jdumps(report.model_dump(mode="json")))
            return 0 if all(r.ok for r in results) else 2

        if ns.cmd == "check":
            results = _scan(ns)
            failed = [r for r in results if not r.ok]
            for result in failed:
                sys.stderr.write(_format_failure(result) + "\n")
            return 2 if failed else 0

        if ns.cmd == "config":
            cfg = _load_config(ns)
            sys.stdout.write(jdumps(cfg.to_dict()))
            return 0

    except ShortcodeUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
