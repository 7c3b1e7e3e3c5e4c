from __future__ import annotations

from typing import Dict, Iterable

from .errors import ShortcodeSyntaxError, ShortcodeUserError
from .processor import ScanResult
from .report_schema import Argument, DocumentReport, Location, ScanError, ScanReport
from .scanner.location import ShortcodeLocation, iter_innermost_first
from .version import tool_version


def location_model(location: ShortcodeLocation) -> Location:
    """Report model of a location and its children."""
    built: Dict[int, Location] = {}
    for loc in iter_innermost_first([location]):
        built[id(loc)] = Location(
            name=loc.name,
            start=loc.start_offset,
            end=loc.end_offset,
            content_start=loc.content_start,
            content_end=loc.content_end,
            self_closing=loc.self_closing,
            arguments=[Argument(key=arg.key, value=arg.value) for arg in loc.arguments],
            content=loc.inner_content,
            children=[built.pop(id(child)) for child in loc.children],
        )
    return built[id(location)]


def error_model(error: ShortcodeUserError) -> ScanError:
    """Report model of a scan failure; unwraps the processing error."""
    cause = getattr(error, "cause", None) or error
    if isinstance(cause, ShortcodeSyntaxError):
        return ScanError(
            type=type(cause).__name__,
            message=cause.message,
            offset=cause.offset,
            line=cause.line,
            column=cause.column,
        )
    return ScanError(type=type(cause).__name__, message=str(cause), offset=getattr(cause, "offset", None))


def build_scan_report(results: Iterable[ScanResult]) -> ScanReport:
    documents = []
    for result in results:
        path = str(result.document.metadata.get("display_path") or result.input_path)
        if result.error is not None:
            documents.append(DocumentReport(path=path, ok=False, error=error_model(result.error)))
        else:
            documents.append(DocumentReport(
                path=path,
                ok=True,
                locations=[location_model(loc) for loc in result.locations or ()],
            ))
    return ScanReport(version=tool_version(), documents=documents)


__all__ = ["build_scan_report", "location_model", "error_model"]
