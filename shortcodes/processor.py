"""
Document processor.

Public API that ties the scanner, the nesting tracker and the resolver
together for one document or many documents in parallel. Each document is
scanned with its own scanner and tracker; only the read-only handler
registry and configuration are shared between workers.
"""

from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from .config.model import ShortcodesConfig
from .errors import ShortcodeUserError
from .registry import HandlerRegistry
from .resolver import ShortcodeContext, ShortcodeResolver
from .scanner.location import LocationRegistry
from .scanner.tracker import build_locations

logger = logging.getLogger(__name__)


class ShortcodeProcessingError(ShortcodeUserError):
    """Failure while processing one document."""

    def __init__(self, message: str, document_name: str = "", cause: Optional[Exception] = None):
        super().__init__(f"Shortcode processing error in '{document_name}': {message}")
        self.document_name = document_name
        self.cause = cause


@dataclass
class Document:
    """Input document: content plus what is known about its origin."""
    content: str
    source: Optional[Path] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProcessedDocument:
    """Result of processing one document."""
    document: Document
    input_path: Path
    locations: LocationRegistry
    content: str


@dataclass(frozen=True)
class ScanResult:
    """Outcome of scanning one document; exactly one of locations/error is set."""
    document: Document
    input_path: Path
    locations: Optional[LocationRegistry] = None
    error: Optional[ShortcodeProcessingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


InputPathFunc = Callable[[Document], Optional[Path]]


def default_input_path(document: Document) -> Optional[Path]:
    """Uses the document's source path."""
    return document.source


class ShortcodeProcessor:
    """
    Main shortcode processor.
    """

    def __init__(
        self,
        handlers: Optional[HandlerRegistry] = None,
        config: Optional[ShortcodesConfig] = None,
        input_path: InputPathFunc = default_input_path,
    ):
        """
        Args:
            handlers: Handler lookup used for substitution
            config: Delimiters and worker settings
            input_path: Strategy resolving a document's path for diagnostics
        """
        self.handlers = handlers or HandlerRegistry()
        self.config = config or ShortcodesConfig()
        self.input_path = input_path
        self.resolver = ShortcodeResolver(self.handlers)

    def scan_text(self, text: str, name: str = "", cancelled: Optional[Callable[[], bool]] = None) -> LocationRegistry:
        """
        Scans text without substituting anything.

        Raises:
            ShortcodeProcessingError: On any scan error (original error in ``cause``)
        """
        return self._handle_errors(
            lambda: build_locations(text, self.config.delimiters, cancelled),
            name,
            "Failed to scan shortcodes",
        )

    def process_text(
        self,
        text: str,
        name: str = "",
        source: Optional[Path] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Scans text and substitutes every shortcode.

        Args:
            text: Document content
            name: Optional document name for diagnostics
            source: Optional source path passed to handlers
            metadata: Optional metadata passed to handlers

        Returns:
            Rendered text

        Raises:
            ShortcodeProcessingError: On scan or render errors
        """
        locations = self.scan_text(text, name)
        context = ShortcodeContext(document_name=name, source=source, metadata=dict(metadata or {}))
        return self._handle_errors(
            lambda: self.resolver.resolve(text, locations, context),
            name,
            "Failed to render shortcodes",
        )

    def process_document(self, document: Document, cancel_event: Optional[threading.Event] = None) -> ProcessedDocument:
        """Processes one document; see ``process_documents``."""
        input_path = self._resolve_input_path(document)
        name = str(input_path)
        logger.debug(f"Processing shortcodes for {name}")

        cancelled = cancel_event.is_set if cancel_event is not None else None
        locations = self.scan_text(document.content, name, cancelled)
        context = ShortcodeContext(document_name=name, source=input_path, metadata=dict(document.metadata))
        content = self._handle_errors(
            lambda: self.resolver.resolve(document.content, locations, context),
            name,
            "Failed to render shortcodes",
        )
        return ProcessedDocument(document=document, input_path=input_path, locations=locations, content=content)

    def process_documents(
        self,
        documents: Iterable[Document],
        jobs: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ProcessedDocument]:
        """
        Processes documents in parallel, one task per document.

        Args:
            documents: Input documents
            jobs: Worker count; overrides the configured value (0 = executor default)
            cancel_event: When set, in-flight scans stop at their next tag

        Returns:
            Results in input order

        Raises:
            ShortcodeProcessingError: For the first failing document in input order
        """
        return self._map(lambda doc: self.process_document(doc, cancel_event), documents, jobs)

    def scan_documents(
        self,
        documents: Iterable[Document],
        jobs: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ScanResult]:
        """
        Scans documents in parallel without substitution.

        A failing document does not stop the others: its error is
        recorded in its ScanResult.
        """
        def scan_one(document: Document) -> ScanResult:
            input_path = self._resolve_input_path(document)
            cancelled = cancel_event.is_set if cancel_event is not None else None
            try:
                locations = self.scan_text(document.content, str(input_path), cancelled)
            except ShortcodeProcessingError as e:
                logger.debug(f"Scan failed for {input_path}: {e}")
                return ScanResult(document=document, input_path=input_path, error=e)
            return ScanResult(document=document, input_path=input_path, locations=locations)

        return self._map(scan_one, documents, jobs)

    # ======= Internal methods =======

    def _map(self, func, documents: Iterable[Document], jobs: Optional[int]) -> list:
        """Runs func over documents, one task per document, preserving input order."""
        docs = list(documents)
        workers = self.config.jobs if jobs is None else jobs

        if workers == 1 or len(docs) <= 1:
            return [func(doc) for doc in docs]

        with ThreadPoolExecutor(max_workers=workers or None) as executor:
            return list(executor.map(func, docs))

    def _resolve_input_path(self, document: Document) -> Path:
        path = self.input_path(document)
        if path is None or not path.is_absolute():
            # Diagnostics only: the placeholder is never read or written
            placeholder = Path.cwd() / f"{uuid.uuid4().hex[:12]}.txt"
            logger.warning(
                f"No input path found for document {path or '<unnamed>'}, using {placeholder.name}"
            )
            return placeholder
        return path

    def _handle_errors(self, func, name: str, error_message: str):
        """Common error wrapper for document operations."""
        try:
            return func()
        except ShortcodeProcessingError:
            raise
        except ShortcodeUserError as e:
            raise ShortcodeProcessingError(f"{error_message}: {e}", name, e) from e


def create_processor(
    handlers: Optional[HandlerRegistry] = None,
    config: Optional[ShortcodesConfig] = None,
) -> ShortcodeProcessor:
    """
    Creates a processor with the given handlers and configuration.

    Args:
        handlers: Handler registry (a new empty one by default)
        config: Effective configuration (defaults when omitted)

    Returns:
        Configured processor
    """
    return ShortcodeProcessor(handlers or HandlerRegistry(), config or ShortcodesConfig())


__all__ = [
    "ShortcodeProcessor",
    "ShortcodeProcessingError",
    "Document",
    "ProcessedDocument",
    "ScanResult",
    "InputPathFunc",
    "default_input_path",
    "create_processor",
]
