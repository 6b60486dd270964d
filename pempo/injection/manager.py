"""Duplicate-safe, fallback-aware publishing of structured documents."""

import json
import logging
import threading

from pempo.config import InjectionConfig
from pempo.injection.registry import DocumentRegistry, InMemoryRegistry
from pempo.injection.surface import DocumentSurface, PlacementError
from pempo.models.document import DocumentType, InjectionRecord, StructuredDocument

logger = logging.getLogger(__name__)


class InjectionManager:
    """Publishes structured documents to a surface at most once per type.

    Publishing checks the registry and the surface for an existing document
    of the same type, tries each placement target in order, then schedules
    a verification read-back. Verification only logs.

    Verification reads run on timer threads, so every surface call the
    manager makes goes through one lock. ``pempo.pipeline.run_embed`` waits
    for pending verifications before it returns.

    The duplicate check and the registry update are not atomic: two callers
    that both check before either publishes will both publish. Callers that
    can run concurrently must guard runs themselves (see
    ``pempo.pipeline.EmbedRunner``).

    Args:
        surface: Where documents are attached.
        registry: Published type tags; a fresh InMemoryRegistry by default.
        config: Placement targets and verification delay.
    """

    def __init__(
        self,
        surface: DocumentSurface,
        registry: DocumentRegistry | None = None,
        config: InjectionConfig | None = None,
    ) -> None:
        self._surface = surface
        self._registry = registry if registry is not None else InMemoryRegistry()
        self._config = config or InjectionConfig()
        self._records: dict[DocumentType, InjectionRecord] = {}
        self._timers: list[threading.Timer] = []
        self._surface_lock = threading.Lock()

    def publish(self, document: StructuredDocument) -> bool:
        """Attach a document unless one of its type is already published.

        Args:
            document: The document to publish.

        Returns:
            True when the document was placed; False when it was skipped as a
            duplicate or every target rejected it.
        """
        type_tag = document.type_tag
        record = InjectionRecord(type_tag=type_tag)
        self._records[type_tag] = record

        if self._already_published(type_tag):
            logger.info("Skipping %s: a document of this type already exists", type_tag.value)
            record.already_present = True
            return False

        serialized = document.serialize()
        for target in self._config.targets:
            try:
                with self._surface_lock:
                    self._surface.attach(target, type_tag, serialized)
            except PlacementError as exc:
                logger.warning("Placement of %s at %s failed: %s", type_tag.value, target, exc)
                continue

            self._registry.add(type_tag)
            record.success = True
            record.target = target
            logger.info("Published %s at %s", type_tag.value, target)
            self._schedule_verification(type_tag)
            return True

        logger.error("All placement targets failed for %s", type_tag.value)
        return False

    def inspect(self, type_tag: DocumentType) -> InjectionRecord:
        """Return the latest publish record for ``type_tag``."""
        type_tag = DocumentType(type_tag)
        record = self._records.get(type_tag)
        if record is None:
            return InjectionRecord(
                type_tag=type_tag,
                already_present=self._already_published(type_tag),
            )
        return record

    def wait_for_verification(self, timeout: float | None = None) -> None:
        """Block until scheduled verifications have run.

        Args:
            timeout: Seconds to wait for each pending verification; None
                waits without limit.
        """
        for timer in self._timers:
            timer.join(timeout)
        self._timers = [timer for timer in self._timers if timer.is_alive()]

    def _already_published(self, type_tag: DocumentType) -> bool:
        """Check the registry, then scan the surface's existing documents.

        A document that fails to parse is logged and not counted, so a
        broken block never suppresses publishing.
        """
        if self._registry.contains(type_tag):
            return True

        with self._surface_lock:
            existing = self._surface.published()

        for raw in existing:
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Ignoring malformed structured document during duplicate check")
                continue
            if type_tag.value in _declared_types(data):
                return True
        return False

    def _schedule_verification(self, type_tag: DocumentType) -> None:
        """Verify inline when the delay is zero, otherwise on a timer thread."""
        delay = self._config.verify_delay_seconds
        if delay <= 0:
            self._verify(type_tag)
            return

        timer = threading.Timer(delay, self._verify, args=(type_tag,))
        timer.daemon = True
        self._timers.append(timer)
        timer.start()

    def _verify(self, type_tag: DocumentType) -> None:
        """Re-read the just-published document and check it parses.

        Failures are logged and never raised, including failures to read the
        surface.
        """
        try:
            with self._surface_lock:
                placed = self._surface.query(type_tag)
        except Exception:
            logger.exception("Verification of %s could not read the surface", type_tag.value)
            return

        if not placed:
            logger.error("Verification failed: no %s document found after publish", type_tag.value)
            return

        try:
            json.loads(placed[-1])
        except json.JSONDecodeError:
            logger.error("Verification failed: %s document is not valid JSON", type_tag.value)
            return

        logger.debug("Verified %s document", type_tag.value)


def _declared_types(data: object) -> set[str]:
    """Collect ``@type`` values from a JSON-LD object, list or ``@graph``."""
    types: set[str] = set()
    items = data if isinstance(data, list) else [data]
    for item in items:
        if not isinstance(item, dict):
            continue
        declared = item.get("@type")
        if isinstance(declared, str):
            types.add(declared)
        elif isinstance(declared, list):
            types.update(t for t in declared if isinstance(t, str))
        if "@graph" in item:
            types |= _declared_types(item["@graph"])
    return types
