"""Dependency update audit: surface acceptable patch upgrades for pinned libraries."""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from packaging import version

from common.logging_utils import extra_context, is_debug_enabled, Timer
from registry.maven.client import fetch_versions
from .models import AuditReport, AuditResult, DependencyPin
from .patch_policy import is_acceptable_patch

logger = logging.getLogger(__name__)

VersionFetcher = Callable[[str, Iterable[str]], Optional[List[str]]]


def _parse(ver: str) -> Optional[version.Version]:
    try:
        return version.Version(ver)
    except version.InvalidVersion:
        return None


class DependencyAudit:
    """Checks each pin against its registry candidates using the patch policy.

    Candidates are fetched once per module for the lifetime of the audit, so
    aliases sharing a module cost a single registry round trip.
    """

    def __init__(self, repositories: Sequence[str], fetcher: VersionFetcher = fetch_versions):
        self.repositories = list(repositories)
        self.fetcher = fetcher
        self._candidates: Dict[str, Optional[List[str]]] = {}

    def _fetch(self, module: str) -> Optional[List[str]]:
        if module not in self._candidates:
            self._candidates[module] = self.fetcher(module, self.repositories)
        return self._candidates[module]

    def check(self, pin: DependencyPin) -> AuditResult:
        """Audit a single pin."""
        try:
            candidates = self._fetch(pin.module)
        except ValueError as exc:
            return AuditResult(pin=pin, latest_acceptable=None, error=str(exc))

        if candidates is None:
            return AuditResult(pin=pin, latest_acceptable=None, error="No metadata found")

        current = _parse(pin.version)
        accepted = []
        rejected = 0
        for candidate in candidates:
            if not is_acceptable_patch(candidate, pin.version):
                rejected += 1
                continue
            parsed = _parse(candidate)
            if parsed is None or current is None:
                # Ordering unknown; cannot claim it is newer
                logger.debug("Skipping unorderable version %s for %s", candidate, pin.module)
                continue
            if parsed > current:
                accepted.append((parsed, candidate))

        accepted.sort(key=lambda item: item[0])
        accepted_versions = [raw for _, raw in accepted]
        return AuditResult(
            pin=pin,
            latest_acceptable=accepted_versions[-1] if accepted_versions else None,
            accepted=accepted_versions,
            rejected_count=rejected,
            candidate_count=len(candidates),
        )

    def run(self, pins: Iterable[DependencyPin]) -> AuditReport:
        """Audit every pin in order and collect the results."""
        report = AuditReport()
        for pin in pins:
            with Timer() as timer:
                result = self.check(pin)
            report.results.append(result)
            if is_debug_enabled(logger):
                logger.debug(
                    "Audited dependency",
                    extra=extra_context(
                        event="decision",
                        component="audit",
                        action="check",
                        target=pin.module,
                        outcome="update" if result.has_update else "current",
                        duration_ms=timer.duration_ms()
                    )
                )
            if result.has_update:
                logger.info(
                    "%s: %s -> %s", pin.module, pin.version, result.latest_acceptable
                )
            elif result.error:
                logger.warning("%s: %s", pin.module, result.error)
        return report
