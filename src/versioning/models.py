"""Data models for the version catalog and the dependency audit."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class DependencyPin:
    """A library pinned in the version catalog."""
    alias: str
    module: str  # Maven groupId:artifactId
    version: str

    @property
    def group_id(self) -> str:
        """Maven groupId part of the module coordinate."""
        return self.module.split(":", 1)[0]

    @property
    def artifact_id(self) -> str:
        """Maven artifactId part of the module coordinate."""
        return self.module.split(":", 1)[1]


@dataclass
class AuditResult:
    """Outcome of checking one pin against its registry candidates."""
    pin: DependencyPin
    latest_acceptable: Optional[str]
    accepted: List[str] = field(default_factory=list)
    rejected_count: int = 0
    candidate_count: int = 0
    error: Optional[str] = None

    @property
    def has_update(self) -> bool:
        """True when a newer acceptable patch version exists."""
        return self.latest_acceptable is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the JSON report."""
        return {
            "alias": self.pin.alias,
            "module": self.pin.module,
            "currentVersion": self.pin.version,
            "latestAcceptable": self.latest_acceptable,
            "accepted": list(self.accepted),
            "rejectedCount": self.rejected_count,
            "candidateCount": self.candidate_count,
            "error": self.error,
        }


@dataclass
class AuditReport:
    """Aggregated audit results, in catalog order."""
    results: List[AuditResult] = field(default_factory=list)

    @property
    def updates(self) -> List[AuditResult]:
        """Results that have an acceptable patch update available."""
        return [r for r in self.results if r.has_update]
