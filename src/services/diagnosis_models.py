"""Diagnosis records delivered by the diagnosis pipeline and the export request snapshot."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union


class Confidence(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


def normalize_confidence(value: Optional[Union[str, Confidence]]) -> Optional[Confidence]:
    """Normalize a string/enum to a Confidence tier; unknown values become None."""
    if value is None:
        return None
    if isinstance(value, Confidence):
        return value
    lower = str(value).strip().lower()
    for tier in Confidence:
        if tier.value.lower() == lower:
            return tier
    return None


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


@dataclass(frozen=True)
class DiagnosisBlock:
    """One diagnosis candidate. Text fields use the lightweight list/bold markup."""

    label: str
    confidence: Optional[Confidence]
    reasoning: str = ""
    treatment_plan: str = ""
    prevention_tips: str = ""
    summary: Optional[str] = None

    @classmethod
    def from_prefixed(cls, data: Mapping[str, Any], prefix: str) -> Optional["DiagnosisBlock"]:
        """Read ``<prefix>Diagnosis``, ``<prefix>Confidence`` ... from flat pipeline JSON."""
        label = _text(data, f"{prefix}Diagnosis")
        if not label:
            return None
        summary = _text(data, f"{prefix}Summary")
        return cls(
            label=label,
            confidence=normalize_confidence(data.get(f"{prefix}Confidence")),
            reasoning=_text(data, f"{prefix}Reasoning"),
            treatment_plan=_text(data, f"{prefix}TreatmentPlan"),
            prevention_tips=_text(data, f"{prefix}PreventionTips"),
            summary=summary or None,
        )

    def to_prefixed(self, prefix: str) -> dict:
        payload = {
            f"{prefix}Diagnosis": self.label,
            f"{prefix}Confidence": self.confidence.value if self.confidence else None,
            f"{prefix}Reasoning": self.reasoning,
            f"{prefix}TreatmentPlan": self.treatment_plan,
            f"{prefix}PreventionTips": self.prevention_tips,
        }
        if self.summary:
            payload[f"{prefix}Summary"] = self.summary
        return payload


@dataclass(frozen=True)
class DiagnosisResult:
    """Structured response of the diagnosis pipeline."""

    plant: str
    primary: DiagnosisBlock
    secondary: Optional[DiagnosisBlock] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiagnosisResult":
        plant = _text(data, "plant")
        if not plant:
            raise ValueError("Diagnosis result has no plant identification")

        primary = DiagnosisBlock.from_prefixed(data, "primary")
        if primary is None:
            raise ValueError("Diagnosis result has no primary diagnosis")

        return cls(
            plant=plant,
            primary=primary,
            secondary=DiagnosisBlock.from_prefixed(data, "secondary"),
        )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "DiagnosisResult":
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path}")
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        payload = {"plant": self.plant}
        payload.update(self.primary.to_prefixed("primary"))
        if self.secondary is not None:
            payload.update(self.secondary.to_prefixed("secondary"))
        return payload


@dataclass(frozen=True)
class ExportRequest:
    """Immutable snapshot of everything one export run needs."""

    diagnosis: DiagnosisResult
    output_dir: Path
    image_paths: Tuple[Path, ...] = ()
    export_date: date = field(default_factory=date.today)

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(self, "image_paths", tuple(Path(p) for p in self.image_paths))
