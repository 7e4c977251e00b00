"""Content-compliance checks for booking drafts.

A booking needs manual approval when its content conflicts with the space's
prohibited list, when the space declares any prohibited list at all, or when
it carries a sensitive category, whether or not this space prohibits it.
Only an actual conflict requires the advertiser to confirm a warning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

CONTENT_TYPES: dict[str, str] = {
    "alcohol": "Alcohol/Beverages",
    "tobacco": "Tobacco Products",
    "gambling": "Gambling/Casino",
    "adult_content": "Adult Content",
    "political": "Political",
    "religious": "Religious",
    "pharmaceutical": "Pharmaceutical",
    "weapons": "Weapons/Military",
    "fast_food": "Fast Food",
    "other": "Other",
}

SENSITIVE_CONTENT = frozenset(
    {
        "alcohol",
        "tobacco",
        "gambling",
        "adult_content",
        "political",
        "religious",
        "pharmaceutical",
        "weapons",
    }
)


def content_label(tag: str) -> str:
    """Human-readable label; unknown tags are shown as-is."""
    return CONTENT_TYPES.get(tag, tag)


def content_conflicts(
    selected: Iterable[str],
    prohibited: Iterable[str] | None,
) -> list[str]:
    """Selected tags that the space prohibits, in selection order."""
    banned = set(prohibited or ())
    seen: set[str] = set()
    conflicts = []
    for tag in selected:
        if tag in banned and tag not in seen:
            conflicts.append(tag)
            seen.add(tag)
    return conflicts


@dataclass(frozen=True)
class ComplianceResult:
    conflicts: tuple[str, ...]
    sensitive_content: bool
    has_restrictions: bool

    @property
    def conflict_labels(self) -> list[str]:
        return [content_label(tag) for tag in self.conflicts]

    @property
    def needs_approval(self) -> bool:
        return bool(self.conflicts) or self.has_restrictions or self.sensitive_content

    @property
    def requires_confirmation(self) -> bool:
        return bool(self.conflicts)

    def warning_message(self) -> str:
        return (
            "Warning: This campaign contains content types that may not be "
            "allowed on this property: "
            f"{', '.join(self.conflict_labels)}. "
            "Your booking will be sent for manual review."
        )


def check_compliance(
    selected: Iterable[str],
    prohibited: Iterable[str] | None,
) -> ComplianceResult:
    selected = list(selected)
    prohibited = list(prohibited or ())
    return ComplianceResult(
        conflicts=tuple(content_conflicts(selected, prohibited)),
        sensitive_content=any(tag in SENSITIVE_CONTENT for tag in selected),
        has_restrictions=bool(prohibited),
    )
