"""Business rules and validation logic for catalog publication."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

# Award thresholds in ascending order
GOLD_THRESHOLD = 50000
PLATINUM_THRESHOLD = 100000
DIAMOND_THRESHOLD = 1000000

AWARD_THRESHOLDS = (
    ("Gold", GOLD_THRESHOLD),
    ("Platinum", PLATINUM_THRESHOLD),
    ("Diamond", DIAMOND_THRESHOLD),
)

MAX_ARTIST_GENRES = 3
FULL_SHARE = Decimal("100")
# Shares are stored with three decimal places
PERCENTAGE_STEP = Decimal("0.001")

FEATURING_PATTERN = re.compile(r"\s*\(\s*feat\.[^)]*\)", re.IGNORECASE)


@dataclass
class ValidationError:
    """Validation error."""
    field: str
    code: str
    message: str


@dataclass
class ValidationResult:
    """Validation result."""
    is_valid: bool
    errors: List[ValidationError]


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return len(value.strip()) > 0
    return True


def _as_decimal(value: Any) -> Decimal:
    return Decimal(str(value))


class CopyrightLedgerRules:
    """Pure rules for one release's copyright ledger."""

    @staticmethod
    def check_entries(entries: Sequence[Mapping[str, Any]]) -> ValidationResult:
        """
        Structural check: each entry names exactly one owner, a role and a
        percentage in [0, 100].
        """
        errors = []

        for i, entry in enumerate(entries):
            field_prefix = f"copyrights[{i}]"
            has_artist = _is_set(entry.get("artist_id"))
            has_owner = _is_set(entry.get("owner_name"))

            if not has_artist and not has_owner:
                errors.append(ValidationError(
                    field=field_prefix,
                    code="INVALID_COPYRIGHT",
                    message="Either artist_id or owner_name must be provided."
                ))
            elif has_artist and has_owner:
                errors.append(ValidationError(
                    field=field_prefix,
                    code="INVALID_COPYRIGHT",
                    message="Provide either artist_id or owner_name, not both."
                ))

            if not _is_set(entry.get("role")):
                errors.append(ValidationError(
                    field=f"{field_prefix}.role",
                    code="INVALID_COPYRIGHT",
                    message="Copyright role is required."
                ))

            try:
                percentage = _as_decimal(entry.get("percentage"))
                if percentage < 0 or percentage > 100:
                    errors.append(ValidationError(
                        field=f"{field_prefix}.percentage",
                        code="INVALID_COPYRIGHT",
                        message="Percentage must be between 0 and 100."
                    ))
                elif percentage != percentage.quantize(PERCENTAGE_STEP):
                    errors.append(ValidationError(
                        field=f"{field_prefix}.percentage",
                        code="INVALID_COPYRIGHT",
                        message="Percentage cannot have more than 3 decimal places."
                    ))
            except (InvalidOperation, ValueError, TypeError):
                errors.append(ValidationError(
                    field=f"{field_prefix}.percentage",
                    code="INVALID_COPYRIGHT",
                    message="Percentage must be a valid number."
                ))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    @staticmethod
    def referenced_artist_ids(entries: Iterable[Mapping[str, Any]]) -> List[int]:
        """Distinct artist ids in entry order."""
        seen: List[int] = []
        for entry in entries:
            artist_id = entry.get("artist_id")
            if artist_id is not None and artist_id not in seen:
                seen.append(artist_id)
        return seen

    @staticmethod
    def percentage_total(entries: Iterable[Mapping[str, Any]]) -> Decimal:
        total = Decimal("0")
        for entry in entries:
            total += _as_decimal(entry["percentage"])
        return total

    @staticmethod
    def check_percentage_total(entries: Sequence[Mapping[str, Any]]) -> ValidationResult:
        """The ledger must total exactly 100 percent."""
        total = CopyrightLedgerRules.percentage_total(entries)
        if total != FULL_SHARE:
            return ValidationResult(is_valid=False, errors=[ValidationError(
                field="copyrights",
                code="COPYRIGHT_PERCENTAGE_ERROR",
                message=f"Total percentage must be 100% (current: {total.normalize():f}%)"
            )])
        return ValidationResult(is_valid=True, errors=[])


def strip_featuring(title: str) -> str:
    """Remove any ``(feat. ...)`` fragment from a title."""
    stripped = FEATURING_PATTERN.sub("", title or "")
    return re.sub(r"\s{2,}", " ", stripped).strip()


def compose_featuring_title(title: str, featuring_names: Sequence[str]) -> str:
    """
    Build the display title for a release.

    Caller-supplied featuring fragments are always dropped; the suffix is
    regenerated from ``featuring_names`` in the order given. Applying the
    function to its own output yields the same title.
    """
    base = strip_featuring(title)
    if not featuring_names:
        return base
    return f"{base} (feat. {', '.join(featuring_names)})"


def rank_top_genres(genre_counts: Mapping[int, int], limit: int = MAX_ARTIST_GENRES) -> List[int]:
    """Genre ids by descending count, ties broken by ascending id."""
    ranked = sorted(genre_counts.items(), key=lambda item: (-item[1], item[0]))
    return [genre_id for genre_id, count in ranked[:limit] if count > 0]


def detect_awards_crossed(old_listens: int, new_listens: int) -> List[str]:
    """Awards whose threshold lies in ``(old_listens, new_listens]``."""
    return [
        award
        for award, threshold in AWARD_THRESHOLDS
        if old_listens < threshold <= new_listens
    ]


class ReleaseRules:
    """Rules shared by single and album publication."""

    @staticmethod
    def validate_title(title: Optional[str], max_length: int = 255) -> ValidationResult:
        errors = []
        base = strip_featuring(title or "")
        if not base:
            errors.append(ValidationError(
                field="title",
                code="TITLE_REQUIRED",
                message="Release title is required"
            ))
        elif len(base) > max_length:
            errors.append(ValidationError(
                field="title",
                code="TITLE_TOO_LONG",
                message=f"Title cannot exceed {max_length} characters"
            ))
        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    @staticmethod
    def non_modifiable_field_warnings(supplied_fields: Iterable[str]) -> List[Dict[str, str]]:
        """Warnings for attributes the caller sent but cannot change."""
        return [
            {
                "code": "FIELD_NOT_MODIFIABLE",
                "field": field,
                "message": f"Field '{field}' cannot be modified by the user.",
            }
            for field in sorted(set(supplied_fields))
        ]
