"""Copyright ledger validation for releases.

A release's copyright ledger is accepted only when every entry is well formed,
every referenced artist exists, and the percentages total exactly 100. The
checks run in that order and the first failing stage is reported.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence

from src.models.artist import Artist
from src.services.business_rules import CopyrightLedgerRules
from src.services.exceptions import (
    CopyrightPercentageMismatch,
    InvalidCopyrightEntry,
    UnknownFeaturingArtist,
)
from src.services.repositories import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass
class LedgerResolution:
    """Outcome of a successful ledger check."""
    artists: List[Artist] = field(default_factory=list)
    featuring_artists: List[Artist] = field(default_factory=list)

    @property
    def featuring_names(self) -> List[str]:
        return [artist.name for artist in self.featuring_artists]


class CopyrightLedgerValidator:
    """Validates a copyright ledger and resolves the artists it names."""

    def __init__(self, repository: CatalogRepository):
        self.repository = repository

    async def resolve(
        self,
        entries: Sequence[Mapping[str, Any]],
        primary_artist_id: int
    ) -> LedgerResolution:
        """
        Check a ledger and resolve its featuring artists.

        Args:
            entries: Copyright entries with ``artist_id`` or ``owner_name``,
                ``role`` and ``percentage``
            primary_artist_id: Owner of the release; never counted as featuring

        Returns:
            LedgerResolution: Resolved artists, featuring artists ordered by id

        Raises:
            InvalidCopyrightEntry: An entry is malformed
            UnknownFeaturingArtist: Some referenced artist does not exist
            CopyrightPercentageMismatch: Percentages do not total 100
        """
        structural = CopyrightLedgerRules.check_entries(entries)
        if not structural.is_valid:
            first = structural.errors[0]
            raise InvalidCopyrightEntry(
                first.message,
                field=first.field,
                meta={"errors": [
                    {"field": error.field, "message": error.message}
                    for error in structural.errors
                ]},
            )

        requested_ids = CopyrightLedgerRules.referenced_artist_ids(entries)
        artists = await self.repository.get_artists_by_ids(requested_ids)
        if len(artists) != len(requested_ids):
            found = {artist.id for artist in artists}
            missing = sorted(artist_id for artist_id in requested_ids if artist_id not in found)
            logger.info(f"Copyright ledger references unknown artists: {missing}")
            raise UnknownFeaturingArtist(
                "One or more artists in copyrights do not exist",
                field="copyrights",
                meta={"missing_artist_ids": missing},
            )

        total_check = CopyrightLedgerRules.check_percentage_total(entries)
        if not total_check.is_valid:
            error = total_check.errors[0]
            raise CopyrightPercentageMismatch(error.message, field=error.field)

        return LedgerResolution(
            artists=artists,
            featuring_artists=[artist for artist in artists if artist.id != primary_artist_id],
        )
