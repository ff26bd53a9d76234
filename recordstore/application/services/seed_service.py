"""Initial catalog import from a packaged JSON file."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from recordstore.application.utilities.cache_keys import QUERY_PREFIX
from recordstore.config import get_logger, settings
from recordstore.domain.entities import BulkInsertResult, Record
from recordstore.domain.exceptions import ValidationError
from recordstore.domain.repositories import CacheProtocol, RecordStoreProtocol

logger = get_logger(__name__)


def load_seed_records(path: Path) -> list[Record]:
    """Read seed entries, tagging each one as not user-created.

    Raises:
        ValidationError: The file is not a JSON list or an entry is invalid
    """
    try:
        raw: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Cannot read seed file {path}: {e}") from e
    if not isinstance(raw, list):
        raise ValidationError(f"Seed file {path} must hold a JSON list")

    now = datetime.now(UTC)
    records = []
    for index, entry in enumerate(raw):
        try:
            records.append(
                Record.from_dict(
                    {
                        "created": now.isoformat(),
                        "lastModified": now.isoformat(),
                        **entry,
                        "id": None,
                        "isUserCreated": False,
                    }
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid seed entry #{index}: {e}") from e
    return records


class SeedService:
    """Loads the seed catalog into the record store."""

    def __init__(
        self,
        store: RecordStoreProtocol,
        cache: CacheProtocol,
        seed_file: Path | None = None,
    ) -> None:
        self.store = store
        self.cache = cache
        self.seed_file = seed_file or settings.seed.seed_file

    async def seed(self) -> BulkInsertResult:
        """Insert every seed record, skipping ones that already exist."""
        records = load_seed_records(self.seed_file)
        result = await self.store.insert_many(records, continue_on_error=True)
        await self.cache.delete_prefix(QUERY_PREFIX)

        for record, reason in result.failed:
            logger.debug(
                f"Seed record skipped: {record.artist} - {record.album}", reason=reason
            )
        logger.info(
            f"Seeded {result.inserted_count} records",
            skipped=result.failed_count,
            seed_file=str(self.seed_file),
        )
        return result

    async def seed_if_empty(self) -> BulkInsertResult | None:
        """Seed only when the store holds no records."""
        if not await self.store.is_empty():
            logger.debug("Record store not empty, skipping seed")
            return None
        return await self.seed()
