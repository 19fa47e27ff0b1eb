"""Source location index: fully qualified identifier -> location string."""

from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from pydantic import TypeAdapter, ValidationError

from nixdocgen.core.exceptions import LocationIndexError
from nixdocgen.core.logging import get_logger

logger = get_logger(__name__)

_LOCATIONS_ADAPTER = TypeAdapter(dict[str, str])


class LocationIndex(Mapping[str, str]):
    """Read-only mapping loaded once per run.

    Keys are identifiers such as ``lib.strings.concatStrings``; values are
    location strings, usually Markdown links to the source line.
    """

    def __init__(self, locations: Mapping[str, str] | None = None) -> None:
        self._locations = MappingProxyType(dict(locations or {}))

    @classmethod
    def from_file(cls, path: str | Path) -> "LocationIndex":
        """Load a location index from a JSON object file.

        Raises
        ------
        LocationIndexError
            If the file cannot be read or is not a JSON object of strings
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise LocationIndexError(path, f"cannot be read: {e}") from e

        try:
            locations = _LOCATIONS_ADAPTER.validate_json(data)
        except ValidationError as e:
            raise LocationIndexError(path, f"malformed location data: {e}") from e

        logger.debug("Loaded {count} locations from {path}", count=len(locations), path=path)
        return cls(locations)

    def __getitem__(self, ident: str) -> str:
        return self._locations[ident]

    def __iter__(self) -> Iterator[str]:
        return iter(self._locations)

    def __len__(self) -> int:
        return len(self._locations)
