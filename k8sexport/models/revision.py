"""Store revision model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Revision(BaseModel):
    """The ``{main, sub}`` revision encoded in every bolt key.

    Revisions are totally ordered by ``(main, sub)`` and are only used to
    keep export filenames distinct for the same logical key.
    """

    model_config = ConfigDict(frozen=True)

    main: int
    sub: int

    @property
    def suffix(self) -> str:
        """Filename suffix, e.g. ``-5-0``."""
        return f"-{self.main}-{self.sub}"

    def __lt__(self, other: Revision) -> bool:
        return (self.main, self.sub) < (other.main, other.sub)
