# listing_pipeline/domain/filename_matcher.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Protocol

from .types import DriveFile, MatchedImageSet

log = logging.getLogger(__name__)

_EXT = r"\.(?:jpg|jpeg|png)$"


class FilenamePattern(Protocol):
    name: str

    def try_match(self, sequence_number: int, filename: str) -> int | None: ...


@dataclass(frozen=True)
class RegexFilenamePattern:
    """
    `template` is a regex with a `{seq}` hole for the sequence number and one
    capture group for the trailing image ordinal.
    """

    name: str
    template: str

    def try_match(self, sequence_number: int, filename: str) -> int | None:
        m = _compiled(self.template, sequence_number).search(filename.strip())
        if not m:
            return None
        return int(m.group(1))


@lru_cache(maxsize=2048)
def _compiled(template: str, sequence_number: int) -> re.Pattern[str]:
    return re.compile(template.replace("{seq}", re.escape(str(sequence_number))), re.IGNORECASE)


# Most specific first. Order is precedence.
DEFAULT_PATTERNS: tuple[FilenamePattern, ...] = (
    # "3-Lakeview-2BHK-1.jpg", "3_Lakeview_Floor 9_2.png"
    RegexFilenamePattern("seq_text_ordinal", r"^{seq}[\s_-].*?[\s_-](\d+)" + _EXT),
    # "3-1.jpg"
    RegexFilenamePattern("seq_ordinal", r"^{seq}[\s_-](\d+)" + _EXT),
    # "Property 3 - 1.jpg", "S.No 3 front 2.jpeg"
    RegexFilenamePattern("marker_seq_ordinal", r"(?:s\.?no\.?|property)\s*{seq}(?!\d).*?(\d+)" + _EXT),
)


def match_images(
    sequence_number: int,
    candidate_files: Iterable[DriveFile],
    *,
    placeholder_url: str,
    patterns: tuple[FilenamePattern, ...] = DEFAULT_PATTERNS,
) -> MatchedImageSet:
    """
    Pick the images belonging to one spreadsheet row.

    The first pattern that matches at least one file wins; only its matches are
    kept. When two files carry the same ordinal the first one in listing order
    is kept.
    """
    files = list(candidate_files)

    for pattern in patterns:
        by_ordinal: dict[int, str] = {}
        for f in files:
            ordinal = pattern.try_match(sequence_number, f.name)
            if ordinal is None:
                continue
            if ordinal in by_ordinal:
                log.warning(
                    "Row #%s: duplicate image ordinal %s in %r, keeping first match",
                    sequence_number,
                    ordinal,
                    f.name,
                )
                continue
            by_ordinal[ordinal] = f.url

        if by_ordinal:
            images = tuple(sorted(by_ordinal.items()))
            log.debug("Row #%s: %s images matched via %s", sequence_number, len(images), pattern.name)
            return MatchedImageSet(images=images, placeholder_url=placeholder_url)

    log.warning("Row #%s: no image files matched, using placeholder", sequence_number)
    return MatchedImageSet(images=(), placeholder_url=placeholder_url)
