"""Team identity normalization.

Listings spell the same squad in many ways ("C.D. LAS FLORES SEVILLA MORADO",
"CD Las Flores Sevilla Morado", "LAS FLORES MORADO"). ``TeamNormalizer`` maps
each raw string to a ``CanonicalTeam`` so that every spelling lands in the
same calendar, while keeping the reserve marker and the colour variant as
distinct classifiers.
"""

import re
import unicodedata
from dataclasses import dataclass, field

from fixture_calendars.models import CanonicalTeam

DEFAULT_CATEGORY = "GENERAL"

# "C.D.", "CD", "C. D." and friends
_CLUB_PREFIX = re.compile(r"(?<![A-Z0-9])C\s*\.?\s*D\s*\.?(?![A-Z0-9])")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SEPARATORS = re.compile(r"[^A-Z0-9]+")
# "E.V.B." -> "EVB"; needs two or more dotted letters
_DOTTED_ACRONYM = re.compile(r"(?<![A-Z0-9])(?:[A-Z0-9]\.){2,}")


def fold(text: str) -> str:
    """Strips diacritics, collapses whitespace and uppercases.

    Args:
        text: Any string (None is treated as empty).

    Returns:
        The folded string, e.g. "  Púrpura\\u00a0alevín " -> "PURPURA ALEVIN".
    """
    decomposed = unicodedata.normalize("NFD", text or "")
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.split()).upper()


def slugify(text: str, fallback: str = "team") -> str:
    """Lowercase ASCII slug with runs of other characters joined by "_".

    Args:
        text: Text to slugify.
        fallback: Returned when nothing alphanumeric survives.

    Returns:
        A non-empty, filesystem-safe slug.
    """
    s = _NON_ALNUM.sub("_", fold(text).lower()).strip("_")
    return s or fallback


@dataclass(frozen=True)
class TeamVocabulary:
    """Lookup tables used to canonicalize team names.

    Built once per run (from configuration) and handed to the normalizer.
    All words are compared after ``fold``.
    """

    club_core: str = "LAS FLORES"
    reserve_marker: str = "EVB"
    # (folded token, display spelling), in detection priority order
    colors: tuple[tuple[str, str], ...] = (
        ("AMARILLO", "AMARILLO"),
        ("ALBERO", "ALBERO"),
        ("MORADO", "MORADO"),
        ("PURPURA", "PÚRPURA"),
    )
    noise_words: frozenset[str] = frozenset({"CLUB", "VOLEIBOL"})
    locality_words: frozenset[str] = frozenset({"SEVILLA"})
    category_words: tuple[str, ...] = (
        "BENJAMIN",
        "ALEVIN",
        "INFANTIL",
        "CADETE",
        "JUVENIL",
        "JUNIOR",
        "SENIOR",
    )
    extra_noise: frozenset[str] = field(default_factory=frozenset)

    @property
    def stop_words(self) -> frozenset[str]:
        return (
            self.noise_words
            | self.locality_words
            | frozenset(self.category_words)
            | self.extra_noise
        )


class TeamNormalizer:
    """Maps raw team strings to CanonicalTeam values.

    ``normalize`` is a pure function of its arguments and the vocabulary
    given at construction; it never raises and always yields a non-empty slug.
    """

    def __init__(self, vocabulary: TeamVocabulary | None = None) -> None:
        self.vocabulary = vocabulary or TeamVocabulary()
        self._core = " ".join(
            t for t in _SEPARATORS.split(fold(self.vocabulary.club_core)) if t
        )
        self._marker = fold(self.vocabulary.reserve_marker)
        self._stop_words = frozenset(fold(w) for w in self.vocabulary.stop_words)

    def _tokens(self, folded: str) -> list[str]:
        without_prefix = _CLUB_PREFIX.sub(" ", folded)
        collapsed = _DOTTED_ACRONYM.sub(
            lambda m: m.group(0).replace(".", ""), without_prefix
        )
        return [
            token
            for token in _SEPARATORS.split(collapsed)
            if token and token not in self._stop_words
        ]

    def _has_core(self, cleaned: str) -> bool:
        return bool(self._core) and f" {self._core} " in f" {cleaned} "

    def detect_category(self, raw_name: str) -> str | None:
        """Returns the category word that leaked into a team name, if any."""
        words = set(_SEPARATORS.split(fold(raw_name)))
        for word in self.vocabulary.category_words:
            if fold(word) in words:
                return fold(word)
        return None

    def detect_color(self, tokens: list[str]) -> str | None:
        present = set(tokens)
        for token, display in self.vocabulary.colors:
            if fold(token) in present:
                return display
        return None

    def is_club_name(self, raw_name: str) -> bool:
        """True when the cleaned name contains the club core."""
        return self._has_core(" ".join(self._tokens(fold(raw_name))))

    def display_name(self, raw_name: str) -> str:
        folded = fold(raw_name)
        tokens = self._tokens(folded)
        cleaned = " ".join(tokens)

        if not self._has_core(cleaned):
            # Opponents only get cleaned up; a name made only of noise keeps
            # its folded spelling.
            return cleaned or folded

        parts = []
        if self._marker and self._marker in tokens:
            parts.append(self.vocabulary.reserve_marker)
        parts.append(self.vocabulary.club_core)
        color = self.detect_color(tokens)
        if color:
            parts.append(color)
        return " ".join(parts)

    def normalize(self, raw_name: str, category: str = "") -> CanonicalTeam:
        """Canonicalizes a raw team name.

        Args:
            raw_name: Team name as listed.
            category: Category of the page the name was listed on. A category
                word inside the name itself takes precedence.

        Returns:
            The CanonicalTeam for this name.
        """
        display = self.display_name(raw_name)
        return CanonicalTeam(
            display_name=display,
            slug=slugify(display),
            category=(
                self.detect_category(raw_name) or fold(category) or DEFAULT_CATEGORY
            ),
            is_club=self.is_club_name(raw_name),
        )
