"""Tests for team identity normalization."""

import pytest

from fixture_calendars.teams import TeamNormalizer, TeamVocabulary, fold, slugify


def test_spelling_variants_collapse(normalizer: TeamNormalizer) -> None:
    """Case, punctuation and club suffix variants map to one team."""
    a = normalizer.normalize("C.D. LAS FLORES SEVILLA MORADO")
    b = normalizer.normalize("CD Las Flores Sevilla Morado")
    c = normalizer.normalize("  Club Voleibol  Las   Flores Morado ")

    assert a == b == c
    assert a.display_name == "LAS FLORES MORADO"
    assert a.slug == "las_flores_morado"


def test_reserve_marker_is_a_distinct_team(normalizer: TeamNormalizer) -> None:
    reserve = normalizer.normalize("EVB LAS FLORES AMARILLO")
    first = normalizer.normalize("C.D. LAS FLORES SEVILLA AMARILLO")

    assert reserve.display_name == "EVB LAS FLORES AMARILLO"
    assert first.display_name == "LAS FLORES AMARILLO"
    assert reserve != first
    assert reserve.slug != first.slug


def test_reserve_and_color_are_orthogonal(normalizer: TeamNormalizer) -> None:
    names = {
        normalizer.normalize(raw).display_name
        for raw in (
            "LAS FLORES",
            "LAS FLORES MORADO",
            "EVB LAS FLORES",
            "EVB LAS FLORES MORADO",
        )
    }
    assert len(names) == 4


def test_diacritics_do_not_split_teams(normalizer: TeamNormalizer) -> None:
    """Púrpura with and without accent is one team; display keeps the accent."""
    with_accent = normalizer.normalize("C.D. Las Flores Púrpura")
    without = normalizer.normalize("CD LAS FLORES PURPURA")

    assert with_accent == without
    assert with_accent.display_name == "LAS FLORES PÚRPURA"
    assert with_accent.slug == "las_flores_purpura"


def test_base_team_without_color(normalizer: TeamNormalizer) -> None:
    team = normalizer.normalize("C.D. LAS FLORES SEVILLA")
    assert team.display_name == "LAS FLORES"
    assert team.slug == "las_flores"
    assert team.is_club is True


def test_category_words_are_stripped(normalizer: TeamNormalizer) -> None:
    team = normalizer.normalize("C.D. LAS FLORES SEVILLA INFANTIL ALBERO")
    assert team.display_name == "LAS FLORES ALBERO"
    assert team.category == "INFANTIL"


def test_category_hint_used_when_name_has_none(normalizer: TeamNormalizer) -> None:
    team = normalizer.normalize("LAS FLORES MORADO", "Cadete Femenino")
    assert team.category == "CADETE FEMENINO"
    assert normalizer.normalize("LAS FLORES MORADO").category == "GENERAL"


def test_category_not_part_of_identity(normalizer: TeamNormalizer) -> None:
    """A cross-entry listed on two category pages stays the same team."""
    infantil = normalizer.normalize("LAS FLORES MORADO", "INFANTIL")
    cadete = normalizer.normalize("LAS FLORES MORADO", "CADETE")
    assert infantil == cadete
    assert hash(infantil) == hash(cadete)


def test_opponent_is_only_cleaned(normalizer: TeamNormalizer) -> None:
    team = normalizer.normalize("C.D.  Voleibol Dos Hermanas")
    assert team.display_name == "DOS HERMANAS"
    assert team.slug == "dos_hermanas"
    assert team.is_club is False


def test_opponent_with_color_word_is_not_canonicalized(
    normalizer: TeamNormalizer,
) -> None:
    team = normalizer.normalize("Tomares Morado")
    assert team.display_name == "TOMARES MORADO"


def test_opponent_made_only_of_noise_keeps_its_name(
    normalizer: TeamNormalizer,
) -> None:
    team = normalizer.normalize("C.D. Sevilla")
    assert team.display_name == "C.D. SEVILLA"
    assert team.slug == "c_d_sevilla"


@pytest.mark.parametrize("raw", ["", "   ", "!!!", "---", "()", " "])
def test_garbage_still_yields_a_slug(normalizer: TeamNormalizer, raw: str) -> None:
    team = normalizer.normalize(raw)
    assert team.slug
    assert team.slug == "team"


def test_normalize_is_deterministic(normalizer: TeamNormalizer) -> None:
    raw = "E.V.B. las flores sevilla MORADO"
    assert normalizer.normalize(raw) == normalizer.normalize(raw)
    assert TeamNormalizer().normalize(raw) == normalizer.normalize(raw)


def test_custom_vocabulary() -> None:
    vocabulary = TeamVocabulary(
        club_core="VILLA VERDE",
        reserve_marker="B",
        colors=(("AZUL", "AZUL"),),
        locality_words=frozenset({"HUELVA"}),
    )
    normalizer = TeamNormalizer(vocabulary)

    team = normalizer.normalize("C.D. Villa Verde Huelva Azul")
    assert team.display_name == "VILLA VERDE AZUL"
    assert normalizer.normalize("B Villa Verde").display_name == "B VILLA VERDE"


def test_fold_and_slugify() -> None:
    assert fold("  Alevín  púrpura ") == "ALEVIN PURPURA"
    assert slugify("LAS FLORES PÚRPURA") == "las_flores_purpura"
    assert slugify("Cadete / Femenino") == "cadete_femenino"
    assert slugify("", fallback="general") == "general"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("EVB-LAS FLORES AMARILLO", "EVB LAS FLORES AMARILLO"),
        ("E.V.B. LAS FLORES MORADO", "EVB LAS FLORES MORADO"),
        ("LAS FLORES-MORADO", "LAS FLORES MORADO"),
        ("LAS FLORES/ALBERO", "LAS FLORES ALBERO"),
        ("C.D. LAS FLORES (SEVILLA) - PÚRPURA", "LAS FLORES PÚRPURA"),
    ],
)
def test_punctuation_inside_names(
    normalizer: TeamNormalizer, raw: str, expected: str
) -> None:
    """Marker and colour survive hyphens, slashes and dotted acronyms."""
    assert normalizer.normalize(raw).display_name == expected


def test_hyphenated_reserve_is_not_the_first_team(normalizer: TeamNormalizer) -> None:
    reserve = normalizer.normalize("EVB-LAS FLORES AMARILLO")
    assert reserve != normalizer.normalize("LAS FLORES AMARILLO")
    assert reserve == normalizer.normalize("EVB LAS FLORES AMARILLO")


def test_club_core_must_be_whole_words(normalizer: TeamNormalizer) -> None:
    team = normalizer.normalize("LAS FLORESTA MORADO")
    assert team.display_name == "LAS FLORESTA MORADO"
    assert team.is_club is False
