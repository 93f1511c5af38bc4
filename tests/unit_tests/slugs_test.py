import random

import pytest

from campus_bracket.utils.errors import SlugGenerationError
from campus_bracket.utils.slugs import (
    MAX_GENERATION_ATTEMPTS,
    TEAM_CODE_ALPHABET,
    TEAM_CODE_LENGTH,
    build_slug,
    unique_code,
    unique_slug,
)


def test_build_slug() -> None:
    assert build_slug("Spring Clash 2026", "tournament") == "spring-clash-2026"
    assert build_slug("  Café   Légendes -- Finals ", "tournament") == "cafe-legendes-finals"
    assert build_slug("!!!", "team") == "team"


@pytest.mark.asyncio
async def test_unique_slug_prefers_plain_slug() -> None:
    async def is_taken(_: str) -> bool:
        return False

    slug = await unique_slug(
        "Night Owls", is_taken, fallback="team", max_length=40, suffix_length=4
    )
    assert slug == "night-owls"


@pytest.mark.asyncio
async def test_unique_slug_appends_suffix_on_collision() -> None:
    taken = {"night-owls"}

    async def is_taken(candidate: str) -> bool:
        return candidate in taken

    slug = await unique_slug(
        "Night Owls",
        is_taken,
        fallback="team",
        max_length=40,
        suffix_length=4,
        rng=random.Random(3),
    )
    base, suffix = slug.rsplit("-", 1)
    assert base == "night-owls"
    assert len(suffix) == 4
    assert suffix.isalnum() and suffix.lower() == suffix


@pytest.mark.asyncio
async def test_unique_slug_truncates_base() -> None:
    async def is_taken(_: str) -> bool:
        return False

    slug = await unique_slug(
        "x" * 80, is_taken, fallback="tournament", max_length=50, suffix_length=5
    )
    assert slug == "x" * 50


@pytest.mark.asyncio
async def test_unique_slug_gives_up_after_max_attempts() -> None:
    attempts: list[str] = []

    async def is_taken(candidate: str) -> bool:
        attempts.append(candidate)
        return True

    with pytest.raises(SlugGenerationError) as exc_info:
        await unique_slug("Night Owls", is_taken, fallback="team", max_length=40, suffix_length=4)

    assert len(attempts) == MAX_GENERATION_ATTEMPTS
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Unable to generate a unique team slug."


@pytest.mark.asyncio
async def test_unique_code_is_uppercase_alphanumeric() -> None:
    async def is_taken(_: str) -> bool:
        return False

    code = await unique_code(TEAM_CODE_ALPHABET, TEAM_CODE_LENGTH, is_taken)
    assert len(code) == 6
    assert all(character in TEAM_CODE_ALPHABET for character in code)


@pytest.mark.asyncio
async def test_unique_code_retries_taken_codes() -> None:
    first_code: list[str] = []

    async def is_taken(candidate: str) -> bool:
        if not first_code:
            first_code.append(candidate)
            return True
        return False

    code = await unique_code(
        TEAM_CODE_ALPHABET, TEAM_CODE_LENGTH, is_taken, rng=random.Random(5)
    )
    assert len(first_code) == 1
    assert len(code) == TEAM_CODE_LENGTH
