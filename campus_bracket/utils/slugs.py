import random
import re
import unicodedata
from collections.abc import Awaitable, Callable

from campus_bracket.utils.errors import SlugGenerationError

RANDOM_SUFFIX_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
TEAM_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
TEAM_CODE_LENGTH = 6
MAX_GENERATION_ATTEMPTS = 20

# Returns True when the candidate is already in use within the scope.
IsTaken = Callable[[str], Awaitable[bool]]


def build_slug(value: str, fallback: str) -> str:
    ascii_value = (
        unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii").lower()
    )
    base = re.sub(r"[^a-z0-9\s-]", "", ascii_value).strip()
    base = re.sub(r"\s+", "-", base)
    base = re.sub(r"-+", "-", base)
    return base or fallback


def random_string(length: int, alphabet: str, rng: random.Random | None = None) -> str:
    source = rng if rng is not None else random.SystemRandom()
    return "".join(source.choice(alphabet) for _ in range(length))


async def unique_slug(
    candidate_text: str,
    is_taken: IsTaken,
    *,
    fallback: str,
    max_length: int,
    suffix_length: int,
    rng: random.Random | None = None,
) -> str:
    """
    Turn free text into a slug that is not taken yet.

    The plain slug is tried first, after that a random suffix is appended. Gives up after
    `MAX_GENERATION_ATTEMPTS` candidates.
    """
    base = build_slug(candidate_text, fallback)[:max_length]

    for attempt in range(MAX_GENERATION_ATTEMPTS):
        suffix = (
            "" if attempt == 0 else f"-{random_string(suffix_length, RANDOM_SUFFIX_ALPHABET, rng)}"
        )
        candidate = f"{base}{suffix}"
        if not await is_taken(candidate):
            return candidate

    raise SlugGenerationError(f"Unable to generate a unique {fallback} slug.")


async def unique_code(
    alphabet: str,
    length: int,
    is_taken: IsTaken,
    *,
    rng: random.Random | None = None,
) -> str:
    for _ in range(MAX_GENERATION_ATTEMPTS):
        candidate = random_string(length, alphabet, rng)
        if not await is_taken(candidate):
            return candidate

    raise SlugGenerationError("Unable to generate a unique team code.")
