"""Short code generation.

Codes are drawn uniformly at random from a 62-symbol alphabet; with six
positions the address space is 62**6 (about 56.8 billion) codes.
"""

import logging
import random
import string
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.config import settings
from shortener.repositories.base import RepositoryError
from shortener.repositories.url_repository import URLRepository
from shortener.services.exceptions import ShortCodeExhaustedError, StoreError

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

_system_random = random.SystemRandom()


def generate_short_code(
    length: int = 6,
    alphabet: str = ALPHABET,
    rng: Optional[random.Random] = None
) -> str:
    """
    Draw one candidate short code.

    Every position is chosen independently and uniformly from ``alphabet``.

    Args:
        length: Number of characters in the code
        alphabet: Symbols to draw from
        rng: Random source; defaults to the OS-backed SystemRandom

    Returns:
        str: A candidate code, not checked against the store
    """
    rng = rng or _system_random
    return "".join(rng.choice(alphabet) for _ in range(length))


async def resolve_unique_code(
    db: AsyncSession,
    url_repository: URLRepository,
    max_attempts: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> str:
    """
    Generate a short code that is unused at the time of the check.

    The check is not atomic with a later insert; the unique index on
    ``short_code`` rejects a code taken in between.

    Args:
        db: Database session
        url_repository: Store to check candidates against
        max_attempts: Draws allowed before giving up (defaults to settings)
        rng: Random source passed to the generator

    Returns:
        str: A code with no mapping in the store

    Raises:
        StoreError: If the store lookup fails; never retried
        ShortCodeExhaustedError: If every draw collided
    """
    if max_attempts is None:
        max_attempts = settings.URL_CODE_MAX_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        candidate = generate_short_code(settings.URL_CODE_LENGTH, settings.URL_CODE_CHARS, rng)
        try:
            taken = await url_repository.check_short_code_exists(db, candidate)
        except RepositoryError as e:
            logger.error(f"Store error while checking short code: {e}")
            raise StoreError("Database error.") from e

        if not taken:
            return candidate
        logger.info(f"Short code collision on attempt {attempt}/{max_attempts}")

    raise ShortCodeExhaustedError(
        f"Failed to generate a unique short code after {max_attempts} attempts"
    )
