"""Test utilities for URL shortener tests."""

import random
import string
from typing import Any, Dict, Optional

from shortener.core.security import hash_password
from shortener.models.url import UrlMapping, url_digest
from shortener.models.user import Credential


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random scheme-less URL, as it is stored."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"{domain}/{path}"


def create_test_mapping_data(
    original_url: Optional[str] = None,
    short_code: Optional[str] = None
) -> Dict[str, Any]:
    """Create test data dict for a UrlMapping."""
    original_url = original_url or random_url()
    return {
        "original_url": original_url,
        "url_hash": url_digest(original_url),
        "short_code": short_code or random_string(6),
    }


async def create_test_mapping(
    db,
    original_url: Optional[str] = None,
    short_code: Optional[str] = None
) -> UrlMapping:
    """Create and commit a test UrlMapping."""
    mapping = UrlMapping(**create_test_mapping_data(original_url, short_code))
    db.add(mapping)
    await db.commit()
    await db.refresh(mapping)
    return mapping


async def create_test_user(db, username: str = "admin", password: str = "secret") -> Credential:
    """Create and commit a credential with a hashed password."""
    credential = Credential(username=username, password_hash=hash_password(password))
    db.add(credential)
    await db.commit()
    await db.refresh(credential)
    return credential


class SequenceRandom:
    """Random source replaying a fixed sequence of symbols, then repeating the last one."""

    def __init__(self, symbols: str):
        self.symbols = list(symbols)
        self.position = 0

    def choice(self, seq):
        index = min(self.position, len(self.symbols) - 1)
        self.position += 1
        return self.symbols[index]
