"""Selector-prefixed single-use tokens for password resets and email verification."""

from datetime import datetime

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import new_selector_token, parse_selector


def issue_token(hasher: ISecretHasher) -> tuple[str, str, str]:
    """Return (selector, token, token_hash). Only the hash is persisted."""
    selector, token = new_selector_token()
    return selector, token, hasher.hash(token)


async def match_token(repository, hasher: ISecretHasher, token: str, now: datetime):
    """Find the pending row holding this token, or None"""
    selector = parse_selector(token)
    if selector is None:
        return None

    candidates = await repository.find_candidates(selector, now)
    match = next((row for row in candidates if hasher.verify(token, row.token_hash)), None)
    if match is None and not candidates:
        hasher.dummy_verify()
    return match
