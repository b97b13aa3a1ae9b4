# pastebox/constants.py
# Store key layout

PASTE_PREFIX: str = "paste:"
USER_PASTES_PREFIX: str = "user_pastes:"
PUBLIC_PASTES_KEY: str = "public_pastes"
PRIVATE_PASTES_PREFIX: str = "private_pastes:"
RATE_LIMIT_PREFIX: str = "rate_limit:"
PASTE_EVENT_PREFIX: str = "paste_event:"


def paste_key(paste_id: str) -> str:
    return f"{PASTE_PREFIX}{paste_id}"


def owner_index_key(user_id: str) -> str:
    return f"{USER_PASTES_PREFIX}{user_id}"


def private_index_key(user_id: str) -> str:
    return f"{PRIVATE_PASTES_PREFIX}{user_id}"


def rate_limit_key(user_id: str) -> str:
    return f"{RATE_LIMIT_PREFIX}{user_id}"


def paste_event_key(paste_id: str) -> str:
    return f"{PASTE_EVENT_PREFIX}{paste_id}"
