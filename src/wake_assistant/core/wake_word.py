"""Wake phrase matching."""


def contains_wake_word(text: str, wake_phrase: str) -> bool:
    """Case-sensitive substring match. An empty wake phrase never matches."""
    if not wake_phrase:
        return False
    return wake_phrase in text
