"""Text normalization utilities"""


def normalize_text(text):
    """Normalize UI text for matching - lowercase, collapse whitespace"""
    if not text:
        return ""
    return " ".join(text.lower().split())


def contains_all(text, phrases):
    """True if every phrase occurs in text (both normalized)"""
    haystack = normalize_text(text)
    return all(normalize_text(p) in haystack for p in phrases)


def same_value(a, b):
    """Case-insensitive cell value comparison, ignoring surrounding whitespace"""
    return (a or "").strip().lower() == (b or "").strip().lower()
