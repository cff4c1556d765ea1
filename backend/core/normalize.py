import unicodedata


def normalize(text) -> str:
    """
    Fold text for fuzzy comparison: lowercase and strip diacritics.

    Non-string input (including None) normalizes to "".
    """
    if not isinstance(text, str):
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
