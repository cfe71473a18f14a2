from __future__ import annotations

import os
import re
import unicodedata


def env_float(name: str, default: float, *, positive: bool = False) -> float:
    """Read a float from the environment, falling back to `default`.

    Unset, empty and non-numeric values yield the default. With `positive=True`
    values <= 0 also yield the default.
    """
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    if positive and val <= 0:
        return default
    return val


def strip_accents(text: str) -> str:
    """Drop combining marks so "ș" encodes like "s"."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


# Romanian letter order; the letters with diacritics follow their base letter.
ROMANIAN_ALPHABET = "aăâbcdefghiîjklmnopqrsștțuvwxyz"
_LETTER_RANK = {ch: i for i, ch in enumerate(ROMANIAN_ALPHABET)}
# Cedilla forms are common legacy spellings of ș and ț.
_CEDILLA_TO_COMMA = str.maketrans("şţ", "șț")


def _primary_weight(ch: str) -> tuple[int, int]:
    rank = _LETTER_RANK.get(ch)
    if rank is None:
        rank = _LETTER_RANK.get(strip_accents(ch))
    if rank is None:
        return (0, ord(ch))
    return (1, rank)


def collation_key(name: str) -> tuple:
    """Sort key for worker names in Romanian alphabetical order.

    Letters compare by their place in `ROMANIAN_ALPHABET` ("Sorin" before
    "Șerban"); other accented letters rank with their base letter. Ties fall
    back to accents, then lowercase before uppercase, then the exact name.
    """
    folded = unicodedata.normalize("NFC", name).casefold().translate(_CEDILLA_TO_COMMA)
    return (
        tuple(_primary_weight(ch) for ch in folded),
        folded,
        tuple(ch.isupper() for ch in name),
        name,
    )


def slugify(name: str, fallback: str = "necunoscut") -> str:
    """Return a filesystem-safe slug: lowercase ascii, words joined by '_'."""
    s = strip_accents(name or "").lower()
    s = re.sub(r"[^a-z0-9]+", "_", s).strip("_")
    return s or fallback
