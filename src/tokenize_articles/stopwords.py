"""Stopword set construction."""

import logging
from pathlib import Path
from typing import Iterable

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

logger = logging.getLogger(__name__)

# ENGLISH_STOP_WORDS has no apostrophe forms; tokens keep internal apostrophes
ENGLISH_CONTRACTIONS = frozenset(
    {
        "ain't", "aren't", "can't", "couldn't", "didn't", "doesn't", "don't",
        "hadn't", "hasn't", "haven't", "isn't", "mightn't", "mustn't",
        "needn't", "shan't", "shouldn't", "wasn't", "weren't", "won't",
        "wouldn't",
        "i'm", "i've", "i'd", "i'll",
        "you're", "you've", "you'd", "you'll",
        "he'd", "he'll", "she'd", "she'll",
        "we're", "we've", "we'd", "we'll",
        "they're", "they've", "they'd", "they'll",
        "it'd", "it'll", "that'd", "that'll", "there'd", "there'll",
        "who'd", "who'll", "who've", "what're", "what've", "what'll",
        "let's", "y'all",
    }
)

STOPWORD_BASES = {
    "english": ENGLISH_STOP_WORDS | ENGLISH_CONTRACTIONS,
    "none": frozenset(),
}


def load_stopwords(
    base: str = "english",
    path: str | Path | None = None,
    extra: Iterable[str] = (),
) -> frozenset[str]:
    """
    Build a lower-cased stopword set.

    Args:
        base: Name of the built-in list to start from ("english" or "none")
        path: Optional newline-delimited file of additional stopwords;
            blank lines and lines starting with "#" are ignored
        extra: Additional stopwords (e.g. from config)

    Returns:
        Frozen set of stopwords
    """
    if base not in STOPWORD_BASES:
        raise ValueError(f"Unknown stopword base: {base}. Must be one of {sorted(STOPWORD_BASES)}")

    words = {word.lower() for word in STOPWORD_BASES[base]}

    if path is not None:
        with open(path, encoding="utf-8") as f:
            for line in f:
                word = line.strip().lower()
                if word and not word.startswith("#"):
                    words.add(word)

    words.update(word.strip().lower() for word in extra if word and word.strip())

    logger.info("Loaded %d stopwords (base=%s)", len(words), base)
    return frozenset(words)
