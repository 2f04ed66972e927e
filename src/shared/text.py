"""Derived blog fields: slug and reading time."""

import math
import re

from slugify import slugify

WORDS_PER_MINUTE = 200

# Symbols spelled out before punctuation is dropped: "100%" -> "100percent".
SYMBOL_WORDS = [
    ["&", "and"],
    ["%", "percent"],
    ["$", "dollar"],
    ["<", "less"],
    [">", "greater"],
    ["|", "or"],
    ["€", "euro"],
    ["£", "pound"],
]

_WORD_BREAK = re.compile(r"[\s\-]+")


def generate_slug(title: str) -> str:
    """Lowercase ASCII slug.

    Words are split on whitespace and hyphens and joined with "-"; any other
    punctuation is deleted rather than turned into a separator, so
    "Hello,World" -> "helloworld" and "Rock & Roll" -> "rock-and-roll".
    """
    words = (
        slugify(word, separator="", replacements=SYMBOL_WORDS)
        for word in _WORD_BREAK.split(title or "")
    )
    return "-".join(word for word in words if word)


def count_words(content: str) -> int:
    return len((content or "").split())


def calculate_reading_time(content: str) -> int:
    return math.ceil(count_words(content) / WORDS_PER_MINUTE)
