"""
Splits statement text into tokens.
"""

from typing import List

PUNCTUATION = ("(", ")", ",")


def tokenize(query: str) -> List[str]:
    """Split a statement into tokens.

    Parentheses and commas always become their own tokens; everything else
    is separated by whitespace. Case is preserved.
    """
    for char in PUNCTUATION:
        query = query.replace(char, f" {char} ")
    return query.split()
