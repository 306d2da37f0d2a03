# Copyright © 2022 CISPA Helmholtz Center for Information Security.
# Author: Dominic Steinhöfel.
#
# This file is part of devicesamples.
#
# devicesamples is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# devicesamples is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with devicesamples.  If not, see <http://www.gnu.org/licenses/>.

import importlib.resources
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple, List, Dict, Callable, Any

from devicesamples.type_defs import Grammar, CanonicalGrammar

RE_NONTERMINAL = re.compile(r"(<[^<> ]*>)")
RE_EXTENDED_NONTERMINAL = re.compile(r"(<[^<> ]*>[?+*])")
RE_EXPANSION_TOKEN = re.compile(r"(<[^<> ]*>[?+*]?)")


@lru_cache(maxsize=None)
def is_nonterminal(s):
    return RE_NONTERMINAL.match(s)


def split_expansion(expansion: str) -> List[str]:
    """
    Splits the given expansion alternative into tokens. EBNF operators directly
    following a nonterminal stay attached to it.

    >>> str(split_expansion("a<b><b>c<d>e"))
    "['a', '<b>', '<b>', 'c', '<d>', 'e']"

    >>> str(split_expansion("[<number>,<space>*]<digit>+"))
    "['[', '<number>', ',', '<space>*', ']', '<digit>+']"

    :param expansion: The expansion alternative to split at nonterminal boundaries.
    :return: The separated terminal and nonterminal symbols in the expansion, in the
        original order.
    """

    return [token for token in RE_EXPANSION_TOKEN.split(expansion) if token]


@lru_cache(maxsize=None)
def split_operator(token: str) -> Tuple[str, str]:
    """
    >>> split_operator("<digit>+")
    ('<digit>', '+')

    >>> split_operator("<digit>")
    ('<digit>', '')

    >>> split_operator("+")
    ('+', '')
    """

    if RE_EXTENDED_NONTERMINAL.fullmatch(token):
        return token[:-1], token[-1]

    return token, ""


def canonical(grammar: Grammar) -> CanonicalGrammar:
    return {
        k: [split_expansion(expression) for expression in alternatives]
        for k, alternatives in grammar.items()
    }


def srange(characters: str) -> List[str]:
    """Construct a list with all characters in the string"""
    return [c for c in characters]


def ignore_case(nonterminal: str, keyword: str) -> Grammar:
    """
    Creates grammar rules matching `keyword` regardless of the capitalization of
    its letters. Each letter becomes a two-character class; other characters
    remain terminals.

    >>> for key, expansions in ignore_case("<kw>", "ab:").items():
    ...     print(key, expansions)
    <kw> ['<a-or-A><b-or-B>:']
    <a-or-A> ['a', 'A']
    <b-or-B> ['b', 'B']

    :param nonterminal: The nonterminal deriving the keyword.
    :param keyword: The keyword.
    :return: A grammar fragment to be merged into a full grammar.
    """

    def letter_class(c: str) -> str:
        return f"<{c.lower()}-or-{c.upper()}>"

    result: Dict[str, List[str]] = {
        nonterminal: [
            "".join(letter_class(c) if c.isalpha() else c for c in keyword)
        ]
    }

    for c in keyword:
        if c.isalpha():
            result.setdefault(letter_class(c), [c.lower(), c.upper()])

    return result


def replace_line_breaks(inp: str) -> str:
    return inp.replace("\n", "\\n")


@dataclass(frozen=True)
class lazystr:
    c: Callable[[], Any]

    def __str__(self):
        return str(self.c())


def get_resource_file_content(path_to_file: str) -> str:
    traversable = importlib.resources.files("devicesamples").joinpath(path_to_file)
    with importlib.resources.as_file(traversable) as path:
        with open(path, "r") as file:
            return file.read()
