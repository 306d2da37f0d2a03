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

import logging
from dataclasses import dataclass, field
from typing import Tuple, List, Dict, Optional, Sequence, Set

from devicesamples.derivation_tree import DerivationTree
from devicesamples.helpers import (
    canonical,
    is_nonterminal,
    split_operator,
    replace_line_breaks,
    lazystr,
)
from devicesamples.type_defs import Grammar, CanonicalGrammar

START_SYMBOL = "<start>"
END_OF_INPUT = "end of input"

LOGGER = logging.getLogger(__name__)


class ParseSyntaxError(SyntaxError):
    """
    Raised if a text does not match a grammar. Besides the standard `SyntaxError`
    fields `lineno`, `offset` (the 1-based column) and `text` (the offending line),
    carries the 0-based character `position` of the failure and the descriptions of
    what was `expected` there.

    >>> err = ParseSyntaxError("1 2\\n3 x\\n", 6, ["<number>"])
    >>> err.position, err.lineno, err.offset, err.text
    (6, 2, 3, '3 x')
    >>> err.msg
    "expected <number>, found 'x'"

    An explicit `message` replaces the generated one:

    >>> ParseSyntaxError("12", 0, ["<number>"], "number too large").msg
    'number too large'
    """

    def __init__(
        self,
        text: str,
        position: int,
        expected: Sequence[str],
        message: Optional[str] = None,
    ):
        self.position = position
        self.expected = tuple(expected)

        line_start = text.rfind("\n", 0, position) + 1
        line_end = text.find("\n", position)
        if line_end < 0:
            line_end = len(text)

        super().__init__(
            message
            or f"expected {describe_expected(self.expected)}, "
            + f"found {describe_found(text, position)}",
            (
                None,
                text.count("\n", 0, position) + 1,
                position - line_start + 1,
                text[line_start:line_end],
            ),
        )


def describe_expected(expected: Sequence[str]) -> str:
    """
    >>> describe_expected(["<newline>"])
    '<newline>'
    >>> describe_expected(["<space>", "']'"])
    "one of <space>, ']'"
    """

    if len(expected) == 1:
        return expected[0]
    return "one of " + ", ".join(expected)


def describe_found(text: str, position: int) -> str:
    if position >= len(text):
        return END_OF_INPUT
    return repr(text[position])


@dataclass
class ParseState:
    """Bookkeeping of a single parser run."""

    text: str
    memo: Dict[Tuple[str, int], Tuple[int, Optional[DerivationTree]]] = field(
        default_factory=dict
    )
    furthest: int = 0
    expected: List[str] = field(default_factory=list)
    atomic_depth: int = 0

    def fail(self, position: int, description: str) -> None:
        if self.atomic_depth > 0:
            return

        if position > self.furthest:
            self.furthest = position
            self.expected = [description]
        elif position == self.furthest and description not in self.expected:
            self.expected.append(description)


class Parser:
    """Base class for parsing."""

    def __init__(self, grammar: Grammar, **kwargs):
        self._start_symbol = kwargs.get("start_symbol", START_SYMBOL)
        self.tokens: Set[str] = set(kwargs.get("tokens", set()))
        self.silent: Set[str] = set(kwargs.get("silent", set()))
        self.coalesce_tokens = kwargs.get("coalesce", True)
        self._grammar = grammar
        self.cgrammar: CanonicalGrammar = canonical(grammar)

    def grammar(self) -> Grammar:
        """Return the grammar of this parser."""
        return self._grammar

    def start_symbol(self) -> str:
        """Return the start symbol of this parser."""
        return self._start_symbol

    def parse_prefix(
        self, text: str, start_symbol: str
    ) -> Tuple[int, Optional[DerivationTree], ParseState]:
        """Return (cursor, tree, state) for the longest prefix of text derivable
        from `start_symbol`. To be defined in subclasses."""
        raise NotImplementedError()

    def parse(self, text: str) -> DerivationTree:
        """Parse all of `text` using the grammar, starting from the start symbol."""
        return self.parse_on(text, self._start_symbol)

    def parse_on(self, text: str, start_symbol: str) -> DerivationTree:
        if start_symbol not in self.cgrammar:
            raise ValueError(f"Unknown start symbol {start_symbol}")

        LOGGER.debug(
            "Parsing '%s' from %s",
            lazystr(lambda: replace_line_breaks(text[:40])),
            start_symbol,
        )

        cursor, tree, state = self.parse_prefix(text, start_symbol)
        if tree is not None and cursor == len(text):
            return tree

        if tree is not None:
            state.fail(cursor, END_OF_INPUT)

        LOGGER.debug(
            "Parsing failed at position %d, expected %s",
            state.furthest,
            lazystr(lambda: describe_expected(state.expected)),
        )
        raise ParseSyntaxError(text, state.furthest, state.expected)

    def coalesce(self, children: List[DerivationTree]) -> List[DerivationTree]:
        new_lst: List[DerivationTree] = []
        for child in children:
            if not child.value:
                continue

            if (
                child.value not in self._grammar
                and new_lst
                and new_lst[-1].value not in self._grammar
            ):
                new_lst[-1] = DerivationTree(
                    new_lst[-1].value + child.value, (), new_lst[-1].position
                )
            else:
                new_lst.append(child)
        return new_lst

    def make_tree(
        self, key: str, children: List[DerivationTree], text: str, at: int, to: int
    ) -> DerivationTree:
        if key in self.tokens:
            return DerivationTree(key, (DerivationTree(text[at:to], (), at),), at)

        children = [child for child in children if child.value not in self.silent]
        if self.coalesce_tokens:
            children = self.coalesce(children)

        return DerivationTree(key, tuple(children), at)


class PEGParser(Parser):
    """
    A packrat parser for parsing expression grammars. Alternatives are ordered: The
    first matching one is taken. Nonterminals may carry the EBNF operators `?`, `*`
    and `+`, which match greedily and never backtrack.

    >>> grammar = {
    ...     "<start>": ["<pair>"],
    ...     "<pair>": ["<digit>+=<digit>?"],
    ...     "<digit>": ["0", "1"],
    ... }
    >>> print(PEGParser(grammar, tokens={"<pair>"}).parse("10=").to_parse_tree())
    ('<start>', [('<pair>', [('10=', [])])])
    """

    def __init__(self, grammar: Grammar, **kwargs):
        super().__init__(grammar, **kwargs)
        self.memoize = kwargs.get("memoize", True)

        # Character classes like <digit>; reported by name in errors
        self.lexical: Set[str] = {
            key
            for key, alternatives in self.cgrammar.items()
            if alternatives
            and all(
                len(alternative) == 1 and not is_nonterminal(alternative[0])
                for alternative in alternatives
            )
        }

    def parse_prefix(
        self, text: str, start_symbol: str
    ) -> Tuple[int, Optional[DerivationTree], ParseState]:
        state = ParseState(text)
        cursor, tree = self.unify_key(start_symbol, state, 0)
        return cursor, tree, state

    def is_atomic(self, key: str) -> bool:
        return key in self.tokens or key in self.lexical

    def unify_key(
        self, key: str, state: ParseState, at: int
    ) -> Tuple[int, Optional[DerivationTree]]:
        if key not in self.cgrammar:
            if state.text.startswith(key, at):
                return at + len(key), DerivationTree(key, (), at)

            state.fail(at, repr(key))
            return at, None

        atomic = self.is_atomic(key)

        if self.memoize and (key, at) in state.memo:
            result = state.memo[(key, at)]
            if result[1] is None and atomic:
                state.fail(at, key)
            return result

        if atomic:
            state.atomic_depth += 1

        result: Tuple[int, Optional[DerivationTree]] = at, None
        try:
            for rule in self.cgrammar[key]:
                to, children = self.unify_rule(rule, state, at)
                if children is not None:
                    result = to, self.make_tree(key, children, state.text, at, to)
                    break
        finally:
            if atomic:
                state.atomic_depth -= 1

        if result[1] is None and atomic:
            state.fail(at, key)

        if self.memoize:
            state.memo[(key, at)] = result

        return result

    def unify_rule(
        self, rule: Sequence[str], state: ParseState, at: int
    ) -> Tuple[int, Optional[List[DerivationTree]]]:
        results: List[DerivationTree] = []
        for token in rule:
            symbol, operator = split_operator(token)

            if not operator:
                at, res = self.unify_key(symbol, state, at)
                if res is None:
                    return at, None
                results.append(res)
                continue

            matches = 0
            while operator != "?" or matches < 1:
                to, res = self.unify_key(symbol, state, at)
                if res is None:
                    break

                results.append(res)
                matches += 1
                if to == at:
                    break
                at = to

            if operator == "+" and not matches:
                return at, None

        return at, results
