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
from typing import Optional, Tuple, Callable, TypeVar

from returns.result import safe

from devicesamples.config import ParserConfig
from devicesamples.derivation_tree import DerivationTree
from devicesamples.grammar import INPUT_GRAMMAR, INPUT_TOKENS, INPUT_SILENT
from devicesamples.parser import PEGParser, ParseSyntaxError, START_SYMBOL
from devicesamples.model import Sample, Input
from devicesamples.type_defs import Registers, Instruction

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def tree_to_number(tree: DerivationTree, text: str) -> int:
    try:
        return int(tree.to_string())
    except ValueError as err:
        # Digit strings beyond the interpreter's integer conversion limit
        raise ParseSyntaxError(
            text, tree.position, ["<number>"], f"invalid <number>: {err}"
        ) from err


def tree_to_numbers(tree: DerivationTree, text: str) -> Tuple[int, int, int, int]:
    numbers = tuple(
        tree_to_number(number, text) for number in tree.children_with("<number>")
    )
    assert len(numbers) == 4, f"{tree.value} should hold four numbers"
    return numbers


def tree_to_registers(tree: DerivationTree, text: str) -> Registers:
    assert tree.value == "<registers>"
    return tree_to_numbers(tree, text)


def tree_to_instruction(tree: DerivationTree, text: str) -> Instruction:
    assert tree.value == "<instruction>"
    return tree_to_numbers(tree, text)


def tree_to_sample(tree: DerivationTree, text: str) -> Sample:
    assert tree.value == "<sample>"
    before, after = tree.children_with("<registers>")
    return Sample(
        before=tree_to_registers(before, text),
        instruction=tree_to_instruction(tree.child("<instruction>"), text),
        after=tree_to_registers(after, text),
    )


def tree_to_input(tree: DerivationTree, text: str) -> Input:
    if tree.value == START_SYMBOL:
        tree = tree.child("<input>")

    return Input(
        samples=tuple(
            tree_to_sample(separated_sample.child("<sample>"), text)
            for separated_sample in tree.child("<samples>").children_with(
                "<separated-sample>"
            )
        ),
        example_program=tuple(
            tree_to_instruction(line.child("<instruction>"), text)
            for line in tree.child("<example-program>").children_with(
                "<program-line>"
            )
        ),
    )


class InputParser:
    """
    Parses device sample recordings into :class:`devicesamples.model.Input`
    objects. Instances hold no state between calls and can be shared, also across
    threads. Without an explicit `config`, the built-in defaults are used; pass
    `ParserConfig.load()` to honor `.devicesamplesrc` files.

    >>> parser = InputParser()
    >>> parser.parse_sample("before: [3, 2, 1, 1]\\n9 2 1 2\\nAFTER:  [3, 2, 2, 1]")
    Sample(before=(3, 2, 1, 1), instruction=(9, 2, 1, 2), after=(3, 2, 2, 1))
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.peg_parser = PEGParser(
            INPUT_GRAMMAR,
            tokens=INPUT_TOKENS,
            silent=INPUT_SILENT,
            memoize=self.config.memoize,
        )

    def prepare(self, text: str) -> str:
        if self.config.normalize_line_endings:
            return text.replace("\r\n", "\n")
        return text

    def parse_tree(self, text: str, start_symbol: str = START_SYMBOL) -> DerivationTree:
        return self.peg_parser.parse_on(self.prepare(text), start_symbol)

    def parse_and_convert(
        self,
        text: str,
        start_symbol: str,
        convert: Callable[[DerivationTree, str], T],
    ) -> T:
        prepared = self.prepare(text)
        return convert(self.peg_parser.parse_on(prepared, start_symbol), prepared)

    def parse(self, text: str) -> Input:
        result = self.parse_and_convert(text, START_SYMBOL, tree_to_input)
        LOGGER.debug(
            "Parsed %d samples and an example program of %d instructions",
            len(result.samples),
            len(result.example_program),
        )
        return result

    def parse_sample(self, text: str) -> Sample:
        return self.parse_and_convert(text, "<sample>", tree_to_sample)

    def parse_registers(self, text: str) -> Registers:
        return self.parse_and_convert(text, "<registers>", tree_to_registers)

    def parse_instruction(self, text: str) -> Instruction:
        return self.parse_and_convert(text, "<instruction>", tree_to_instruction)


DEFAULT_PARSER = InputParser(ParserConfig())


@safe((ParseSyntaxError,))
def parse(text: str) -> Input:
    """
    Parses a complete recording of samples and an example program. Only the
    built-in defaults apply; configuration files are not consulted.

    >>> parse("Before: [0, 2, 0, 2]\\n6 0 1 1\\nAfter:  [0, 1, 0, 2]\\n\\n9 2 1 2\\n")
    <Success: Input(samples=(Sample(before=(0, 2, 0, 2), instruction=(6, 0, 1, 1), after=(0, 1, 0, 2)),), example_program=((9, 2, 1, 2),))>

    >>> parse("9 2 1 2").failure().msg
    'expected <newline>, found end of input'

    :param text: The entire text to parse.
    :return: The parsed input or a failure holding a
        :class:`devicesamples.parser.ParseSyntaxError`.
    """

    return DEFAULT_PARSER.parse(text)
