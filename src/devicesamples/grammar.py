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

"""
The grammar of device sample recordings: A list of samples, each consisting of the
register contents before an instruction, the instruction, and the register contents
after it, followed by an example program of instructions. For example::

    Before: [3, 2, 1, 1]
    9 2 1 2
    After:  [3, 2, 2, 1]

    9 2 1 2
    5 1 3 0

The expansions are read by :class:`devicesamples.parser.PEGParser`: alternatives
are ordered and repetitions (`*`, `+`) are greedy.
"""

import string

from frozendict import frozendict

from devicesamples.helpers import srange, ignore_case
from devicesamples.type_defs import FrozenGrammar

INPUT_GRAMMAR: FrozenGrammar = frozendict(
    {
        key: tuple(expansions)
        for key, expansions in {
            "<start>": ["<input>"],
            "<input>": ["<samples><example-program>"],
            "<samples>": ["<separated-sample>*"],
            "<separated-sample>": ["<sample><newline>+"],
            "<sample>": [
                "<before-keyword><whitespace><registers><newline>"
                "<instruction><newline>"
                "<after-keyword><whitespace><registers>"
            ],
            "<example-program>": ["<program-line>*"],
            "<program-line>": ["<instruction><newline>"],
            "<registers>": ["[" + "<number>,<whitespace>" * 3 + "<number><whitespace>]"],
            "<instruction>": ["<number><spaces>" * 3 + "<number>"],
            "<number>": ["<digit>+"],
            "<digit>": srange(string.digits),
            "<whitespace>": ["<space>*"],
            "<spaces>": ["<space>+"],
            "<space>": [" "],
            "<newline>": ["\n"],
            **ignore_case("<before-keyword>", "before:"),
            **ignore_case("<after-keyword>", "after:"),
        }.items()
    }
)

# Collapsed into a single leaf, reported by name in syntax errors
INPUT_TOKENS = frozenset({"<number>", "<before-keyword>", "<after-keyword>"})

# Consumed, but not part of derivation trees
INPUT_SILENT = frozenset({"<whitespace>", "<spaces>", "<newline>"})
