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

from dataclasses import dataclass
from typing import Tuple

from devicesamples.helpers import RE_NONTERMINAL
from devicesamples.type_defs import ParseTree


@dataclass(frozen=True)
class DerivationTree:
    """
    A node of a parse result. Inner nodes carry a nonterminal, leaves carry the
    terminal text they matched. `position` is the offset of the first character
    spanned by the node in the parsed text.

    >>> tree = DerivationTree(
    ...     "<registers>",
    ...     (
    ...         DerivationTree("[", (), 0),
    ...         DerivationTree("<number>", (DerivationTree("12", (), 1),), 1),
    ...         DerivationTree("]", (), 3),
    ...     ),
    ... )
    >>> tree.to_string()
    '[12]'
    >>> tree.child("<number>").position
    1
    """

    value: str
    children: Tuple["DerivationTree", ...] = ()
    position: int = 0

    def children_with(self, value: str) -> Tuple["DerivationTree", ...]:
        return tuple(child for child in self.children if child.value == value)

    def child(self, value: str) -> "DerivationTree":
        """Return the only direct child labeled `value`."""
        matching = self.children_with(value)
        assert len(matching) == 1, f"expected exactly one {value} in {self.value}"
        return matching[0]

    def to_string(self) -> str:
        if not self.children:
            return "" if RE_NONTERMINAL.fullmatch(self.value) else self.value

        return "".join(child.to_string() for child in self.children)

    def to_parse_tree(self) -> ParseTree:
        return self.value, [child.to_parse_tree() for child in self.children]

    def __str__(self) -> str:
        return self.to_string()
