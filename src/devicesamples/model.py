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

from devicesamples.type_defs import Registers, Instruction


@dataclass(frozen=True)
class Sample:
    """The register contents before and after executing a single instruction."""

    before: Registers
    instruction: Instruction
    after: Registers


@dataclass(frozen=True)
class Input:
    samples: Tuple[Sample, ...]
    example_program: Tuple[Instruction, ...]
