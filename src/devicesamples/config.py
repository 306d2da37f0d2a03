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
import os
import pathlib
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List

import toml
from returns.maybe import Maybe, Nothing

from devicesamples.helpers import get_resource_file_content

RC_FILE_NAME = ".devicesamplesrc"

LOGGER = logging.getLogger(__name__)


@lru_cache
def read_rc_defaults(
    content: Maybe[str] = Nothing,
) -> Dict[str, str | int | float | bool]:
    """
    Attempts to read a `.devicesamplesrc` configuration from the following sources,
    in the given order:

    1. The `content` parameter
    2. The file `./.devicesamplesrc` (in the current working directory)
    3. The file `~/.devicesamplesrc` (in the current user's home directory)
    4. The file `resources/.devicesamplesrc` (bundled with the distribution)

    The `[defaults]` tables of all sources are merged; values specified in sources
    earlier in the list take precedence in case of conflicts.

    :param content: An optional TOML configuration string (not a path!).
    :return: The merged defaults.
    """

    sources: List[str] = []
    content.map(sources.append)

    dirs = (os.getcwd(), pathlib.Path.home())
    candidate_locations = [os.path.join(dir, RC_FILE_NAME) for dir in dirs]
    sources.extend(
        [
            pathlib.Path(location).read_text()
            for location in candidate_locations
            if os.path.exists(location)
        ]
    )

    sources.append(get_resource_file_content(f"resources/{RC_FILE_NAME}"))

    all_defaults = [toml.loads(source).get("defaults", {}) for source in sources]

    result: Dict[str, str | int | float | bool] = {}

    for defaults in all_defaults:
        if not isinstance(defaults, dict) or not all(
            isinstance(key, str) and isinstance(value, (str, int, float, bool))
            for key, value in defaults.items()
        ):
            raise RuntimeError(
                f"Unexpected {RC_FILE_NAME} format: defaults should be a "
                + "table of non-nested values"
            )

        for key, value in defaults.items():
            result.setdefault(key, value)

    LOGGER.debug("Read defaults %s from %d sources", result, len(sources))

    return result


@dataclass(frozen=True)
class ParserConfig:
    normalize_line_endings: bool = False
    memoize: bool = True

    @staticmethod
    def load(content: Maybe[str] = Nothing) -> "ParserConfig":
        defaults = read_rc_defaults(content)

        for key in ("normalize-line-endings", "memoize"):
            if not isinstance(defaults.get(key, False), bool):
                raise RuntimeError(
                    f"Unexpected {RC_FILE_NAME} format: {key} should be a boolean"
                )

        return ParserConfig(
            normalize_line_endings=defaults.get("normalize-line-endings", False),
            memoize=defaults.get("memoize", True),
        )
