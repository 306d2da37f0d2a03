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

import unittest

from devicesamples.parser import PEGParser, ParseSyntaxError, END_OF_INPUT
from test_data import SMALL_GRAMMAR, subtrees_with


class TestPEGParser(unittest.TestCase):
    def test_parse_small_grammar(self):
        parser = PEGParser(SMALL_GRAMMAR, tokens={"<item>"})
        tree = parser.parse("(ab,c)")

        self.assertEqual(
            (
                "<start>",
                [
                    (
                        "<list>",
                        [
                            ("(", []),
                            (
                                "<items>",
                                [
                                    ("<item>", [("ab", [])]),
                                    (
                                        "<more-items>",
                                        [
                                            ("<separator>", [(",", [])]),
                                            ("<item>", [("c", [])]),
                                        ],
                                    ),
                                ],
                            ),
                            (")", []),
                        ],
                    )
                ],
            ),
            tree.to_parse_tree(),
        )
        self.assertEqual("(ab,c)", tree.to_string())

    def test_empty_alternative(self):
        parser = PEGParser(SMALL_GRAMMAR)
        tree = parser.parse("()")
        self.assertEqual("()", tree.to_string())
        self.assertEqual(
            [("<items>", [])],
            [
                subtree.to_parse_tree()
                for subtree in subtrees_with(tree, "<items>")
            ],
        )

    def test_without_tokens_trees_reach_down_to_characters(self):
        parser = PEGParser(SMALL_GRAMMAR)
        tree = parser.parse("(abc)")
        self.assertEqual(3, len(subtrees_with(tree, "<letter>")))

    def test_ordered_choice_commits_to_first_match(self):
        parser = PEGParser({"<start>": ["<word>"], "<word>": ["a", "ab"]})

        with self.assertRaises(ParseSyntaxError) as context:
            parser.parse("ab")

        self.assertEqual(1, context.exception.position)
        self.assertEqual((END_OF_INPUT,), context.exception.expected)

        self.assertEqual("a", parser.parse("a").to_string())

    def test_repetition_does_not_backtrack(self):
        parser = PEGParser({"<start>": ["<a>*a"], "<a>": ["a"]})

        with self.assertRaises(ParseSyntaxError) as context:
            parser.parse("aaa")

        self.assertEqual(3, context.exception.position)
        self.assertIn("'a'", context.exception.expected)

    def test_plus_needs_one_match(self):
        parser = PEGParser({"<start>": ["<digit>+"], "<digit>": ["0", "1"]})

        self.assertEqual("0110", parser.parse("0110").to_string())

        with self.assertRaises(ParseSyntaxError) as context:
            parser.parse("")

        self.assertEqual(0, context.exception.position)
        self.assertEqual(("<digit>",), context.exception.expected)

    def test_repeated_empty_match_terminates(self):
        parser = PEGParser({"<start>": ["<nothing>*x"], "<nothing>": [""]})
        self.assertEqual("x", parser.parse("x").to_string())

    def test_silent_nonterminals_are_dropped_and_terminals_coalesced(self):
        grammar = {"<start>": ["a<gap>b"], "<gap>": [" ", ""]}

        self.assertEqual(
            ("<start>", [("ab", [])]),
            PEGParser(grammar, silent={"<gap>"}).parse("a b").to_parse_tree(),
        )

        self.assertEqual(
            ("<start>", [("a", []), ("<gap>", [(" ", [])]), ("b", [])]),
            PEGParser(grammar).parse("a b").to_parse_tree(),
        )

        self.assertEqual(
            ("<start>", [("a", []), ("b", [])]),
            PEGParser(grammar, silent={"<gap>"}, coalesce=False)
            .parse("a b")
            .to_parse_tree(),
        )

    def test_nodes_record_their_position(self):
        parser = PEGParser(SMALL_GRAMMAR, tokens={"<item>"})
        tree = parser.parse("(a, bc)")

        self.assertEqual(
            [1, 4], [item.position for item in subtrees_with(tree, "<item>")]
        )
        self.assertEqual(
            [1, 4],
            [item.children[0].position for item in subtrees_with(tree, "<item>")],
        )
        self.assertEqual(
            [2], [sep.position for sep in subtrees_with(tree, "<separator>")]
        )

        grammar = {"<start>": ["a<gap>b"], "<gap>": [" "]}
        leaf = PEGParser(grammar, silent={"<gap>"}).parse("a b").children[0]
        self.assertEqual(("ab", 0), (leaf.value, leaf.position))

    def test_furthest_failure_is_reported(self):
        parser = PEGParser(SMALL_GRAMMAR, tokens={"<item>"})

        with self.assertRaises(ParseSyntaxError) as context:
            parser.parse("(a,,b)")

        self.assertEqual(3, context.exception.position)
        self.assertEqual(("<blank>", "<item>"), context.exception.expected)

    def test_expectations_in_first_seen_order(self):
        parser = PEGParser(SMALL_GRAMMAR, tokens={"<item>"})

        with self.assertRaises(ParseSyntaxError) as context:
            parser.parse("(a b)")

        self.assertEqual(2, context.exception.position)
        self.assertEqual(("','", "')'"), context.exception.expected)
        self.assertEqual("expected one of ',', ')', found ' '", context.exception.msg)

    def test_error_line_and_column(self):
        grammar = {
            "<start>": ["<line>*"],
            "<line>": ["<letter>+\n"],
            "<letter>": ["a", "b"],
        }

        with self.assertRaises(ParseSyntaxError) as context:
            PEGParser(grammar).parse("ab\nba\nbxa\n")

        err = context.exception
        self.assertEqual(7, err.position)
        self.assertEqual(3, err.lineno)
        self.assertEqual(2, err.offset)
        self.assertEqual("bxa", err.text)
        self.assertIsInstance(err, SyntaxError)

    def test_memoization_does_not_change_result(self):
        text = "(a, b,c,  cab)"
        for memoize in (True, False):
            with self.subTest(memoize=memoize):
                parser = PEGParser(SMALL_GRAMMAR, memoize=memoize)
                with self.assertRaises(ParseSyntaxError) as context:
                    parser.parse(text)
                self.assertEqual(9, context.exception.position)

        self.assertEqual(
            PEGParser(SMALL_GRAMMAR, memoize=False).parse("(a, b)"),
            PEGParser(SMALL_GRAMMAR).parse("(a, b)"),
        )

    def test_parse_on_other_start_symbol(self):
        parser = PEGParser(SMALL_GRAMMAR, tokens={"<item>"})
        tree = parser.parse_on("abc", "<item>")
        self.assertEqual(("<item>", [("abc", [])]), tree.to_parse_tree())

        # The configured start symbol is unaffected
        self.assertEqual("<start>", parser.start_symbol())

    def test_unknown_start_symbol(self):
        parser = PEGParser(SMALL_GRAMMAR)
        self.assertRaises(ValueError, lambda: parser.parse_on("a", "<unknown>"))

    def test_parser_is_reusable_after_failure(self):
        parser = PEGParser(SMALL_GRAMMAR)
        self.assertRaises(ParseSyntaxError, lambda: parser.parse("(a"))
        self.assertEqual("(a)", parser.parse("(a)").to_string())


if __name__ == "__main__":
    unittest.main()
