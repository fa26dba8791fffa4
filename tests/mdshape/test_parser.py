"""Tests for tokenizer configuration."""

import pytest

from mdshape.config import MAX_MAPPED_TREE_DEPTH
from mdshape.parser import TOKENIZER_MIN_NESTING, create_parser, parse_markdown, tokenizer_nesting


class TestTokenizerNesting:
    def test_floor(self):
        assert tokenizer_nesting(1) == TOKENIZER_MIN_NESTING

    @pytest.mark.parametrize("depth", [1, 8, 64, 65, 100, MAX_MAPPED_TREE_DEPTH])
    def test_room_for_one_level_past_the_limit(self, depth):
        assert tokenizer_nesting(depth) >= 2 * (depth + 1)

    def test_deep_list_reaches_past_the_limit(self):
        depth = 64
        markdown = "".join("  " * i + "- x\n" for i in range(depth + 2))
        root = parse_markdown(markdown, create_parser(tokenizer_nesting(depth)))
        lists = 0
        node = root.children[0]
        while node.type == "bullet_list":
            lists += 1
            item = node.children[0]
            if len(item.children) < 2:
                break
            node = item.children[1]
        assert lists > depth
