"""Tests for token-sequence fix rules."""

from ratcalc import BinaryOp, Block, FixRule, Token, fix, tokenize
from ratcalc.fixer import block_product, close_blocks, open_blocks

MUL = Token.binary(BinaryOp.MUL)
START_BRACKET = Token.start(Block.BRACKET)
END_BRACKET = Token.end(Block.BRACKET)
START_ABS = Token.start(Block.ABS)
END_ABS = Token.end(Block.ABS)


class TestBlockProduct:
    """Tests for the BLOCK_PRODUCT rule."""

    def test_inserts_multiplication_between_blocks(self):
        tokens = fix(tokenize("()(())||"), {FixRule.BLOCK_PRODUCT})

        assert tokens == [
            START_BRACKET, END_BRACKET, MUL, START_BRACKET, START_BRACKET,
            END_BRACKET, END_BRACKET, MUL, START_ABS, END_ABS,
        ]

    def test_abs_blocks_side_by_side(self):
        tokens = fix(tokenize("|2||3|"), {FixRule.BLOCK_PRODUCT})

        assert [str(t) for t in tokens] == ["|", "2", "|", "*", "|", "3", "|"]

    def test_number_before_block_is_untouched(self):
        tokens = tokenize("2(3)")

        assert block_product(tokens) == 0
        assert len(tokens) == 4

    def test_inserted_tokens_have_no_position(self):
        tokens = fix(tokenize("(1)(2)"), {FixRule.BLOCK_PRODUCT})

        assert tokens[3] == MUL
        assert tokens[3].position == -1


class TestCloseBlocks:
    """Tests for the CLOSE_BLOCKS rule."""

    def test_closes_innermost_first(self):
        tokens = fix(tokenize("(1+|2"), {FixRule.CLOSE_BLOCKS})

        assert tokens[-2:] == [END_ABS, END_BRACKET]

    def test_balanced_sequence_is_unchanged(self):
        tokens = tokenize("(1+|2|)")
        expected = list(tokens)

        assert close_blocks(tokens) == 0
        assert tokens == expected

    def test_idempotent(self):
        once = fix(tokenize("((1+(2"), {FixRule.CLOSE_BLOCKS})
        twice = fix(list(once), {FixRule.CLOSE_BLOCKS})

        assert once == twice
        assert [str(t) for t in once].count(")") == 3

    def test_open_blocks_ignores_mismatched_close(self):
        pending = open_blocks(tokenize(")("))

        assert pending == [START_BRACKET]


class TestFix:
    """Tests for rule selection."""

    def test_no_rules_leaves_tokens_alone(self):
        tokens = tokenize("(1)(2")
        expected = list(tokens)

        assert fix(tokens) == expected

    def test_fixes_in_place(self):
        tokens = tokenize("(1)(2)")

        assert fix(tokens, [FixRule.BLOCK_PRODUCT]) is tokens

    def test_close_then_multiply(self):
        tokens = fix(tokenize("(2)(3"), {FixRule.BLOCK_PRODUCT, FixRule.CLOSE_BLOCKS})

        assert [str(t) for t in tokens] == ["(", "2", ")", "*", "(", "3", ")"]
