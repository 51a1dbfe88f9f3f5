"""Tests for the expression parser.

Tests cover:
- Precedence and associativity of the five binary operators
- Parenthesized sub-expressions
- Structural errors (balance check, malformed sequences)
- Trees deeper than the interpreter's recursion limit
"""

import json

import pytest

from pemdas import (
    Binary,
    BinaryOperation,
    Constant,
    Lexer,
    Parser,
    StructuralError,
    StructuralErrorKind,
    Token,
    TokenCursor,
    TokenType,
    parse,
    parse_expression,
)


def C(value):
    return Constant(float(value))


# =============================================================================
# Tree shape
# =============================================================================


class TestParser:
    def test_single_number(self):
        assert parse_expression("42") == C(42)

    def test_subtraction_is_left_associative(self):
        ast = parse_expression("2-3-4")

        assert ast == Binary(
            BinaryOperation.SUBTRACT,
            Binary(BinaryOperation.SUBTRACT, C(2), C(3)),
            C(4),
        )

    def test_division_is_left_associative(self):
        ast = parse_expression("8/4/2")

        assert ast == Binary(
            BinaryOperation.DIVIDE,
            Binary(BinaryOperation.DIVIDE, C(8), C(4)),
            C(2),
        )

    def test_exponent_is_right_associative(self):
        ast = parse_expression("2^3^2")

        assert ast == Binary(
            BinaryOperation.EXPONENT,
            C(2),
            Binary(BinaryOperation.EXPONENT, C(3), C(2)),
        )

    def test_product_binds_tighter_than_sum(self):
        ast = parse_expression("1+2*3")

        assert ast == Binary(
            BinaryOperation.ADD,
            C(1),
            Binary(BinaryOperation.MULTIPLY, C(2), C(3)),
        )

    def test_power_binds_tighter_than_product(self):
        ast = parse_expression("2*3^2")

        assert ast == Binary(
            BinaryOperation.MULTIPLY,
            C(2),
            Binary(BinaryOperation.EXPONENT, C(3), C(2)),
        )

    def test_parentheses_override_precedence(self):
        ast = parse_expression("(5-2)*5")

        assert ast == Binary(
            BinaryOperation.MULTIPLY,
            Binary(BinaryOperation.SUBTRACT, C(5), C(2)),
            C(5),
        )

    def test_parenthesized_constant(self):
        assert parse_expression("(5)") == C(5)
        assert parse_expression("((5))") == C(5)

    def test_parse_accepts_token_list(self):
        tokens = Lexer("1+2").tokenize()

        assert parse(tokens) == Binary(BinaryOperation.ADD, C(1), C(2))

    def test_parser_class(self):
        ast = Parser(Lexer("2^0.5")).parse()

        assert ast == Binary(BinaryOperation.EXPONENT, C(2), C(0.5))

    def test_long_sum_chain(self):
        ast = parse_expression("+".join(["1"] * 3000))

        assert isinstance(ast, Binary)
        assert ast.right == C(1)

    def test_render(self):
        assert parse_expression("2-3-4").render() == "((2.0 - 3.0) - 4.0)"
        assert parse_expression("2^3^2").render() == "(2.0 ^ (3.0 ^ 2.0))"

    def test_to_dict(self):
        assert parse_expression("1*2").to_dict() == {
            "type": "binary",
            "operation": "multiply",
            "left": {"type": "constant", "value": "1.0"},
            "right": {"type": "constant", "value": "2.0"},
        }

    def test_nodes_are_immutable(self):
        node = C(1)

        with pytest.raises(AttributeError):
            node.value = 2.0


class TestBinaryOperation:
    def test_precedence_tiers(self):
        assert BinaryOperation.ADD.precedence == BinaryOperation.SUBTRACT.precedence
        assert BinaryOperation.MULTIPLY.precedence == BinaryOperation.DIVIDE.precedence
        assert (
            BinaryOperation.SUBTRACT.precedence
            < BinaryOperation.MULTIPLY.precedence
            < BinaryOperation.EXPONENT.precedence
        )

    def test_associativity(self):
        assert BinaryOperation.EXPONENT.associativity == "right"
        assert BinaryOperation.SUBTRACT.associativity == "left"

    def test_binds_before(self):
        assert BinaryOperation.MULTIPLY.binds_before(BinaryOperation.ADD)
        assert BinaryOperation.SUBTRACT.binds_before(BinaryOperation.ADD)
        assert not BinaryOperation.ADD.binds_before(BinaryOperation.MULTIPLY)
        assert not BinaryOperation.EXPONENT.binds_before(BinaryOperation.EXPONENT)

    def test_from_token_type(self):
        assert BinaryOperation.from_token_type(TokenType.CARET) is BinaryOperation.EXPONENT
        assert BinaryOperation.from_token_type(TokenType.LPAREN) is None


class TestTokenCursor:
    def test_eof_past_end(self):
        cursor = TokenCursor(Lexer("7").tokenize())

        assert cursor.advance().type == TokenType.NUMBER
        assert cursor.at_end()
        assert cursor.current.position == 1
        assert cursor.advance().type == TokenType.EOF

    def test_end_position_defaults_after_last_token(self):
        cursor = TokenCursor(Lexer("12+3").tokenize())

        assert cursor.end_position == 4
        assert TokenCursor([]).current == Token(TokenType.EOF, None, 0)


# =============================================================================
# Errors
# =============================================================================


class TestParserErrors:
    @pytest.mark.parametrize("source", ["(2+3(", "2+3)", "((5)", "(", ")"])
    def test_unbalanced_parentheses(self, source):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression(source)

        assert exc_info.value.kind is StructuralErrorKind.UNBALANCED_PARENTHESIS
        assert exc_info.value.position is None

    def test_balance_is_checked_before_structure(self):
        # "+" alone would be malformed; the imbalance is reported first
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("+(")

        assert exc_info.value.kind is StructuralErrorKind.UNBALANCED_PARENTHESIS

    def test_balanced_but_misordered_parentheses(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression(")(")

        assert exc_info.value.kind is StructuralErrorKind.MALFORMED_EXPRESSION
        assert exc_info.value.position == 0

    def test_empty_expression(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("")

        assert exc_info.value.kind is StructuralErrorKind.MALFORMED_EXPRESSION
        assert exc_info.value.position is None

    def test_consecutive_operators(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("2++3")

        assert exc_info.value.kind is StructuralErrorKind.MALFORMED_EXPRESSION
        assert exc_info.value.position == 2

    def test_trailing_operator(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("2+")

        assert exc_info.value.kind is StructuralErrorKind.MALFORMED_EXPRESSION
        assert exc_info.value.position == 2

    def test_leading_operator(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("*2")

        assert exc_info.value.position == 0

    def test_empty_parentheses(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("()")

        assert exc_info.value.kind is StructuralErrorKind.MALFORMED_EXPRESSION
        assert exc_info.value.position == 1

    def test_leftover_tokens_are_rejected(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("2 3")

        assert exc_info.value.kind is StructuralErrorKind.MALFORMED_EXPRESSION
        assert exc_info.value.position == 2

    def test_leftover_parenthesized_clause(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("(5)(6)")

        assert exc_info.value.position == 3

    def test_unmatched_close_after_complete_group(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_expression("(5))(")

        assert exc_info.value.kind is StructuralErrorKind.MALFORMED_EXPRESSION
        assert exc_info.value.position == 3


# =============================================================================
# Deep and long trees
# =============================================================================


class TestLargeTrees:
    def test_deep_parentheses_parse(self):
        source = "(" * 5000 + "1" + ")" * 5000

        assert parse_expression(source) == C(1)

    def test_deep_right_nested_sums(self):
        source = "(1+" * 3000 + "1" + ")" * 3000

        ast = parse_expression(source)

        assert isinstance(ast, Binary)
        assert ast.left == C(1)

    def test_long_power_chain_is_right_nested(self):
        ast = parse_expression("^".join(["1"] * 3000))

        assert ast.left == C(1)
        assert ast.right.operation is BinaryOperation.EXPONENT

    def test_render_long_chain(self):
        rendered = parse_expression("+".join(["1"] * 3000)).render()

        assert rendered.startswith("(" * 2999 + "1.0 + 1.0)")
        assert rendered.endswith(" + 1.0)")

    def test_to_dict_long_chain(self):
        tree = parse_expression("+".join(["1"] * 3000)).to_dict()

        depth = 0
        while tree["type"] == "binary":
            assert tree["right"] == {"type": "constant", "value": "1.0"}
            tree = tree["left"]
            depth += 1
        assert depth == 2999

    def test_to_json_matches_to_dict(self):
        ast = parse_expression("(5-2)*5^2")

        assert json.loads(ast.to_json()) == ast.to_dict()

    def test_to_json_long_chain(self):
        text = parse_expression("+".join(["1"] * 3000)).to_json()

        assert text.count('"operation": "add"') == 2999
        assert text.count('"type": "constant"') == 3000
