"""Unit tests for the condition parser and evaluator."""

from decimal import Decimal

import pytest

from raise_engine.conditions import (
    MAX_CONDITION_LENGTH,
    MAX_NESTING_DEPTH,
    ConditionError,
    ConditionSyntaxError,
    UnknownFieldError,
    evaluate_condition,
    parse_condition,
    resolve_field,
    tokenize,
)
from raise_engine.conditions.parser import And, Comparison, FieldRef, Literal, Or, Truthy
from raise_engine.models.opportunity import CamelModel, Opportunity, RaiseLevel


def _make_opp(**kwargs) -> Opportunity:
    defaults = {
        "id": "opp-1",
        "raise_level": RaiseLevel.L3,
        "tcv": Decimal("1500000"),
        "raise_tcv": Decimal("1500000"),
        "has_kcp_deviations": True,
        "is_public_sector": False,
        "is_rti": True,
        "is_mandataria": False,
    }
    defaults.update(kwargs)
    return Opportunity(**defaults)


class TestTokenize:
    """Tests for tokenize."""

    def test_token_kinds(self) -> None:
        """Field, operator and string literal."""
        kinds = [t.kind for t in tokenize("opp.raiseLevel === 'L3'")]
        assert kinds == ["NAME", "OP", "STRING"]

    def test_rejects_unknown_characters(self) -> None:
        """Semicolons are not part of the grammar."""
        with pytest.raises(ConditionSyntaxError):
            tokenize("opp.isRti; true")


class TestParseCondition:
    """Tests for parse_condition."""

    def test_simple_comparison(self) -> None:
        """Leading 'opp.' is dropped from the field path."""
        node = parse_condition("opp.raiseLevel === 'L3'")
        assert node == Comparison("===", FieldRef(("raiseLevel",)), Literal("L3"))

    def test_numbers_are_decimal(self) -> None:
        """Numeric literals parse exactly."""
        node = parse_condition("tcv > 1000000")
        assert node == Comparison(">", FieldRef(("tcv",)), Literal(Decimal("1000000")))

    def test_and_binds_tighter_than_or(self) -> None:
        """a || b && c parses as a || (b && c)."""
        node = parse_condition("isRti === true || tcv > 5 && isMandataria === true")
        assert isinstance(node, Or)
        assert isinstance(node.items[1], And)

    def test_parentheses(self) -> None:
        """Outer parentheses group."""
        node = parse_condition("(opp.isRti === true && opp.isMandataria === true)")
        assert isinstance(node, And)
        assert len(node.items) == 2

    def test_bare_literal(self) -> None:
        """'false' alone is a valid condition."""
        assert parse_condition("false") == Truthy(Literal(False))

    @pytest.mark.parametrize(
        "expression",
        [
            "invalid syntax here",
            "opp.isRti ===",
            "=== true",
            "(opp.isRti === true",
            "opp.isRti === true)",
            "opp.tcv > 5 > 3",
            "opp.",
            "!opp.isRti",
        ],
    )
    def test_syntax_errors(self, expression: str) -> None:
        """Anything outside the grammar raises ConditionSyntaxError."""
        with pytest.raises(ConditionSyntaxError):
            parse_condition(expression)

    def test_length_limit(self) -> None:
        """Overlong expressions are rejected before tokenizing."""
        expression = "opp.isRti === true" + " && opp.isRti === true" * 150
        assert len(expression) > MAX_CONDITION_LENGTH
        with pytest.raises(ConditionSyntaxError):
            parse_condition(expression)

    def test_nesting_limit(self) -> None:
        """Parentheses nest up to MAX_NESTING_DEPTH, deeper is a syntax error."""
        depth = MAX_NESTING_DEPTH
        assert parse_condition("(" * depth + "opp.isRti" + ")" * depth) == Truthy(
            FieldRef(("isRti",))
        )
        with pytest.raises(ConditionSyntaxError):
            parse_condition("(" * (depth + 1) + "opp.isRti" + ")" * (depth + 1))


class TestEvaluateCondition:
    """Tests for evaluate_condition."""

    @pytest.mark.parametrize("expression", [None, "", "   "])
    def test_no_condition_is_true(self, expression) -> None:
        """Missing condition always applies."""
        assert evaluate_condition(expression, _make_opp()) is True

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("opp.raiseLevel === 'L3'", True),
            ("opp.raiseLevel === 'L1'", False),
            ('raiseLevel == "L3"', True),
            ("opp.hasKcpDeviations === true", True),
            ("opp.isPublicSector === true", False),
            ("opp.isPublicSector !== true", True),
            ("opp.raiseLevel !== 'L3'", False),
            ("opp.tcv > 1000000", True),
            ("opp.tcv > 2000000", False),
            ("opp.tcv >= 1500000", True),
            ("opp.tcv < 2000000", True),
            ("opp.tcv < 1000000", False),
            ("opp.tcv <= 1500000", True),
            ("opp.raise_tcv >= 1500000.00", True),
            ("(opp.isRti === true && opp.hasKcpDeviations === true)", True),
            ("(opp.isRti === true && opp.isMandataria === true)", False),
            ("(raiseLevel === 'L3' || raiseLevel === 'L1')", True),
            ("(raiseLevel === 'L1' || raiseLevel === 'L3')", True),
            ("(raiseLevel === 'L1' || raiseLevel === 'L2')", False),
            ("opp.hasKcpDeviations", True),
            ("opp.isPublicSector", False),
            ("true", True),
            ("false", False),
            ("opp.servicesValue === undefined", True),
            ("opp.servicesValue !== null", False),
        ],
    )
    def test_evaluation(self, expression: str, expected: bool) -> None:
        """Comparisons, AND/OR and literals against the opportunity."""
        assert evaluate_condition(expression, _make_opp()) is expected

    def test_rti_mandataria_toggle(self) -> None:
        """Flipping isMandataria flips the result."""
        expression = "opp.isRti === true && opp.isMandataria === true"
        assert evaluate_condition(expression, _make_opp(is_mandataria=False)) is False
        assert evaluate_condition(expression, _make_opp(is_mandataria=True)) is True

    def test_equality_is_strict(self) -> None:
        """Booleans never equal numbers."""
        assert evaluate_condition("opp.isRti === 1", _make_opp()) is False
        assert evaluate_condition("opp.isPublicSector === 0", _make_opp()) is False

    def test_ordering_requires_numbers(self) -> None:
        """Ordering a string or boolean is simply false."""
        assert evaluate_condition("opp.title > 5", _make_opp(title="x")) is False
        assert evaluate_condition("opp.isRti > 0", _make_opp()) is False

    def test_literal_on_left(self) -> None:
        """Operands may come in either order."""
        assert evaluate_condition("1000000 < opp.tcv", _make_opp()) is True


class TestEvaluateConditionFailsClosed:
    """Malformed or unsafe conditions evaluate to False and are reported."""

    @pytest.mark.parametrize(
        "expression",
        [
            "invalid syntax",
            "console.log('injected'); return true",
            "eval('malicious code')",
            "__import__('os').system('rm -rf /')",
            "opp.__class__ === 'x'",
            "opp.model_fields === true",
            "opp.title.upper === 'X'",
            "opp.nonexistent === true",
        ],
    )
    def test_returns_false(self, expression: str) -> None:
        """Never raises, never executes."""
        assert evaluate_condition(expression, _make_opp()) is False

    def test_deep_nesting_returns_false(self) -> None:
        """Hundreds of parentheses fit in the length limit but are rejected."""
        expression = "(" * 600 + "opp.isRti" + ")" * 600
        assert len(expression) < MAX_CONDITION_LENGTH
        errors: list[ConditionError] = []
        assert evaluate_condition(expression, _make_opp(), on_error=errors.append) is False
        assert isinstance(errors[0], ConditionSyntaxError)

    def test_unknown_field_behind_true_branch(self) -> None:
        """An unknown field fails the whole expression."""
        assert evaluate_condition("opp.isRti === true || opp.bogus === 1", _make_opp()) is False

    def test_extra_fields_are_not_addressable(self) -> None:
        """Passthrough fields are not declared fields."""
        opp = Opportunity.model_validate({"id": "o1", "secretFlag": True})
        assert evaluate_condition("opp.secretFlag === true", opp) is False

    def test_error_callback_receives_exception(self) -> None:
        """on_error gets the failure for the caller to surface."""
        errors: list[ConditionError] = []
        evaluate_condition("opp.nope === true", _make_opp(), on_error=errors.append)
        evaluate_condition("opp.isRti ===", _make_opp(), on_error=errors.append)
        assert isinstance(errors[0], UnknownFieldError)
        assert errors[0].path == "nope"
        assert isinstance(errors[1], ConditionSyntaxError)
        assert errors[1].expression == "opp.isRti ==="

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """A warning names the rejected condition."""
        with caplog.at_level("WARNING", logger="raise_engine.conditions.evaluator"):
            evaluate_condition("opp.nope === true", _make_opp())
        assert "opp.nope === true" in caplog.text


class _Envelope(CamelModel):
    opportunity: Opportunity
    reviewer: str = ""


class TestResolveField:
    """Tests for resolve_field."""

    def test_alias_and_name(self) -> None:
        """camelCase alias and snake_case name resolve to the same field."""
        opp = _make_opp()
        assert resolve_field(opp, ("raiseTcv",)) == resolve_field(opp, ("raise_tcv",))

    def test_dotted_path_into_nested_model(self) -> None:
        """Paths descend through declared model fields."""
        envelope = _Envelope(opportunity=_make_opp())
        assert resolve_field(envelope, ("opportunity", "isRti")) is True
        assert evaluate_condition("opportunity.tcv >= 1500000", envelope) is True

    def test_cannot_descend_into_non_model(self) -> None:
        """Strings and lists have no addressable fields."""
        with pytest.raises(UnknownFieldError):
            resolve_field(_make_opp(), ("lots", "tcv"))
