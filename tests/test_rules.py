"""Rule compilation."""
import json

import pytest

from hmatch.errors import ExpressionError
from hmatch.heuristic.rules import (
    CompiledRule,
    SerializedRule,
    compile_rule,
    compile_rules,
    compute_scorer,
    load_rules,
)


def make_rule(**overrides):
    base = {
        'category': 'pricing',
        'criteria': 'price',
        'context': 'catalog',
    }
    base.update(overrides)
    return base


@pytest.mark.parametrize('strength, expected', [(None, 1), (0, 1), (-4, 1), (1, 1), (0.5, 1), (3, 3), (2.5, 2.5)])
def test_strength_is_never_below_one(strength, expected):
    rule = compile_rule(make_rule(strength=strength))
    assert rule.strength == expected


def test_against_defaults_to_extractor():
    rule = compile_rule(make_rule(extractor='_.price'))
    assert rule.against is rule.extractor
    assert rule.against({}, {'price': 7}) == 7


def test_against_is_compiled_separately():
    rule = compile_rule(make_rule(extractor='_.price', against='_.cost'))
    assert rule.extractor({}, {'price': 1, 'cost': 2}) == 1
    assert rule.against({}, {'price': 1, 'cost': 2}) == 2


def test_default_extractor_is_identity():
    rule = compile_rule(make_rule())
    assert rule.extractor({}, 'subject') == 'subject'


def test_default_scorer_scores_zero():
    rule = compile_rule(make_rule())
    assert rule.scorer({}, 1, 1) == (0, 1, [])


def test_linear_range_scorer():
    scorer = compute_scorer('linear:0;10;20')
    assert scorer({}, 10, 10) == (1, 1, [])
    assert scorer({}, 10, 15) == (0.5, 1, [])
    assert scorer({}, 10, 40) == (0, 1, [])


def test_gaussian_range_scorer():
    assert compute_scorer('gaussian:0;10;20')({}, 0, 50) == (0.05, 1, [])


def test_unknown_range_kind_falls_back_to_linear():
    assert compute_scorer('cubic:0;10;20')({}, 10, 15) == (0.5, 1, [])


def test_decimal_range_bounds():
    assert compute_scorer('linear:0;1.5;2.5')({}, 1, 1.5) == (0.5, 1, [])


def test_expression_scorer_sees_namespace():
    scorer = compute_scorer('l == r or r in aliases')
    assert scorer({'aliases': ['b']}, 'a', 'b') == (1, 1, [])
    assert scorer({'aliases': []}, 'a', 'b') == (0, 1, [])


def test_expression_scorer_can_return_partial_triples():
    assert compute_scorer('[l, r]')({}, 2, 4) == (2, 4, [])


def test_expression_scorer_can_call_range_helpers():
    assert compute_scorer('linear_range(l, r, 0, 10, 20)')({}, 10, 15) == (0.5, 1, [])


def test_invalid_expression_fails_at_compile_time():
    with pytest.raises(ExpressionError):
        compile_rule(make_rule(extractor='_.'))


def test_missing_required_field():
    with pytest.raises(ValueError):
        compile_rule({'criteria': 'x'})


def test_serialized_rule_round_trip():
    data = make_rule(strength=2, scorer='linear:0;1;2')
    rule = SerializedRule.from_dict({**data, 'unknown': True})
    assert rule.to_dict() == data
    assert isinstance(compile_rule(rule), CompiledRule)


def test_compiled_rule_is_immutable():
    rule = compile_rule(make_rule())
    with pytest.raises(Exception):
        rule.strength = 5  # type: ignore[misc]


def test_compile_and_load_rules(tmp_path):
    rules = [make_rule(criteria='a'), make_rule(criteria='b', scorer='gaussian:0;1;2')]
    assert [r.criteria for r in compile_rules(rules)] == ['a', 'b']
    path = tmp_path / 'rules.json'
    path.write_text(json.dumps(rules), encoding='utf-8')
    assert [r.criteria for r in load_rules(path)] == ['a', 'b']


def test_load_rules_rejects_non_array(tmp_path):
    path = tmp_path / 'rules.json'
    path.write_text('{"criteria": "a"}', encoding='utf-8')
    with pytest.raises(ValueError):
        load_rules(path)
