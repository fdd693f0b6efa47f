"""Rule-set execution."""
import pytest

from hmatch.heuristic.engine import execute
from hmatch.heuristic.rules import compile_rule, compile_rules


def make_rule(**overrides):
    base = {
        'category': 'product',
        'criteria': 'price',
        'context': 'catalog',
        'extractor': '_',
        'against': '_',
        'scorer': 'linear:0;10;20',
    }
    base.update(overrides)
    return compile_rule(base)


def test_identical_values_score_fully():
    result = execute([make_rule()], 10, 10)
    assert result.score == result.total == 1
    assert result.similarity == 1
    assert result.errors == []
    assert result.details == {'price': (1, 1)}


def test_result_unpacks_as_four_fields():
    score, total, errors, details = execute([make_rule()], 10, 15)
    assert (score, total) == (0.5, 1)
    assert details['price'] == (0.5, 1)


def test_strength_weights_contribution():
    rules = [make_rule(criteria='a', strength=3), make_rule(criteria='b')]
    result = execute(rules, 10, 15)
    assert result.score == pytest.approx(0.5 * 3 + 0.5)
    assert result.total == 4
    assert result.details == {'a': (1.5, 3), 'b': (0.5, 1)}


def test_null_values_skip_rule_entirely():
    rule = make_rule()
    for left, right in ((None, 10), (10, None)):
        result = execute([rule], left, right)
        assert (result.score, result.total, result.errors, result.details) == (0, 0, [], {})
        assert result.similarity is None


def test_missing_field_extracts_none_and_skips():
    rules = [make_rule(criteria='price', extractor='_.price'), make_rule(criteria='size', extractor='_.size')]
    result = execute(rules, {'price': 10, 'size': 3}, {'price': 10})
    assert result.details == {'price': (1, 1)}
    assert result.total == 1


def test_empty_rule_set_means_no_comparison():
    result = execute([], 1, 1)
    assert result.total == 0
    assert result.similarity is None


def test_raising_scorer_counts_strength_in_total_only():
    rule = make_rule(scorer='l / r', strength=2)
    result = execute([rule], 1, 0)
    assert result.score == 0
    assert result.total == 2
    assert len(result.errors) == 1
    assert isinstance(result.errors[0], ZeroDivisionError)
    assert isinstance(result.details['price'], str)
    assert result.details['price'].startswith('ZeroDivisionError')


def test_raising_extractor_is_recorded():
    rule = make_rule(extractor='_.a.b')
    result = execute([rule], {'a': None}, {'a': {'b': 1}})
    assert result.total == 1
    assert result.score == 0
    assert 'TypeError' in result.details['price']


def test_failure_does_not_abort_following_rules():
    rules = [make_rule(criteria='bad', scorer='nope(l)'), make_rule(criteria='good')]
    result = execute(rules, 10, 10)
    assert result.score == 1
    assert result.total == 2
    assert isinstance(result.details['bad'], str)
    assert result.details['good'] == (1, 1)


def test_bad_scorer_result_is_an_error_not_an_exception():
    rule = make_rule(scorer='{"score": 1}')
    result = execute([rule], 1, 1)
    assert result.details['price'] == (0, 1)
    assert result.total == 1
    assert 'Bad result' in str(result.errors[0])


def test_scorer_errors_are_collected():
    namespace = {'warn': lambda l, r: [0.5, 1, [ValueError('partial')]]}
    result = execute([make_rule(scorer='warn(l, r)')], 1, 2, namespace)
    assert result.score == 0.5
    assert [str(e) for e in result.errors] == ['partial']


def test_zero_possible_is_excluded_from_totals():
    rules = [make_rule(criteria='ignored', scorer='[1, 0]'), make_rule(criteria='counted')]
    result = execute(rules, 10, 10)
    assert result.score == 1
    assert result.total == 1
    assert result.details['ignored'] == (1, 0)


def test_namespace_is_shared_and_not_cleared():
    namespace = {'seen': []}
    rules = compile_rules([
        {'category': 'c', 'criteria': 'first', 'context': 'x', 'extractor': 'seen.append(_) or _', 'scorer': 'l == r'},
        {'category': 'c', 'criteria': 'second', 'context': 'x', 'extractor': 'len(seen)', 'against': '2',
         'scorer': 'l == r'},
    ])
    result = execute(rules, 'a', 'a', namespace)
    assert namespace['seen'] == ['a', 'a']
    assert result.details == {'first': (1, 1), 'second': (1, 1)}


def test_execution_is_repeatable():
    rules = [make_rule(criteria='p', extractor='_.p'), make_rule(criteria='q', extractor='_.q', scorer='gaussian:0;10;20')]
    left, right = {'p': 3, 'q': 8}, {'p': 5, 'q': 10}
    first = execute(rules, left, right)
    assert execute(rules, left, right) == first


def test_missing_field_named_like_a_dict_method_skips_rule():
    rule = make_rule(criteria='k', extractor='_.items', scorer='l == r')
    result = execute([rule], {'items': 3}, {'name': 'x'})
    assert result.details == {}
    assert result.total == 0


def test_key_lookup_on_non_mapping_skips_rule():
    rule = make_rule(criteria='k', extractor="_['name']", scorer='l == r')
    result = execute([rule], {'name': 'x'}, ['x'])
    assert result.details == {}
    assert result.errors == []
