"""OneOf / OneWithSet alternation."""
import re

from hmatch.match.compiler import compile_pattern
from hmatch.match.testers import NeverTester, OneOfTester, OneWithSetTester


def test_all_literal_list_degenerates_to_set():
    tester = compile_pattern(None, [1, 2, 3])
    assert isinstance(tester, OneWithSetTester)
    assert tester.test(2)
    assert not tester.test(4)
    assert not tester.test(None)


def test_none_member_admits_none():
    tester = compile_pattern(None, [1, None])
    assert tester.test(None)
    assert tester.test(1)
    assert not tester.test(0)


def test_set_keeps_bools_and_numbers_apart():
    tester = compile_pattern(None, [1, 'a'])
    assert tester.test(1)
    assert not tester.test(True)
    assert compile_pattern(None, [True]).test(True)
    assert not compile_pattern(None, [True]).test(1)


def test_unhashable_input_does_not_raise():
    assert not compile_pattern(None, [1, 2]).test([1])


def test_empty_alternation_never_matches():
    tester = compile_pattern(None, [])
    assert isinstance(tester, NeverTester)
    assert not tester.test(None)
    assert not tester.test([])


def test_mixed_members_check_set_first_then_patterns_in_order():
    tester = compile_pattern(None, [1, 'toto', re.compile('test', re.I), {'a': 1}])
    assert isinstance(tester, OneOfTester)
    assert isinstance(tester.members[0], OneWithSetTester)
    assert len(tester.members) == 3
    assert tester.test('toto')
    assert tester.test('A TEST')
    assert tester.test({'a': 1, 'b': 2})
    assert not tester.test('titi')


def test_schema_strings_are_not_folded_into_set():
    tester = compile_pattern(None, ['Regexp:/^x/', 'y'])
    assert isinstance(tester, OneOfTester)
    assert tester.test('xyz')
    assert tester.test('y')
    assert not tester.test('Regexp:/^x/')


def test_adopted_tester_members_stay_in_fallback_list():
    from hmatch.match.testers import EqualTester
    tester = compile_pattern(None, [EqualTester(5), 6])
    assert isinstance(tester, OneOfTester)
    assert tester.test(5)
    assert tester.test(6)
    assert not tester.test(7)
