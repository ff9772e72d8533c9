"""
Tests for conditional clause evaluation
"""
from django.test import SimpleTestCase

from lease_templates.choices import ConditionOperator
from lease_templates.conditions import evaluate_condition, should_include_clause
from lease_templates.exceptions import ValidationError
from lease_templates.records import Condition


class EvaluateConditionTests(SimpleTestCase):
    def test_absent_field_is_false_for_every_operator(self):
        """A field missing from the map never satisfies a condition"""
        for operator in ConditionOperator.values:
            with self.subTest(operator=operator):
                condition = {'field': 'x', 'operator': operator, 'value': False}
                self.assertFalse(evaluate_condition(condition, {}))

    def test_is_false_on_missing_variable(self):
        self.assertFalse(evaluate_condition({'field': 'x', 'operator': 'is_false', 'value': False}, {}))

    def test_present_none_is_a_value(self):
        condition = {'field': 'x', 'operator': 'not_equals', 'value': 'anything'}
        self.assertTrue(evaluate_condition(condition, {'x': None}))

    def test_equals_is_strict(self):
        self.assertTrue(evaluate_condition({'field': 'n', 'operator': 'equals', 'value': 2}, {'n': 2.0}))
        self.assertFalse(evaluate_condition({'field': 'n', 'operator': 'equals', 'value': '2'}, {'n': 2}))
        self.assertFalse(evaluate_condition({'field': 'b', 'operator': 'equals', 'value': 1}, {'b': True}))
        self.assertTrue(evaluate_condition({'field': 'b', 'operator': 'equals', 'value': True}, {'b': True}))

    def test_not_equals(self):
        self.assertTrue(evaluate_condition({'field': 's', 'operator': 'not_equals', 'value': 'cat'}, {'s': 'dog'}))
        self.assertFalse(evaluate_condition({'field': 's', 'operator': 'not_equals', 'value': 'dog'}, {'s': 'dog'}))

    def test_contains_is_case_insensitive(self):
        condition = {'field': 'pets', 'operator': 'contains', 'value': 'DOG'}
        self.assertTrue(evaluate_condition(condition, {'pets': 'one small dog'}))
        self.assertFalse(evaluate_condition(condition, {'pets': 'two cats'}))

    def test_numeric_comparisons(self):
        self.assertTrue(evaluate_condition({'field': 'rent', 'operator': 'greater_than', 'value': 2000}, {'rent': 2500}))
        self.assertTrue(evaluate_condition({'field': 'rent', 'operator': 'less_than', 'value': '3000'}, {'rent': 2500}))
        self.assertFalse(evaluate_condition({'field': 'rent', 'operator': 'greater_than', 'value': 3000}, {'rent': 2500}))

    def test_numeric_comparison_needs_numbers(self):
        self.assertFalse(evaluate_condition({'field': 'rent', 'operator': 'greater_than', 'value': 1}, {'rent': '2500'}))
        self.assertFalse(evaluate_condition({'field': 'rent', 'operator': 'less_than', 'value': 'lots'}, {'rent': 2500}))
        self.assertFalse(evaluate_condition({'field': 'flag', 'operator': 'greater_than', 'value': 0}, {'flag': True}))

    def test_is_true_and_is_false_use_identity(self):
        self.assertTrue(evaluate_condition({'field': 'has_pets', 'operator': 'is_true'}, {'has_pets': True}))
        self.assertFalse(evaluate_condition({'field': 'has_pets', 'operator': 'is_true'}, {'has_pets': 1}))
        self.assertTrue(evaluate_condition({'field': 'has_pets', 'operator': 'is_false'}, {'has_pets': False}))
        self.assertFalse(evaluate_condition({'field': 'has_pets', 'operator': 'is_false'}, {'has_pets': 0}))

    def test_accepts_condition_records(self):
        condition = Condition(field='has_pets', operator=ConditionOperator.IS_TRUE, value=True)
        self.assertTrue(evaluate_condition(condition, {'has_pets': True}))

    def test_unknown_operator_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            evaluate_condition({'field': 'x', 'operator': 'matches_regex', 'value': '.*'}, {'x': 'y'})
        self.assertEqual(ctx.exception.fields, ['operator'])


class ShouldIncludeClauseTests(SimpleTestCase):
    def test_empty_conditions_include(self):
        self.assertTrue(should_include_clause([], {}))
        self.assertTrue(should_include_clause(None, {}))

    def test_all_conditions_must_hold(self):
        conditions = [
            {'field': 'has_pets', 'operator': 'is_true', 'value': True},
            {'field': 'pet_count', 'operator': 'less_than', 'value': 3},
        ]
        self.assertTrue(should_include_clause(conditions, {'has_pets': True, 'pet_count': 1}))
        self.assertFalse(should_include_clause(conditions, {'has_pets': True, 'pet_count': 5}))
        self.assertFalse(should_include_clause(conditions, {'has_pets': True}))

    def test_pet_condition_excludes_when_false_or_absent(self):
        conditions = [{'field': 'has_pets', 'operator': 'is_true', 'value': True}]
        self.assertFalse(should_include_clause(conditions, {'has_pets': False}))
        self.assertFalse(should_include_clause(conditions, {}))
        self.assertTrue(should_include_clause(conditions, {'has_pets': True}))
