"""
Tests for predicate construction.

The important property: a clause exists only when its operand is known, so
no comparison against None ever reaches the query.
"""
import itertools
import uuid
from datetime import datetime, timezone

from django.test import SimpleTestCase, TestCase

from accounts.types import UserRole
from tasks.search.access import scope_predicate
from tasks.search.config import VIETNAMESE_SUBSTITUTIONS
from tasks.search.filters import DateRange, FilterSpec, Principal
from tasks.search.normalizer import TextNormalizer
from tasks.search.predicates import (
    MAX_TASK_ID,
    build_predicate,
    describe_predicate,
    iter_conditions,
    parse_task_id,
)
from tasks.types import SearchScope, TaskStatus


SEARCHES = [None, "", "   ", "buy fan", "Nguyễn", "42", " 42 ", "CV042", "cv", "4 2", "-5", "1e3", str(MAX_TASK_ID + 1)]
STATUSES = [frozenset(), frozenset({TaskStatus.READY, TaskStatus.ON_HOLD})]
ASSIGNEES = [frozenset(), frozenset({"7"})]
CUSTOMERS = [None, uuid.UUID("00000000-0000-0000-0000-000000000001")]
START = datetime(2025, 1, 1, tzinfo=timezone.utc)
END = datetime(2025, 1, 31, tzinfo=timezone.utc)
RANGES = [DateRange(), DateRange(start=START), DateRange(end=END), DateRange(START, END)]
PRINCIPALS = [Principal("7", UserRole.WORKER), Principal("1", UserRole.ADMIN)]


class ParseTaskIdTests(SimpleTestCase):
    def test_plain_number(self):
        self.assertEqual(parse_task_id("42"), 42)

    def test_display_prefix(self):
        self.assertEqual(parse_task_id("cv042"), 42)

    def test_not_an_id(self):
        for query in ["", "cv", "4 2", "-5", "1e3", "buy 42", "42a"]:
            with self.subTest(query=query):
                self.assertIsNone(parse_task_id(query))

    def test_out_of_range(self):
        self.assertEqual(parse_task_id(str(MAX_TASK_ID)), MAX_TASK_ID)
        self.assertIsNone(parse_task_id(str(MAX_TASK_ID + 1)))


class UndefinedSafetyTests(TestCase):
    """Every combination of filter options yields a predicate with no None operand."""

    def setUp(self):
        self.normalizer = TextNormalizer(VIETNAMESE_SUBSTITUTIONS)

    def test_no_none_operand_for_any_spec(self):
        combinations = itertools.product(SEARCHES, STATUSES, ASSIGNEES, CUSTOMERS, RANGES, RANGES, RANGES)
        for search, statuses, assignees, customer_id, scheduled, created, completed in combinations:
            spec = FilterSpec(
                search=search,
                statuses=statuses,
                assignee_ids=assignees,
                customer_id=customer_id,
                scheduled=scheduled,
                created=created,
                completed=completed,
            )
            predicate = build_predicate(spec, self.normalizer)
            for principal in PRINCIPALS:
                for scope in SearchScope:
                    scoped = scope_predicate(predicate, principal, scope)
                    for lookup, operand in iter_conditions(scoped):
                        if operand is None:
                            self.fail(f"{lookup} compared against None for {spec} / {principal} / {scope}")

    def test_id_clause_only_for_numeric_queries(self):
        for search in SEARCHES:
            predicate = build_predicate(FilterSpec(search=search), self.normalizer)
            lookups = [lookup for lookup, _ in iter_conditions(predicate)]
            expected = parse_task_id(self.normalizer.normalize(search)) is not None
            with self.subTest(search=search):
                self.assertEqual('pk' in lookups, expected)

    def test_empty_spec_only_excludes_deleted(self):
        predicate = build_predicate(FilterSpec(), self.normalizer)
        self.assertEqual(list(iter_conditions(predicate)), [('deleted_at__isnull', True)])

    def test_blank_search_adds_nothing(self):
        for search in [None, "", "   "]:
            predicate = build_predicate(FilterSpec(search=search), self.normalizer)
            with self.subTest(search=search):
                self.assertEqual(len(list(iter_conditions(predicate))), 1)

    def test_search_uses_normalized_query_on_derived_text(self):
        predicate = build_predicate(FilterSpec(search="  Mua   QUẠT "), self.normalizer)
        self.assertIn(('searchable_text__contains', 'mua quat'), list(iter_conditions(predicate)))

    def test_numeric_search_is_disjunction(self):
        predicate = build_predicate(FilterSpec(search="CV042"), self.normalizer)
        self.assertEqual(
            describe_predicate(predicate),
            "(deleted_at__isnull AND (searchable_text__contains OR pk))",
        )
        self.assertIn(('pk', 42), list(iter_conditions(predicate)))

    def test_date_bounds_are_inclusive(self):
        spec = FilterSpec(created=DateRange(START, END), completed=DateRange(end=END))
        conditions = list(iter_conditions(build_predicate(spec, self.normalizer)))
        self.assertIn(('created_at__gte', START), conditions)
        self.assertIn(('created_at__lte', END), conditions)
        self.assertIn(('completed_at__lte', END), conditions)
        self.assertNotIn('completed_at__gte', [lookup for lookup, _ in conditions])
