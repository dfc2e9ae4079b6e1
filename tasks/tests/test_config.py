"""
Tests for the search configuration value.
"""
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from tasks.search.config import VIETNAMESE_SUBSTITUTIONS, SearchConfig


class SearchConfigTests(SimpleTestCase):
    def test_defaults(self):
        config = SearchConfig()
        self.assertEqual(config.default_page_size, 20)
        self.assertEqual(config.max_page_size, 100)
        self.assertEqual(config.min_page_size, 1)
        self.assertEqual(config.cascade_inline_limit, 500)
        self.assertEqual(config.cascade_batch_size, 200)
        self.assertEqual(dict(config.substitutions), dict(VIETNAMESE_SUBSTITUTIONS))

    def test_immutable(self):
        config = SearchConfig()
        with self.assertRaises(AttributeError):
            config.default_page_size = 50
        with self.assertRaises(TypeError):
            config.substitutions['x'] = 'y'

    def test_caller_mapping_is_copied(self):
        table = {'ø': 'o'}
        config = SearchConfig(substitutions=table)
        table['å'] = 'a'
        self.assertNotIn('å', config.substitutions)

    def test_page_size_bounds_checked(self):
        with self.assertRaises(ImproperlyConfigured):
            SearchConfig(default_page_size=0)
        with self.assertRaises(ImproperlyConfigured):
            SearchConfig(default_page_size=200, max_page_size=100)

    def test_cascade_bounds_checked(self):
        with self.assertRaises(ImproperlyConfigured):
            SearchConfig(cascade_batch_size=0)
        with self.assertRaises(ImproperlyConfigured):
            SearchConfig(cascade_inline_limit=-1)

    def test_substitution_keys_must_be_single_characters(self):
        with self.assertRaises(ImproperlyConfigured):
            SearchConfig(substitutions={'dd': 'd'})

    @override_settings(
        SEARCH_DEFAULT_PAGE_SIZE=10,
        SEARCH_MAX_PAGE_SIZE=50,
        SEARCH_CASCADE_INLINE_LIMIT=5,
        SEARCH_CASCADE_BATCH_SIZE=2,
    )
    def test_from_settings(self):
        config = SearchConfig.from_settings()
        self.assertEqual(config.default_page_size, 10)
        self.assertEqual(config.max_page_size, 50)
        self.assertEqual(config.cascade_inline_limit, 5)
        self.assertEqual(config.cascade_batch_size, 2)
