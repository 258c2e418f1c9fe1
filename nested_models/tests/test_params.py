from django.http import QueryDict
from django.test import SimpleTestCase

from ..params import parse_nested_params, split_name


class SplitNameTest(SimpleTestCase):

    def test_split(self):
        self.assertEqual(split_name('person'), ['person'])
        self.assertEqual(split_name('person[addresses_attributes][7][street]'),
                         ['person', 'addresses_attributes', '7', 'street'])
        self.assertEqual(split_name('person[tag_ids][]'),
                         ['person', 'tag_ids', ''])

    def test_malformed_names_are_kept_whole(self):
        self.assertEqual(split_name('person[name'), ['person[name'])
        self.assertEqual(split_name('[name]'), ['[name]'])


class ParseNestedParamsTest(SimpleTestCase):

    def test_mapping(self):
        self.assertEqual(
            parse_nested_params({
                'person[name]': 'Ann',
                'person[addresses_attributes][7][id]': '7',
                'person[addresses_attributes][7][street]': 'Main',
                'person[addresses_attributes][new_1][street]': 'New',
                'commit': 'Save',
            }),
            {'person': {'name': 'Ann',
                        'addresses_attributes': {
                            '7': {'id': '7', 'street': 'Main'},
                            'new_1': {'street': 'New'}}},
             'commit': 'Save'})

    def test_query_dict(self):
        data = QueryDict('person[name]=Ann'
                         '&person[tag_ids][]=1&person[tag_ids][]=2'
                         '&person[active]=0&person[active]=1')
        self.assertEqual(parse_nested_params(data),
                         {'person': {'name': 'Ann', 'tag_ids': ['1', '2'],
                                     'active': '1'}})

    def test_list_values_in_mappings(self):
        self.assertEqual(parse_nested_params({'a[b]': ['1', '2'],
                                              'a[c][]': ['3', '4']}),
                         {'a': {'b': '2', 'c': ['3', '4']}})

    def test_conflicts(self):
        with self.assertRaises(ValueError):
            parse_nested_params(QueryDict('a=1&a[b]=2'))
        with self.assertRaises(ValueError):
            parse_nested_params(QueryDict('a[b]=2&a=1'))
        with self.assertRaises(ValueError):
            parse_nested_params(QueryDict('a[b]=2&a[]=1'))
