import re

from django.http import QueryDict
from django.test import TestCase

from ..helpers import form_for
from ..params import parse_nested_params

from .models import Address, Person


def submitted_names(html):
    return re.findall(r'name="([^"]+)"', html)


class RoundTripTest(TestCase):
    """Render a nested form, submit it back and save the result."""

    def test_edit_person_with_addresses(self):
        person = Person.objects.create(name='Ann')
        Address.objects.create(id=7, person=person, street='Main')
        Address.objects.create(id=8, person=person, street='Work')
        person = Person.objects.get(pk=person.pk)
        person.association('addresses').append(Address())

        def address_fields(a):
            return (a.hidden_field('id') + a.text_field('street') +
                    a.check_box('_delete'))

        html = form_for(person, url='/people/1/', block=lambda f: (
            f.text_field('name') + f.fields_for('addresses',
                                                block=address_fields)))
        self.assertEqual(submitted_names(html), [
            'person[name]',
            'person[addresses_attributes][7][id]',
            'person[addresses_attributes][7][street]',
            'person[addresses_attributes][7][_delete]',
            'person[addresses_attributes][7][_delete]',
            'person[addresses_attributes][8][id]',
            'person[addresses_attributes][8][street]',
            'person[addresses_attributes][8][_delete]',
            'person[addresses_attributes][8][_delete]',
            'person[addresses_attributes][new_1][id]',
            'person[addresses_attributes][new_1][street]',
            'person[addresses_attributes][new_1][_delete]',
            'person[addresses_attributes][new_1][_delete]',
        ])

        post = QueryDict(mutable=True)
        post.update({
            'person[name]': 'Ann',
            'person[addresses_attributes][7][id]': '7',
            'person[addresses_attributes][7][street]': 'Main Street',
            'person[addresses_attributes][7][_delete]': '0',
            'person[addresses_attributes][8][id]': '8',
            'person[addresses_attributes][8][street]': 'Work',
            'person[addresses_attributes][new_1][id]': '',
            'person[addresses_attributes][new_1][street]': 'Holiday',
            'person[addresses_attributes][new_1][_delete]': '0',
        })
        post.appendlist('person[addresses_attributes][8][_delete]', '0')
        post.appendlist('person[addresses_attributes][8][_delete]', '1')
        params = parse_nested_params(post)['person']

        person = Person.objects.get(pk=person.pk)
        person.name = params['name']
        person.addresses_attributes = params['addresses_attributes']
        person.full_clean()
        person.save()

        self.assertEqual(
            list(Address.objects.values_list('street', flat=True)),
            ['Main Street', 'Holiday'])
        self.assertFalse(Address.objects.filter(pk=8).exists())
        self.assertEqual(
            [a.person_id for a in Address.objects.all()],
            [person.pk, person.pk])

