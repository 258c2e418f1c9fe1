from django.test import TestCase
from rest_framework import serializers

from ..serializers import NestedAttributesSerializer

from .models import Address, Person, Tag


class PersonSerializer(NestedAttributesSerializer):
    class Meta:
        model = Person
        fields = ('id', 'name', 'tags')


class NestedAttributesSerializerTest(TestCase):

    def test_fields(self):
        fields = PersonSerializer().fields
        for name in ('addresses_attributes', 'address_attributes',
                     'profile_attributes', 'tags_attributes'):
            self.assertTrue(fields[name].write_only, name)
        self.assertNotIn('friends_attributes', fields)

    def test_create(self):
        serializer = PersonSerializer(data={
            'name': 'Ann',
            'addresses_attributes': [{'street': 'Home'}, {'street': 'Work'}],
            'profile_attributes': {'bio': 'Hello'},
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        person = serializer.save()

        self.assertEqual(
            list(person.addresses.values_list('street', flat=True)),
            ['Home', 'Work'])
        self.assertEqual(person.profile.bio, 'Hello')
        self.assertNotIn('addresses_attributes', serializer.data)
        self.assertEqual(serializer.data['name'], 'Ann')

    def test_update(self):
        person = Person.objects.create(name='Ann')
        home = Address.objects.create(person=person, street='Home')
        work = Address.objects.create(person=person, street='Work')
        tag = Tag.objects.create(name='red')

        serializer = PersonSerializer(person, data={
            'name': 'Bob',
            'tags': [tag.pk],
            'addresses_attributes': {
                '0': {'id': home.pk, 'street': 'New home'},
                '1': {'id': work.pk, '_delete': True},
            },
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        person = serializer.save()

        home.refresh_from_db()
        self.assertEqual(person.name, 'Bob')
        self.assertEqual(home.street, 'New home')
        self.assertEqual(list(Address.objects.all()), [home])
        self.assertEqual(list(person.tags.all()), [tag])

    def test_invalid_nested_record(self):
        serializer = PersonSerializer(data={
            'name': 'Ann',
            'addresses_attributes': [{'street': ''}],
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        with self.assertRaises(serializers.ValidationError) as cm:
            serializer.save()
        self.assertIn('addresses_street', cm.exception.detail)
        self.assertFalse(Person.objects.exists())
