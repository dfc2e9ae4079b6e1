"""
Tests for the task search endpoint.
"""
from unittest.mock import patch

from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.types import UserRole
from crm.models import Customer
from locations.models import Location
from tasks.tests.helpers import make_task, make_user


class TaskSearchAPITests(APITestCase):
    def setUp(self):
        self.url = reverse('task-search')
        self.admin = make_user('admin', UserRole.ADMIN)
        self.worker = make_user('worker')
        self.customer = Customer.objects.create(name="Trần Thị B", phone="0912000111")
        self.location = Location.objects.create(name="Văn phòng", address="3 Hai Bà Trưng", lat=10.7, lng=106.7)
        self.task = make_task(
            "Buy fan",
            assignees=[self.worker, self.admin],
            customer=self.customer,
            location=self.location,
        )
        self.other = make_task("Fix fan")

    def test_requires_authentication(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_response_shape(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url, {'search': 'buy fan'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(set(response.data), {'items', 'nextCursor', 'hasNextPage'})
        self.assertFalse(response.data['hasNextPage'])
        self.assertIsNone(response.data['nextCursor'])

        item = response.data['items'][0]
        self.assertEqual(item['id'], self.task.pk)
        self.assertEqual(item['title'], "Buy fan")
        self.assertEqual(item['status'], "PREPARING")
        self.assertEqual(item['assigneeIds'], sorted([str(self.worker.pk), str(self.admin.pk)]))
        self.assertEqual(item['customer'], {
            'id': str(self.customer.pk),
            'name': "Trần Thị B",
            'phone': "0912000111",
        })
        self.assertEqual(item['location']['name'], "Văn phòng")
        self.assertEqual(item['location']['lat'], 10.7)
        self.assertIsNone(item['scheduledAt'])
        self.assertIsNone(item['completedAt'])
        self.assertIn('createdAt', item)
        self.assertIn('updatedAt', item)
        self.assertNotIn('searchable_text', item)

    def test_related_fields_searchable(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url, {'search': 'hai ba trung'})
        self.assertEqual([item['id'] for item in response.data['items']], [self.task.pk])

    def test_worker_only_sees_assigned(self):
        self.client.force_authenticate(self.worker)
        response = self.client.get(self.url, {'search': 'fan'})
        self.assertEqual([item['id'] for item in response.data['items']], [self.task.pk])

    def test_admin_restrict_to_mine(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url, {'search': 'fan'})
        self.assertEqual(len(response.data['items']), 2)

        response = self.client.get(self.url, {'search': 'fan', 'restrictToMine': 'true'})
        self.assertEqual([item['id'] for item in response.data['items']], [self.task.pk])

    def test_repeated_and_comma_separated_status(self):
        self.client.force_authenticate(self.admin)
        repeated = self.client.get(f'{self.url}?status=READY&status=PREPARING')
        commas = self.client.get(self.url, {'status': 'READY,PREPARING'})
        self.assertEqual(repeated.status_code, status.HTTP_200_OK)
        self.assertEqual(len(repeated.data['items']), 2)
        self.assertEqual(repeated.data['items'], commas.data['items'])

    def test_follow_cursor(self):
        self.client.force_authenticate(self.admin)
        first = self.client.get(self.url, {'pageSize': 1, 'sortBy': 'id', 'sortOrder': 'asc'})
        self.assertTrue(first.data['hasNextPage'])
        self.assertEqual(first.data['items'][0]['id'], self.task.pk)

        second = self.client.get(self.url, {
            'pageSize': 1, 'sortBy': 'id', 'sortOrder': 'asc', 'cursor': first.data['nextCursor'],
        })
        self.assertFalse(second.data['hasNextPage'])
        self.assertEqual(second.data['items'][0]['id'], self.other.pk)

    def test_validation_errors_are_400(self):
        self.client.force_authenticate(self.admin)
        cases = [
            ({'pageSize': 0}, 'pageSize'),
            ({'pageSize': 101}, 'pageSize'),
            ({'status': 'FINISHED'}, 'status'),
            ({'scheduledFrom': 'soon'}, 'scheduledFrom'),
            ({'createdFrom': '2025-02-01', 'createdTo': '2025-01-01'}, 'createdTo'),
            ({'cursor': 'abc'}, 'cursor'),
        ]
        for params, field in cases:
            with self.subTest(params=params):
                response = self.client.get(self.url, params)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(field, response.data)

    def test_storage_error_is_generic_500(self):
        self.client.force_authenticate(self.admin)
        with patch('tasks.search.service.paginate', side_effect=DatabaseError("relation does not exist")):
            with self.assertLogs('tasks.search.service', level='ERROR'):
                response = self.client.get(self.url, {'search': 'fan'})

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertNotIn('relation', response.data['error'])
