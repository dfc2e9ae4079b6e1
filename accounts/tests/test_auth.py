"""
Tests for users and token authentication.
"""
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from accounts.types import UserRole
from tasks.search.filters import Principal


class UserRoleTests(APITestCase):
    def test_default_role_is_worker(self):
        user = User.objects.create_user(username='w', password='testpass123')
        self.assertEqual(user.role, UserRole.WORKER)
        self.assertFalse(user.is_admin)

    def test_principal_from_user(self):
        user = User.objects.create_user(username='a', password='testpass123', role=UserRole.ADMIN)
        principal = Principal.from_user(user)
        self.assertEqual(principal.principal_id, str(user.pk))
        self.assertTrue(principal.is_admin)


class TokenAuthTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='worker', password='testpass123')

    def test_obtain_token_and_search(self):
        response = self.client.post(
            reverse('token-obtain'),
            {'username': 'worker', 'password': 'testpass123'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', response.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        search = self.client.get(reverse('task-search'))
        self.assertEqual(search.status_code, status.HTTP_200_OK)
        self.assertEqual(search.data['items'], [])

    def test_bad_credentials(self):
        response = self.client.post(
            reverse('token-obtain'),
            {'username': 'worker', 'password': 'wrong'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
