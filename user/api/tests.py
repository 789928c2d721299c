from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from club.models import Club
from user.models import User, UserRole, Role


class LoginAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.club = Club._default_manager.create(name='Riverside FC')
        self.user = User._default_manager.create_user(
            email='coach@test.com',
            password='testpass123',
            first_name='Casey',
            last_name='Coach'
        )
        UserRole._default_manager.create(user=self.user, role=Role.COACH, club=self.club)

    def test_login_success(self):
        url = reverse('user_api:token-obtain')
        response = self.client.post(url, {'email': 'coach@test.com', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertIn('access', response.data['data']['tokens'])
        self.assertIn('refresh', response.data['data']['tokens'])
        self.assertEqual(response.data['data']['user']['roles'][0]['role'], Role.COACH)

    def test_login_is_case_insensitive_on_email(self):
        url = reverse('user_api:token-obtain')
        response = self.client.post(url, {'email': 'Coach@Test.com', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_wrong_password(self):
        url = reverse('user_api:token-obtain')
        response = self.client.post(url, {'email': 'coach@test.com', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_inactive_user(self):
        self.user.is_active = False
        self.user.save()
        url = reverse('user_api:token-obtain')
        response = self.client.post(url, {'email': 'coach@test.com', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh_token(self):
        refresh = RefreshToken.for_user(self.user)
        url = reverse('user_api:token-refresh')
        response = self.client.post(url, {'refresh': str(refresh)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)


class ProfileAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User._default_manager.create_user(
            email='admin@test.com',
            password='testpass123',
            first_name='Ada',
            last_name='Admin'
        )
        UserRole._default_manager.create(user=self.user, role=Role.SUPER_ADMIN)
        self.token = str(RefreshToken.for_user(self.user).access_token)

    def test_profile_requires_authentication(self):
        response = self.client.get(reverse('user_api:profile'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_profile_success(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.token}')
        response = self.client.get(reverse('user_api:profile'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['email'], 'admin@test.com')
        self.assertEqual(response.data['data']['full_name'], 'Ada Admin')
        self.assertIsNone(response.data['data']['roles'][0]['club'])


class RoleGrantTestCase(TestCase):
    def setUp(self):
        self.club = Club._default_manager.create(name='Riverside FC')
        self.other_club = Club._default_manager.create(name='Hilltop United')
        self.user = User._default_manager.create_user(email='someone@test.com', password='testpass123')

    def test_role_without_club_is_rejected(self):
        with self.assertRaises(ValidationError):
            UserRole._default_manager.create(user=self.user, role=Role.COACH)

    def test_minimum_role_follows_hierarchy(self):
        UserRole._default_manager.create(user=self.user, role=Role.CLUB_ADMIN, club=self.club)
        self.assertTrue(self.user.has_minimum_role(Role.COACH))
        self.assertTrue(self.user.has_minimum_role(Role.CLUB_ADMIN))
        self.assertFalse(self.user.has_minimum_role(Role.SUPER_ADMIN))

    def test_minimum_role_is_scoped_to_club(self):
        UserRole._default_manager.create(user=self.user, role=Role.CLUB_ADMIN, club=self.club)
        self.assertTrue(self.user.has_minimum_role(Role.COACH, club_id=self.club.pk))
        self.assertFalse(self.user.has_minimum_role(Role.COACH, club_id=self.other_club.pk))
        self.assertEqual(self.user.admin_club_ids(), [self.club.pk])

    def test_parent_is_below_coach(self):
        UserRole._default_manager.create(user=self.user, role=Role.PARENT, club=self.club)
        self.assertFalse(self.user.has_minimum_role(Role.COACH))

    def test_super_admin_matches_every_club(self):
        UserRole._default_manager.create(user=self.user, role=Role.SUPER_ADMIN)
        self.assertTrue(self.user.is_super_admin())
        self.assertTrue(self.user.has_minimum_role(Role.CLUB_ADMIN, club_id=self.other_club.pk))
