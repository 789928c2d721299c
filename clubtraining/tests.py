from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from clubtraining import health


class HealthCheckTestCase(TestCase):
    def test_healthy(self):
        response = self.client.get(reverse('health-check'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['database'], 'connected')

    def test_database_down(self):
        with patch.object(health, 'connection') as connection:
            connection.cursor.side_effect = DatabaseError('gone')
            response = self.client.get(reverse('health-check'))
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['status'], 'unhealthy')
