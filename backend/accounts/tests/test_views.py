from rest_framework import status
from rest_framework.test import APITestCase
from django.contrib.auth import get_user_model
from django.core.cache import cache
from learning_core.tests.fixtures import make_student

User = get_user_model()


class RegisterTests(APITestCase):
    def payload(self, **overrides):
        data = {
            'email': ' Student@Example.com ', 'password': 'secret123', 'confirm_password': 'secret123',
            'first_name': 'Mona', 'second_name': 'Ali', 'system': 'center', 'year': 'year2',
        }
        data.update(overrides)
        return data

    def test_register(self):
        resp = self.client.post('/api/accounts/register/', self.payload(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        body = resp.json()
        self.assertEqual(body['username'], 'student@example.com')
        self.assertEqual(len(body['student_code']), 6)
        self.assertNotIn('password', body)
        self.assertTrue(User.objects.get(username='student@example.com').check_password('secret123'))

    def test_password_mismatch(self):
        resp = self.client.post('/api/accounts/register/', self.payload(confirm_password='other123'), format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()['confirm_password'], ["Passwords do not match!"])

    def test_duplicate_email(self):
        make_student(username='student@example.com')
        resp = self.client.post('/api/accounts/register/', self.payload(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', resp.json())


class LoginTests(APITestCase):
    def setUp(self):
        self.student = make_student()

    def login(self, device_id, password='secret123'):
        return self.client.post('/api/accounts/login/', {
            'email': 'student@example.com', 'password': password, 'device_id': device_id,
        }, format='json')

    def test_bad_password(self):
        resp = self.login('a', password='wrong')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json()['error'], 'Invalid email or password.')

    def test_token_authenticates_until_device_removed(self):
        token = self.login('phone').json()['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()['devices'], ['phone'])

        self.student.refresh_from_db()
        self.student.devices = []
        self.student.save()
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_device_limit(self):
        self.assertEqual(self.login('a').status_code, status.HTTP_200_OK)
        self.assertEqual(self.login('b').status_code, status.HTTP_200_OK)
        self.assertEqual(self.login('a').status_code, status.HTTP_200_OK)
        resp = self.login('c')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('2 devices', resp.json()['error'])

    def test_garbage_token(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)


class ThemeViewTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.owner = User.objects.create_superuser(
            username='owner@example.com', email='owner@example.com', password='secret123')

    def test_anyone_can_read(self):
        resp = self.client.get('/api/accounts/theme/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()['theme'], 'default')
        self.assertTrue(resp.json()['is_default'])

    def test_only_super_admin_changes_theme(self):
        self.client.force_authenticate(user=make_student())
        resp = self.client.put('/api/accounts/theme/', {'theme': 'halloween'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.owner)
        resp = self.client.put('/api/accounts/theme/', {'theme': 'halloween'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()['is_halloween'])

        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get('/api/accounts/theme/').json()['theme'], 'halloween')

    def test_invalid_theme(self):
        self.client.force_authenticate(user=self.owner)
        resp = self.client.put('/api/accounts/theme/', {'theme': 'neon'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class StudentAdminTests(APITestCase):
    def setUp(self):
        self.owner = User.objects.create_superuser(
            username='owner@example.com', email='owner@example.com', password='secret123')
        self.client.force_authenticate(user=self.owner)
        self.student = make_student(system='online', student_code='222333', devices=['a', 'b'])
        make_student(username='center@example.com', system='center', student_code='444555')

    def test_filter_by_system(self):
        resp = self.client.get('/api/accounts/students/', {'system': 'center'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([s['student_code'] for s in resp.json()], ['444555'])

    def test_search_by_code(self):
        resp = self.client.get('/api/accounts/students/', {'search': '222333'})
        self.assertEqual([s['username'] for s in resp.json()], ['student@example.com'])

    def test_set_system(self):
        resp = self.client.post(f'/api/accounts/students/{self.student.id}/set_system/',
                                {'system': 'school'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.student.refresh_from_db()
        self.assertEqual(self.student.system, 'school')

    def test_remove_and_clear_devices(self):
        resp = self.client.post(f'/api/accounts/students/{self.student.id}/remove_device/',
                                {'device_id': 'a'}, format='json')
        self.assertEqual(resp.json()['devices'], ['b'])

        resp = self.client.post(f'/api/accounts/students/{self.student.id}/clear_devices/')
        self.assertEqual(resp.json()['devices'], [])

    def test_students_cannot_manage(self):
        self.client.force_authenticate(user=self.student)
        resp = self.client.get('/api/accounts/students/')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
