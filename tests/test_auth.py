# tests/test_auth.py

"""Sign-up, login, logout and the current user endpoints."""

import pytest
from django.core import mail

from apps.core.models import Account

pytestmark = pytest.mark.django_db


class TestSignup:

    def test_signup_creates_account_and_logs_in(self, client):
        response = client.post(
            '/api/auth/signup/',
            {'email': 'New.Person@Example.com', 'password': 'long-enough-pw', 'firstName': 'New'},
            content_type='application/json',
        )

        assert response.status_code == 201
        body = response.json()
        assert body['account']['email'] == 'new.person@example.com'
        assert body['account']['firstName'] == 'New'
        assert client.get('/api/me/').status_code == 200

    def test_signup_sends_welcome_email_after_commit(self, client, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            client.post(
                '/api/auth/signup/',
                {'email': 'welcome@example.com', 'password': 'long-enough-pw'},
                content_type='application/json',
            )

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['welcome@example.com']
        assert mail.outbox[0].subject == 'Welcome to Groove Board'

    def test_duplicate_email_conflicts(self, client, owner):
        response = client.post(
            '/api/auth/signup/',
            {'email': 'OWNER@example.com', 'password': 'long-enough-pw'},
            content_type='application/json',
        )

        assert response.status_code == 409
        assert Account.objects.filter(email__iexact='owner@example.com').count() == 1

    def test_short_password_is_rejected(self, client):
        response = client.post(
            '/api/auth/signup/',
            {'email': 'short@example.com', 'password': 'short'},
            content_type='application/json',
        )

        assert response.status_code == 400
        assert 'password' in response.json()['details']

    def test_invalid_json_body(self, client):
        response = client.post('/api/auth/signup/', 'not json', content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'] == 'Invalid JSON body'


class TestLogin:

    def test_login_with_valid_credentials(self, client, owner, password):
        response = client.post(
            '/api/auth/login/',
            {'email': 'Owner@Example.com', 'password': password},
            content_type='application/json',
        )

        assert response.status_code == 200
        assert response.json()['message'] == 'Welcome, Olivia Owner!'
        assert client.get('/api/me/').json()['account']['id'] == owner.pk

    def test_login_with_wrong_password(self, client, owner):
        response = client.post(
            '/api/auth/login/',
            {'email': owner.email, 'password': 'wrong-password'},
            content_type='application/json',
        )

        assert response.status_code == 401
        assert client.get('/api/me/').status_code == 401

    def test_logout(self, client, owner):
        client.force_login(owner)

        assert client.post('/api/auth/logout/', content_type='application/json').status_code == 204
        assert client.get('/api/me/').status_code == 401

    def test_wrong_method(self, client):
        assert client.get('/api/auth/login/').status_code == 405


class TestProfile:

    def test_profile_stats(self, client_for, owner, board):
        response = client_for(owner).get('/api/me/profile/')

        assert response.status_code == 200
        assert response.json()['stats'] == {'assignedItems': 0, 'createdItems': 0, 'boards': 1}

    def test_profile_update_only_touches_sent_fields(self, client_for, owner):
        response = client_for(owner).patch(
            '/api/me/profile/', {'firstName': 'Liv'}, content_type='application/json'
        )

        assert response.status_code == 200
        owner.refresh_from_db()
        assert owner.first_name == 'Liv'
        assert owner.last_name == 'Owner'


class TestHealth:

    def test_health_is_public(self, client):
        response = client.get('/health/')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'
