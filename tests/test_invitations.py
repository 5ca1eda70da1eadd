# tests/test_invitations.py

"""Inviting people to a board and answering invitations."""

from datetime import timedelta

import pytest
from django.core import mail
from django.utils import timezone

from apps.core.models import Activity, BoardInvitation, BoardMember

pytestmark = pytest.mark.django_db


@pytest.fixture
def invite(client_for, owner, board):
    """Owner invites an email, returns the JSON response."""

    def factory(email):
        return client_for(owner).post(
            f'/api/boards/{board.pk}/invitations/', {'email': email}, content_type='application/json'
        )

    return factory


class TestCreateInvitation:

    def test_owner_invites_by_email(self, invite, board, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = invite('Guest@Example.com')

        assert response.status_code == 201
        invitation = response.json()['invitation']
        assert invitation['email'] == 'guest@example.com'
        assert invitation['status'] == 'pending'
        assert invitation['expired'] is False

        assert len(mail.outbox) == 1
        assert f"http://testserver/invite?id={invitation['id']}" in mail.outbox[0].body

    def test_invitation_expires_in_a_week(self, invite):
        invite('guest@example.com')

        invitation = BoardInvitation.objects.get(email='guest@example.com')
        remaining = invitation.expires_at - timezone.now()
        assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)

    def test_pending_invitation_is_not_duplicated(self, invite):
        invite('guest@example.com')

        assert invite('GUEST@example.com').status_code == 409

    def test_member_cannot_be_invited(self, invite, editor):
        assert invite(editor.email).status_code == 409

    def test_editor_cannot_invite(self, client_for, editor, board):
        response = client_for(editor).post(
            f'/api/boards/{board.pk}/invitations/', {'email': 'x@example.com'}, content_type='application/json'
        )

        assert response.status_code == 403

    def test_pending_list(self, client_for, owner, board, invite):
        invite('guest@example.com')

        invitations = client_for(owner).get(f'/api/boards/{board.pk}/invitations/').json()['invitations']

        assert [i['email'] for i in invitations] == ['guest@example.com']


class TestAnswerInvitation:

    @pytest.fixture
    def guest(self, make_account):
        return make_account('guest@example.com', 'Gina', 'Guest')

    @pytest.fixture
    def invitation_id(self, invite):
        return invite('guest@example.com').json()['invitation']['id']

    def test_details_are_public(self, client, invitation_id):
        response = client.get(f'/api/invitations/{invitation_id}/')

        assert response.status_code == 200
        assert response.json()['invitation']['boardName'] == 'Roadmap'

    def test_listed_for_the_invitee(self, client_for, guest, invitation_id):
        invitations = client_for(guest).get('/api/me/invitations/').json()['invitations']

        assert [i['id'] for i in invitations] == [invitation_id]

    def test_accept_joins_board(self, client_for, guest, board, invitation_id):
        response = client_for(guest).post(f'/api/invitations/{invitation_id}/accept/', content_type='application/json')

        assert response.status_code == 200
        assert response.json()['board']['role'] == 'editor'
        assert board.role_for(guest) == BoardMember.ROLE_EDITOR
        assert BoardInvitation.objects.get(pk=invitation_id).status == BoardInvitation.STATUS_ACCEPTED
        assert Activity.objects.filter(board=board, type=Activity.MEMBER_JOINED).exists()
        assert board.assignees.filter(account=guest).exists()

    def test_accept_twice_conflicts(self, client_for, guest, invitation_id):
        client = client_for(guest)
        client.post(f'/api/invitations/{invitation_id}/accept/', content_type='application/json')

        response = client.post(f'/api/invitations/{invitation_id}/accept/', content_type='application/json')

        assert response.status_code == 409

    def test_other_account_cannot_accept(self, client_for, outsider, invitation_id):
        response = client_for(outsider).post(
            f'/api/invitations/{invitation_id}/accept/', content_type='application/json'
        )

        assert response.status_code == 403

    def test_expired_invitation(self, client_for, guest, invitation_id):
        BoardInvitation.objects.filter(pk=invitation_id).update(expires_at=timezone.now() - timedelta(minutes=1))

        response = client_for(guest).post(f'/api/invitations/{invitation_id}/accept/', content_type='application/json')

        assert response.status_code == 409
        assert client_for(guest).get('/api/me/invitations/').json()['invitations'] == []

    def test_decline(self, client_for, guest, board, invitation_id):
        response = client_for(guest).post(
            f'/api/invitations/{invitation_id}/decline/', content_type='application/json'
        )

        assert response.json()['invitation']['status'] == 'declined'
        assert board.role_for(guest) is None

    def test_owner_cancels(self, client_for, owner, invitation_id):
        assert client_for(owner).delete(f'/api/invitations/{invitation_id}/').status_code == 204
        assert not BoardInvitation.objects.filter(pk=invitation_id).exists()

    def test_editor_cannot_cancel_owners_invitation(self, client_for, editor, invitation_id):
        assert client_for(editor).delete(f'/api/invitations/{invitation_id}/').status_code == 403

    def test_unknown_invitation(self, client):
        assert client.get('/api/invitations/zzzz-zzzz/').status_code == 404
