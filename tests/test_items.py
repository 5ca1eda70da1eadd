# tests/test_items.py

"""Cards: creation, edits, drag-and-drop, assignees and search."""

import pytest

from apps.core.models import Activity, Assignee, Column, Item

pytestmark = pytest.mark.django_db


class TestCreateItem:

    def test_new_cards_append_to_column(self, client_for, editor, board, columns):
        client = client_for(editor)
        column = columns['May be?']

        created = [
            client.post(
                f'/api/boards/{board.pk}/items/',
                {'columnId': column.pk, 'title': title},
                content_type='application/json',
            )
            for title in ('one', 'two')
        ]

        assert [response.status_code for response in created] == [201, 201]
        assert [response.json()['item']['position'] for response in created] == [0.0, 1.0]
        assert Column.objects.get(pk=column.pk).revision == 2
        assert Activity.objects.filter(board=board, type=Activity.ITEM_CREATED).count() == 2

    def test_column_is_required(self, client_for, owner, board):
        response = client_for(owner).post(
            f'/api/boards/{board.pk}/items/', {'title': 'Orphan'}, content_type='application/json'
        )

        assert response.status_code == 400
        assert 'column_id' in response.json()['details']

    def test_oversized_column_id(self, client_for, owner, board):
        response = client_for(owner).post(
            f'/api/boards/{board.pk}/items/',
            {'columnId': 'x' * 40, 'title': 'Lost'},
            content_type='application/json',
        )

        assert response.status_code == 400
        assert 'column_id' in response.json()['details']

    def test_column_of_another_board(self, client_for, owner, board):
        other = client_for(owner).post('/api/boards/', {'name': 'Other'}, content_type='application/json')
        foreign = Column.objects.filter(board_id=other.json()['board']['id']).first()

        response = client_for(owner).post(
            f'/api/boards/{board.pk}/items/',
            {'columnId': foreign.pk, 'title': 'Lost'},
            content_type='application/json',
        )

        assert response.status_code == 404

    def test_outsider_cannot_add(self, client_for, outsider, board, columns):
        response = client_for(outsider).post(
            f'/api/boards/{board.pk}/items/',
            {'columnId': columns['Done'].pk, 'title': 'Sneaky'},
            content_type='application/json',
        )

        assert response.status_code == 404


class TestUpdateItem:

    def test_title_and_content_are_logged(self, client_for, editor, columns, make_item):
        item = make_item(columns['Done'], 'Old title')

        response = client_for(editor).patch(
            f'/api/items/{item.pk}/',
            {'title': 'New title', 'content': 'Some details'},
            content_type='application/json',
        )

        assert response.status_code == 200
        contents = set(item.activities.values_list('content', flat=True))
        assert 'Title changed to "New title"' in contents
        assert 'Description updated' in contents

    def test_unchanged_update_writes_nothing(self, client_for, editor, columns, make_item):
        item = make_item(columns['Done'], 'Same')
        before = item.activities.count()

        client_for(editor).patch(f'/api/items/{item.pk}/', {'title': 'Same'}, content_type='application/json')

        assert item.activities.count() == before

    def test_detail_includes_comments_and_activity(self, client_for, editor, columns, make_item):
        item = make_item(columns['Done'], 'Card')

        body = client_for(editor).get(f'/api/items/{item.pk}/').json()

        assert body['item']['id'] == item.pk
        assert body['column']['name'] == 'Done'
        assert body['comments'] == []
        assert body['activity'][0]['type'] == Activity.ITEM_CREATED

    def test_outsider_gets_not_found(self, client_for, outsider, columns, make_item):
        item = make_item(columns['Done'], 'Card')

        assert client_for(outsider).get(f'/api/items/{item.pk}/').status_code == 404


class TestMoveItem:
    """POST /api/items/<id>/move/"""

    def test_move_to_end_of_other_column(self, client_for, editor, columns, make_item):
        source, target = columns['Not Now'], columns['Done']
        make_item(target, 'existing')
        item = make_item(source, 'moving')

        response = client_for(editor).post(
            f'/api/items/{item.pk}/move/',
            {'currentContainerId': source.pk, 'targetContainerId': target.pk, 'afterSiblingId': 'end'},
            content_type='application/json',
        )

        assert response.status_code == 200
        moved = response.json()['item']
        assert moved['columnId'] == target.pk
        assert moved['position'] == 1.0
        assert moved['previousContainerId'] == source.pk
        assert moved['revision'] == Column.objects.get(pk=target.pk).revision

        activity = item.activities.get(type=Activity.ITEM_MOVED)
        assert activity.content == 'Moved from "Not Now" to "Done"'

    def test_null_sibling_drops_at_top(self, client_for, editor, columns, make_item):
        column = columns['May be?']
        make_item(column, 'a')
        item = make_item(column, 'b')

        response = client_for(editor).post(
            f'/api/items/{item.pk}/move/',
            {'targetContainerId': column.pk, 'afterSiblingId': None},
            content_type='application/json',
        )

        assert response.json()['item']['position'] == -1.0
        assert not Activity.objects.filter(item=item, type=Activity.ITEM_MOVED).exists()

    def test_stale_revision_conflicts(self, client_for, editor, columns, make_item):
        target = columns['Done']
        item = make_item(columns['Not Now'], 'moving')

        response = client_for(editor).post(
            f'/api/items/{item.pk}/move/',
            {'targetContainerId': target.pk, 'expectedRevision': target.revision + 3},
            content_type='application/json',
        )

        assert response.status_code == 409
        assert response.json()['details'] == {'revision': target.revision}
        assert Item.objects.get(pk=item.pk).column_id == columns['Not Now'].pk

    def test_target_is_required(self, client_for, editor, columns, make_item):
        item = make_item(columns['Not Now'], 'moving')

        response = client_for(editor).post(f'/api/items/{item.pk}/move/', {}, content_type='application/json')

        assert response.status_code == 400

    def test_unknown_sibling(self, client_for, editor, columns, make_item):
        item = make_item(columns['Not Now'], 'moving')

        response = client_for(editor).post(
            f'/api/items/{item.pk}/move/',
            {'targetContainerId': columns['Done'].pk, 'afterSiblingId': 'zzzz-zzzz'},
            content_type='application/json',
        )

        assert response.status_code == 404


class TestDeleteItem:

    def test_editor_deletes_own_card(self, client_for, editor, columns, make_item):
        item = make_item(columns['Done'], 'Mine', user=editor)

        assert client_for(editor).delete(f'/api/items/{item.pk}/').status_code == 204
        assert not Item.objects.filter(pk=item.pk).exists()
        assert Activity.objects.filter(type=Activity.ITEM_DELETED, content='Deleted "Mine"').exists()

    def test_editor_cannot_delete_others_card(self, client_for, editor, columns, make_item):
        item = make_item(columns['Done'], 'Owner card')

        assert client_for(editor).delete(f'/api/items/{item.pk}/').status_code == 403

    def test_owner_deletes_any_card(self, client_for, owner, editor, columns, make_item):
        item = make_item(columns['Done'], 'Editor card', user=editor)

        assert client_for(owner).delete(f'/api/items/{item.pk}/').status_code == 204


class TestAssignees:

    def test_members_are_listed_as_assignees(self, client_for, editor, board):
        assignees = client_for(editor).get(f'/api/boards/{board.pk}/assignees/').json()['assignees']

        assert sorted(a['name'] for a in assignees) == ['Eddie Editor', 'Olivia Owner']

    def test_create_free_standing_assignee_once(self, client_for, editor, board):
        client = client_for(editor)
        url = f'/api/boards/{board.pk}/assignees/'

        first = client.post(url, {'name': 'Contractor'}, content_type='application/json')
        again = client.post(url, {'name': 'contractor '}, content_type='application/json')

        assert first.status_code == 201
        assert again.status_code == 200
        assert again.json()['created'] is False
        assert again.json()['assignee']['id'] == first.json()['assignee']['id']

    def test_assign_and_clear(self, client_for, editor, board, columns, make_item):
        item = make_item(columns['Done'], 'Card')
        assignee = Assignee.objects.get(board=board, account=editor)
        client = client_for(editor)

        response = client.put(
            f'/api/items/{item.pk}/assignee/', {'assigneeId': assignee.pk}, content_type='application/json'
        )
        assert response.json()['item']['assignee']['id'] == assignee.pk

        assigned = client.get('/api/me/assigned/').json()['items']
        assert [(i['id'], i['boardName'], i['columnName']) for i in assigned] == [(item.pk, 'Roadmap', 'Done')]

        response = client.put(f'/api/items/{item.pk}/assignee/', {'assigneeId': None}, content_type='application/json')
        assert response.json()['item']['assignee'] is None

        contents = list(item.activities.order_by('created_at', 'pk').values_list('content', flat=True))
        assert 'Assigned to Eddie Editor' in contents
        assert 'Assignee removed' in contents

    def test_assignee_of_another_board(self, client_for, owner, columns, make_item):
        item = make_item(columns['Done'], 'Card')
        client = client_for(owner)
        other = client.post('/api/boards/', {'name': 'Other'}, content_type='application/json')
        foreign = Assignee.objects.get(board_id=other.json()['board']['id'])

        response = client.put(
            f'/api/items/{item.pk}/assignee/', {'assigneeId': foreign.pk}, content_type='application/json'
        )

        assert response.status_code == 404


class TestSearch:

    def test_matches_title_and_content(self, client_for, editor, board, columns, make_item):
        make_item(columns['Done'], 'Fix login redirect')
        other = make_item(columns['Done'], 'Polish')
        Item.objects.filter(pk=other.pk).update(content='the LOGIN page needs love')
        make_item(columns['Done'], 'Unrelated')

        found = client_for(editor).get(f'/api/boards/{board.pk}/search/', {'q': 'login'}).json()['items']

        assert sorted(item['title'] for item in found) == ['Fix login redirect', 'Polish']

    def test_query_is_required(self, client_for, editor, board):
        assert client_for(editor).get(f'/api/boards/{board.pk}/search/').status_code == 400
