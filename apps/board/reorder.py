# apps/board/reorder.py

"""
Reorder coordinator

Turns a drag-and-drop gesture (item, target container, sibling before the drop
point) into a persisted placement. Container and position are written by a
single UPDATE inside one transaction.

Every container keeps a `revision` counter. A move reads it before computing
neighbours and finishes with a compare-and-swap on it, so two reorders that
raced on the same container cannot both win.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from django.db import transaction
from django.db.models import F, Max
from django.utils import timezone

from apps.core.exceptions import Conflict, NotFound
from apps.core.models import Board, Column, Item

from .ordering import (
    InvalidNeighbors,
    PrecisionExhausted,
    append_position,
    evenly_spaced,
    position_for_index,
)

logger = logging.getLogger(__name__)

# Drop-point marker for "after the last sibling"
END = 'end'


class StaleOrder(Conflict):
    """The container changed since the client (or this request) read it"""

    default_message = 'The board changed in the meantime, please refresh'


@dataclass(frozen=True)
class OrderingScope:
    """Describes one kind of orderable thing and its container"""

    model: type
    container_model: type
    container_field: str
    label: str
    accepts: Callable = lambda item, container: True
    touch: Callable = dict

    @property
    def container_attname(self):
        return f"{self.container_field}_id"

    def siblings(self, container_id):
        return self.model.objects.filter(**{self.container_attname: container_id}).order_by('position', 'pk')


def _touch_card():
    now = timezone.now()
    return {'updated_at': now, 'last_active_at': now}


# Cards live in columns and may only move between columns of their own board
CARD_SCOPE = OrderingScope(
    model=Item,
    container_model=Column,
    container_field='column',
    label='card',
    accepts=lambda item, column: column.board_id == item.board_id,
    touch=_touch_card,
)

# Columns live in boards and never leave them
COLUMN_SCOPE = OrderingScope(
    model=Column,
    container_model=Board,
    container_field='board',
    label='column',
    accepts=lambda column, board: column.board_id == board.pk,
)


@dataclass
class Placement:
    """Where an item ended up after a move"""

    item_id: str
    container_id: str
    position: float
    revision: int
    previous_container_id: str
    rebalanced: bool = False

    @property
    def changed_container(self):
        return self.container_id != self.previous_container_id


class ReorderCoordinator:
    """Moves, appends and renumbers items of one ordering scope"""

    def __init__(self, scope: OrderingScope):
        self.scope = scope

    # === APPEND ===

    def next_position(self, container_id) -> float:
        """Position for a new last item: max(existing) + 1, or 0"""
        last = self.scope.siblings(container_id).aggregate(last=Max('position'))['last']
        return append_position(last)

    def bump_revision(self, container_id):
        return self.scope.container_model.objects.filter(pk=container_id).update(
            revision=F('revision') + 1
        )

    # === MOVE ===

    def move(
        self,
        item_id,
        target_container_id,
        after_sibling_id: Optional[str] = None,
        current_container_id: Optional[str] = None,
        expected_revision: Optional[int] = None,
    ) -> Placement:
        """
        Moves an item into `target_container_id` right after `after_sibling_id`

        after_sibling_id None drops at the start, END drops at the end.
        Raises NotFound when the item, the container or the sibling is gone and
        StaleOrder when the container revision moved under us.
        """
        scope = self.scope

        with transaction.atomic():
            container = self._get_container(target_container_id)
            seen_revision = container.revision
            if expected_revision is not None and expected_revision != seen_revision:
                raise StaleOrder(details={'revision': seen_revision})

            item = self._get_item(item_id)
            source_id = getattr(item, scope.container_attname)
            if current_container_id is not None and current_container_id != source_id:
                raise StaleOrder(details={'containerId': source_id})
            if not scope.accepts(item, container):
                raise NotFound(f"{scope.container_model.__name__} not found")

            if after_sibling_id == item.pk:
                if source_id != container.pk:
                    raise NotFound(f"Sibling {after_sibling_id} not found")
                return Placement(item.pk, container.pk, item.position, seen_revision, source_id)

            siblings = list(
                scope.siblings(container.pk).exclude(pk=item.pk).values_list('pk', 'position')
            )
            index = self._drop_index(siblings, after_sibling_id)

            rebalanced = False
            try:
                position = position_for_index([pos for _, pos in siblings], index)
            except (PrecisionExhausted, InvalidNeighbors) as exc:
                logger.warning(
                    f"⚖️ Rebalancing {scope.label}s of {container.pk} before move of {item.pk}: {exc}"
                )
                positions = self._renumber([pk for pk, _ in siblings])
                position = position_for_index(positions, index)
                rebalanced = True

            # Compare-and-swap on the container revision
            updated = scope.container_model.objects.filter(
                pk=container.pk, revision=seen_revision
            ).update(revision=F('revision') + 1)
            if not updated:
                raise StaleOrder()

            fields = {scope.container_attname: container.pk, 'position': position}
            fields.update(scope.touch())
            updated = scope.model.objects.filter(
                pk=item.pk, **{scope.container_attname: source_id}
            ).update(**fields)
            if not updated:
                raise StaleOrder()

            if source_id != container.pk:
                self.bump_revision(source_id)

        logger.info(
            f"🔀 {scope.label} {item.pk} -> {container.pk} @ {position} (rev {seen_revision + 1})"
        )
        return Placement(
            item_id=item.pk,
            container_id=container.pk,
            position=position,
            revision=seen_revision + 1,
            previous_container_id=source_id,
            rebalanced=rebalanced,
        )

    # === REBALANCE ===

    def rebalance(self, container_id) -> int:
        """Renumbers every item of a container to 0, 1, 2, ... in current order"""
        with transaction.atomic():
            self._get_container(container_id)
            pks = list(self.scope.siblings(container_id).values_list('pk', flat=True))
            self._renumber(pks)
            self.bump_revision(container_id)

        logger.info(f"⚖️ Rebalanced {len(pks)} {self.scope.label}s of {container_id}")
        return len(pks)

    # === HELPERS ===

    def _get_container(self, container_id):
        model = self.scope.container_model
        try:
            return model.objects.get(pk=container_id)
        except model.DoesNotExist:
            raise NotFound(f"{model.__name__} not found")

    def _get_item(self, item_id):
        model = self.scope.model
        try:
            return model.objects.get(pk=item_id)
        except model.DoesNotExist:
            raise NotFound(f"{self.scope.label.capitalize()} not found")

    @staticmethod
    def _drop_index(siblings, after_sibling_id):
        if after_sibling_id is None:
            return 0
        if after_sibling_id == END:
            return len(siblings)
        for index, (pk, _) in enumerate(siblings):
            if pk == after_sibling_id:
                return index + 1
        raise NotFound(f"Sibling {after_sibling_id} not found")

    def _renumber(self, pks):
        positions = evenly_spaced(len(pks))
        for pk, position in zip(pks, positions):
            self.scope.model.objects.filter(pk=pk).update(position=position)
        return positions


cards = ReorderCoordinator(CARD_SCOPE)
columns = ReorderCoordinator(COLUMN_SCOPE)
