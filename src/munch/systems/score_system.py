from esper import World

from munch.components.score import Score
from munch.events.bus import EventBus, EVENT_MATCH_CLEARED, EVENT_NEW_GAME, EVENT_SCORE_CHANGED


class ScoreSystem:
    """Turns cleared cells into points.

    Every EVENT_MATCH_CLEARED is one resolution step; its delta is the number
    of cleared cells times the per-tile value.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_MATCH_CLEARED, self.on_match_cleared)
        self.event_bus.subscribe(EVENT_NEW_GAME, self.on_new_game)

    def _score(self) -> Score:
        for _, score in self.world.get_component(Score):
            return score
        score = Score()
        self.world.create_entity(score)
        return score

    @property
    def value(self) -> int:
        return self._score().value

    def on_match_cleared(self, sender, **payload):
        positions = payload.get('positions') or []
        if not positions:
            return
        score = self._score()
        delta = len(positions) * score.per_tile
        score.value += delta
        self.event_bus.emit(
            EVENT_SCORE_CHANGED,
            delta=delta,
            total=score.value,
            reason=payload.get('reason', 'match'),
        )

    def on_new_game(self, sender, **payload):
        self._score().value = 0
