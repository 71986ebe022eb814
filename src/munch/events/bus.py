from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c), combo=bool
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c), reason=str
EVENT_TILE_SWAP_DO = "tile_swap_do"                # payload: src=(r,c), dst=(r,c), combo=bool
EVENT_TILE_SWAP_FINALIZE = "tile_swap_finalize"    # payload: src=(r,c), dst=(r,c), combo=bool


# ============================================================================
# MATCHES & SPECIALS
# ============================================================================
EVENT_COMBO_TRIGGERED = "combo_triggered"          # payload: src=(r,c), dst=(r,c), kinds=(SpecialKind, SpecialKind)
EVENT_MATCH_FOUND = "match_found"                  # payload: groups=[MatchGroup,...], positions=[(r,c),...], size=int, reason=str
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], colors=[(r,c,color),...], reason=str
EVENT_SPECIAL_CREATED = "special_created"          # payload: position=(r,c), kind=SpecialKind
EVENT_SPECIAL_TRIGGERED = "special_triggered"      # payload: position=(r,c), kind=SpecialKind


# ============================================================================
# GRAVITY & CASCADE
# ============================================================================
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[GravityMove,...], cascades=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...], reason=str
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=list/positions


# ============================================================================
# BOARD & SESSION
# ============================================================================
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str
EVENT_BOARD_STABLE = "board_stable"                # payload: board=Board, score=int
EVENT_BUSY_CHANGED = "busy_changed"                # payload: busy=bool
EVENT_SCORE_CHANGED = "score_changed"              # payload: delta=int, total=int, reason=str
EVENT_NEW_GAME = "new_game"                        # payload: board=Board
