"""Viewer state and its transitions

The state is a value: every transition returns a new ``ViewState`` and the
scene is drawn from it alone.
"""

from dataclasses import dataclass, replace

from orbitviz.utils.data import INVALID_ORBIT, BakedOrbit, OrbitTable


@dataclass(frozen=True)
class ViewState:
    time: float = 0.0  # Wall clock time shown [s]
    selected: int = 0  # Index into the orbit table
    paused: bool = False

    @property
    def idle(self) -> bool:
        return self.time == 0.0


def tick(state: ViewState, delta_millis: float) -> ViewState:
    """Advance time by one animation frame"""
    if state.paused:
        return state
    return replace(state, time=state.time + delta_millis / 1000)


def select(state: ViewState, index: int) -> ViewState:
    """Switch to another orbit, time keeps running"""
    return replace(state, selected=index)


def toggle_pause(state: ViewState) -> ViewState:
    return replace(state, paused=not state.paused)


def selected_orbit(state: ViewState, table: OrbitTable) -> BakedOrbit:
    if not table:
        return INVALID_ORBIT
    return table[min(max(state.selected, 0), len(table) - 1)]
