import sys
from pathlib import Path
from typing import Any, List, Tuple

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from simmer import events  # noqa: E402
from simmer.events import EventBus  # noqa: E402
from simmer.game.catalog import IngredientCost, RecipeCatalog, RecipeDefinition  # noqa: E402
from simmer.game.clock import ManualClock, seconds_to_ticks  # noqa: E402
from simmer.persistence.models import PersistedState  # noqa: E402
from simmer.persistence.store import StateStore  # noqa: E402
from simmer.settings import Settings  # noqa: E402

# Arbitrary but realistic "now": 2024-01-01T00:00:00Z in 100 ns ticks.
EPOCH_2024 = seconds_to_ticks(1_704_067_200)


class CountingStore(StateStore):
    """StateStore that remembers every record it was asked to write."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.saved: List[dict] = []

    @property
    def writes(self) -> int:
        return len(self.saved)

    def save(self, state):
        self.saved.append(state.to_dict())
        return super().save(state)


class EventRecorder:
    """Subscribes to every core event and keeps (name, payload) pairs."""

    NAMES = (
        events.RESOURCE_CHANGED,
        events.INVENTORY_CHANGED,
        events.ACTIVITY_STARTED,
        events.ACTIVITY_TICK,
        events.ACTIVITY_FINISHED,
    )

    def __init__(self, bus: EventBus) -> None:
        self.received: List[Tuple[str, Any]] = []
        for name in self.NAMES:
            bus.subscribe(name, lambda payload, name=name: self.received.append((name, payload)))

    def of(self, name: str) -> List[Any]:
        return [p for n, p in self.received if n == name]

    def names(self) -> List[str]:
        return [n for n, _ in self.received]


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def save_path(tmp_path: Path) -> Path:
    return tmp_path / "saves" / "playerdata.json"


@pytest.fixture()
def store(save_path: Path) -> CountingStore:
    return CountingStore(save_path)


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def recorder(bus: EventBus) -> EventRecorder:
    return EventRecorder(bus)


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(EPOCH_2024)


@pytest.fixture()
def state() -> PersistedState:
    return PersistedState.fresh()


@pytest.fixture()
def omelette() -> RecipeDefinition:
    return RecipeDefinition(
        id="omelette",
        name="Omelette",
        star_count=2,
        required_time=5.0,
        ingredient_costs=(IngredientCost("egg", 3), IngredientCost("vegetable", 1)),
    )


@pytest.fixture()
def catalog(omelette: RecipeDefinition) -> RecipeCatalog:
    return RecipeCatalog([
        omelette,
        RecipeDefinition(id="rice_bowl", name="Rice Bowl", star_count=1, required_time=3.0,
                         ingredient_costs=(IngredientCost("rice", 2),)),
    ])
