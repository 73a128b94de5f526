"""City runtime state: the resident registry and its couriers."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from gridtown.sim.city import CityGrid
from gridtown.sim.config import SimConfig
from gridtown.sim.contracts import LogEntry
from gridtown.sim.courier import Courier, build_courier
from gridtown.sim.pathfinding import Router
from gridtown.sim.resident import Resident, build_resident

logger = logging.getLogger("gridtown.sim.world_state")


class PopulationError(ValueError):
    """The city cannot support any residents."""


@dataclass
class CityState:
    grid: CityGrid
    router: Router
    residents: dict[int, Resident] = field(default_factory=dict)
    couriers: list[Courier] = field(default_factory=list)

    def add_resident(self, resident: Resident) -> None:
        if resident.resident_id in self.residents:
            raise ValueError(f"Duplicate resident id {resident.resident_id}.")
        self.residents[resident.resident_id] = resident

    def append_event(self, resident_id: int, entry: LogEntry) -> None:
        self.residents[resident_id].log.append(entry)


def build_population(
    grid: CityGrid, *, rng: random.Random, config: SimConfig | None = None
) -> CityState:
    config = config or SimConfig()
    residences = grid.residences
    workplaces = grid.workplaces
    if not residences or not workplaces:
        raise PopulationError("Not enough buildings — please generate a new city.")

    pool = list(residences)
    if len(pool) > config.max_residents:
        rng.shuffle(pool)
        pool = pool[: config.max_residents]

    leisure_sites = grid.leisure_sites
    eateries = grid.eateries
    state = CityState(grid=grid, router=Router(grid))
    for resident_id, home in enumerate(pool):
        state.add_resident(
            build_resident(
                resident_id,
                home=home,
                workplace=rng.choice(workplaces),
                leisure_site=rng.choice(leisure_sites) if leisure_sites else None,
                eatery=rng.choice(eateries) if eateries else None,
                rng=rng,
                delivery_distance=config.delivery_distance,
            )
        )

    for resident in state.residents.values():
        if resident.schedule.orders_delivery:
            state.couriers.append(
                build_courier(
                    resident,
                    router=state.router,
                    sim_hours_per_second=config.sim_hours_per_second,
                    rng=rng,
                )
            )

    logger.info(
        "[POP] Created %d residents and %d couriers",
        len(state.residents),
        len(state.couriers),
    )
    return state
