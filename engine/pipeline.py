from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple


@dataclass(frozen=True)
class Lot:
    quantity: float
    days_remaining: int


class StageQueue:
    """In-flight lots of one pipeline stage (Fab, Assembly or Transport)."""

    def __init__(self, name: str):
        self.name = name
        self._lots: List[Lot] = []

    def __iter__(self) -> Iterator[Lot]:
        return iter(self._lots)

    def __len__(self) -> int:
        return len(self._lots)

    @property
    def lots(self) -> Tuple[Lot, ...]:
        return tuple(self._lots)

    @property
    def wip(self) -> float:
        return sum(lot.quantity for lot in self._lots)

    def enqueue(self, quantity: float, lead_time: int) -> None:
        if quantity <= 0:
            return
        self._lots.append(Lot(quantity=quantity, days_remaining=lead_time))

    def advance(self) -> float:
        """Tick every lot by one day and drain the finished ones.

        Lots entered with a lead time of 0 finish on the next advance.
        """
        ticked = [Lot(lot.quantity, lot.days_remaining - 1) for lot in self._lots]
        finished = sum(lot.quantity for lot in ticked if lot.days_remaining <= 0)
        self._lots = [lot for lot in ticked if lot.days_remaining > 0]
        return finished


class Pipeline:
    """Fab -> Assembly -> Transport -> warehouse."""

    def __init__(
        self, lead_time_fab: int, lead_time_assembly: int, lead_time_transport: int
    ):
        self.lead_time_fab = lead_time_fab
        self.lead_time_assembly = lead_time_assembly
        self.lead_time_transport = lead_time_transport
        self.fab = StageQueue("fab")
        self.assembly = StageQueue("assembly")
        self.transport = StageQueue("transport")

    @property
    def in_flight(self) -> float:
        return self.fab.wip + self.assembly.wip + self.transport.wip

    def release(self, quantity: float) -> None:
        self.fab.enqueue(quantity, self.lead_time_fab)

    def advance(self) -> float:
        # downstream first so a lot moves at most one stage per day
        delivered = self.transport.advance()
        finished_assembly = self.assembly.advance()
        self.transport.enqueue(finished_assembly, self.lead_time_transport)
        finished_fab = self.fab.advance()
        self.assembly.enqueue(finished_fab, self.lead_time_assembly)
        if delivered or finished_assembly or finished_fab:
            logging.debug(
                f"pipeline: fab->assembly {finished_fab}, "
                f"assembly->transport {finished_assembly}, "
                f"transport->warehouse {delivered}"
            )
        return delivered
