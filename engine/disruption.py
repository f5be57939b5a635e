from dataclasses import dataclass

from domain.models import NodeStatus

# fab downtime after a trigger (days, trigger day included)
DISRUPTION_DAYS = 14


@dataclass
class DisruptionState:
    status: NodeStatus = NodeStatus.NORMAL
    countdown: int = 0

    @property
    def is_disrupted(self) -> bool:
        return self.status is NodeStatus.DISRUPTED

    def step(self, triggered: bool) -> NodeStatus:
        # a trigger while already down resets the countdown, it does not stack
        if triggered:
            self.countdown = DISRUPTION_DAYS
        if self.countdown > 0:
            self.status = NodeStatus.DISRUPTED
            self.countdown -= 1
        else:
            self.status = NodeStatus.NORMAL
        return self.status
