from typing import ContextManager, Protocol


class SlotLocks(Protocol):
    """Mutual exclusion over a doctor's schedule.

    ``hold(doctor_id)`` must cover everything from reading availability to
    persisting the appointment. Locks for different doctors are independent.
    """

    def hold(self, doctor_id: int) -> ContextManager[None]:
        ...
