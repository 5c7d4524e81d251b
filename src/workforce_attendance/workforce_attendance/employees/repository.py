from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Employee


class RosterProvider(Protocol):
    """Roster collaborator interface.

    Note: services depend on this interface, not on a concrete store.
    """

    def list_active_employees(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError


class StaticRoster(RosterProvider):
    """Roster backed by a fixed list, kept in the given order."""

    def __init__(self, employees: Iterable[Employee] = ()):
        self._employees = list(employees)

    def list_active_employees(self) -> Sequence[Employee]:
        return [e for e in self._employees if e.is_active]

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        for e in self._employees:
            if e.employee_id == employee_id:
                return e
        return None
