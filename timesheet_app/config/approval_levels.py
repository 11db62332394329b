"""
Approval Level Configuration
Ordered approval stages a timesheet passes through before final approval
"""

from typing import Iterator, List, NamedTuple, Optional, Sequence


FINAL_STATUS = "approved_final"
REJECTED_STATUS = "rejected"
DRAFT_STATUS = "draft"


class ApprovalLevelConfig(NamedTuple):
    """One approval stage"""
    key: str
    display: str
    role: str
    status: str
    # Only approvers whose team the employee belongs to may act
    team_scoped: bool = False


class ApprovalLevelRegistry:
    """
    Fixed, ordered list of approval levels

    The first level is the initial required approver. Once the last level
    approves, the timesheet moves to the final status, which has no level.
    """

    def __init__(self, levels: Sequence[ApprovalLevelConfig], final_status: str = FINAL_STATUS):
        levels = tuple(levels)
        if not levels:
            raise ValueError("At least one approval level is required")

        keys = [level.key for level in levels]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Approval level keys must be unique: {keys}")

        statuses = [level.status for level in levels]
        if len(set(statuses)) != len(statuses):
            raise ValueError(f"Approval level statuses must be unique: {statuses}")

        if final_status in statuses:
            raise ValueError(f"Final status '{final_status}' cannot belong to a level")

        self._levels = levels
        self.final_status = final_status

    def __iter__(self) -> Iterator[ApprovalLevelConfig]:
        return iter(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    @property
    def levels(self) -> List[ApprovalLevelConfig]:
        return list(self._levels)

    @property
    def last_index(self) -> int:
        return len(self._levels) - 1

    def level_at(self, index: int) -> Optional[ApprovalLevelConfig]:
        """Level descriptor at index, or None when past the last level"""
        if 0 <= index < len(self._levels):
            return self._levels[index]
        return None

    def next_status(self, current_level_index: int) -> str:
        """
        Status a timesheet moves to after approval at the given level

        Args:
            current_level_index: Index of the level that just approved

        Returns:
            str: Pending-status of the following level, or the final status

        Raises:
            IndexError: If the index does not name a level
        """
        if not 0 <= current_level_index < len(self._levels):
            raise IndexError(f"No approval level at index {current_level_index}")

        following = self.level_at(current_level_index + 1)
        if following is None:
            return self.final_status
        return following.status

    def index_for_status(self, status: Optional[str]) -> Optional[int]:
        """Index of the level whose pending-status is given"""
        for index, level in enumerate(self._levels):
            if level.status == status:
                return index
        return None

    def level_for_status(self, status: Optional[str]) -> Optional[ApprovalLevelConfig]:
        index = self.index_for_status(status)
        return None if index is None else self._levels[index]

    def role_for(self, status: Optional[str]) -> Optional[str]:
        """Role authorized to decide at the given pending-status"""
        level = self.level_for_status(status)
        return level.role if level else None

    def level_for_role(self, role: Optional[str]) -> Optional[ApprovalLevelConfig]:
        for level in self._levels:
            if level.role == role:
                return level
        return None

    def initial_status(self) -> str:
        return self._levels[0].status

    def is_terminal(self, status: Optional[str]) -> bool:
        return status in (self.final_status, REJECTED_STATUS)

    def as_dicts(self) -> List[dict]:
        return [
            {"order": index, **level._asdict()}
            for index, level in enumerate(self._levels)
        ]


# Order matters: first is the initial approver level
APPROVAL_LEVELS = ApprovalLevelRegistry([
    ApprovalLevelConfig(key="manager", display="Manager", role="manager", status="pending_manager",
                        team_scoped=True),
    ApprovalLevelConfig(key="hr", display="HR", role="hr", status="pending_hr"),
    ApprovalLevelConfig(key="director", display="Director", role="director", status="pending_director"),
])
