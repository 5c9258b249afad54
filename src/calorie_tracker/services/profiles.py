"""Profile and goal management."""

import logging
from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.errors import InvalidGoal
from calorie_tracker.domain.profile import DerivedEnergy, Goal, Profile
from calorie_tracker.services.data_access import data_access
from calorie_tracker.services.energy import derive_energy

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for profiles and goals."""

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the stored profile, if any."""

    def save_profile(
        self, user_id: str, profile: Profile, energy: DerivedEnergy
    ) -> None:
        """Store the profile together with its derived energy figures."""

    def get_goal(self, user_id: str) -> Goal | None:
        """Return the stored goal, if any."""

    def save_goal(self, user_id: str, goal: Goal) -> None:
        """Store the goal, replacing any previous one."""


@dataclass
class ProfileService:
    """Service for saving validated profiles and goals."""

    repository: ProfileRepository

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the user's profile."""
        with data_access("fetch profile"):
            return self.repository.get_profile(user_id)

    def save_profile(self, user_id: str, profile: Profile) -> DerivedEnergy:
        """Validate and persist a profile, returning its BMR and TDEE."""
        energy = derive_energy(profile)
        with data_access("save profile"):
            self.repository.save_profile(user_id, profile, energy)
        _logger.info(
            "Profile saved: user=%s bmr=%.0f tdee=%.0f",
            user_id,
            energy.bmr,
            energy.tdee,
        )
        return energy

    def get_goal(self, user_id: str) -> Goal | None:
        """Return the user's goal."""
        with data_access("fetch goal"):
            return self.repository.get_goal(user_id)

    def save_goal(self, user_id: str, goal: Goal) -> Goal:
        """Validate a goal against the current profile and persist it."""
        if goal.daily_deficit_goal is None or goal.daily_deficit_goal <= 0:
            raise InvalidGoal(
                "Daily deficit goal must be positive", field="daily_deficit_goal"
            )
        if goal.target_weight_lbs is None or goal.target_weight_lbs <= 0:
            raise InvalidGoal(
                "Target weight must be positive", field="target_weight_lbs"
            )
        profile = self.get_profile(user_id)
        if profile is None:
            raise InvalidGoal("Save your profile before setting a goal")
        if goal.target_weight_lbs >= profile.weight_lbs:
            raise InvalidGoal(
                "Target weight must be below your current weight",
                field="target_weight_lbs",
            )
        with data_access("save goal"):
            self.repository.save_goal(user_id, goal)
        return goal
