"""Supabase repository for profiles and goals."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calorie_tracker.domain.profile import DerivedEnergy, Gender, Goal, Profile
from calorie_tracker.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profiles and goals tables."""

    client: Client

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select("weight_lbs, height_inches, age, gender, activity_multiplier")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Profile(
            weight_lbs=float(row["weight_lbs"]),
            height_inches=float(row["height_inches"]),
            age=int(row["age"]),
            gender=Gender(row.get("gender") or Gender.MALE.value),
            activity_multiplier=float(row.get("activity_multiplier") or 1.2),
        )

    def save_profile(
        self, user_id: str, profile: Profile, energy: DerivedEnergy
    ) -> None:
        """Upsert the profile with its derived energy figures."""
        self.client.table("profiles").upsert(
            {
                "user_id": user_id,
                "weight_lbs": profile.weight_lbs,
                "height_inches": profile.height_inches,
                "age": profile.age,
                "gender": profile.gender.value,
                "activity_multiplier": profile.activity_multiplier,
                "bmr": round(energy.bmr),
                "tdee": round(energy.tdee),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()

    def get_goal(self, user_id: str) -> Goal | None:
        """Return the stored goal for a user."""
        response = (
            self.client.table("goals")
            .select("target_weight_lbs, daily_deficit_goal")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Goal(
            target_weight_lbs=float(row["target_weight_lbs"]),
            daily_deficit_goal=int(row["daily_deficit_goal"]),
        )

    def save_goal(self, user_id: str, goal: Goal) -> None:
        """Replace the user's goal."""
        self.client.table("goals").upsert(
            {
                "user_id": user_id,
                "target_weight_lbs": goal.target_weight_lbs,
                "daily_deficit_goal": goal.daily_deficit_goal,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
