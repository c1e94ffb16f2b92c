"""
Configuration schema for the agent and the simulator.

Defaults are defined as Pydantic field defaults. YAML files provide overrides only.
Validation constraints sit next to each field.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.shared.dicts import deep_merge_dicts

# ---------------------------------------------------------------------------
# Shared type aliases for common constraints
# ---------------------------------------------------------------------------

PositiveInt = Annotated[int, Field(gt=0)]
NonNegInt = Annotated[int, Field(ge=0)]
NonPosInt = Annotated[int, Field(le=0)]

NUM_RANKS = 5
MAX_POSITIONS = 8


# ---------------------------------------------------------------------------
# Base model: all config classes inherit this
# ---------------------------------------------------------------------------


class StrictFrozenModel(BaseModel):
    """Base for all config models: immutable, extra keys forbidden."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------


class RulesConfig(StrictFrozenModel):
    """Fixed ruleset: suits, copies per rank, tokens and hand sizes."""

    suits: list[Literal["red", "yellow", "green", "blue", "purple"]] = Field(
        default_factory=lambda: ["red", "yellow", "green", "blue", "purple"]
    )
    copies: list[PositiveInt] = Field(default_factory=lambda: [3, 2, 2, 2, 1])
    max_clues: PositiveInt = Field(default=8)
    max_strikes: PositiveInt = Field(default=3)
    hand_sizes: dict[int, PositiveInt] = Field(
        default_factory=lambda: {2: 5, 3: 5, 4: 4, 5: 4, 6: 3}
    )

    @model_validator(mode="after")
    def validate_ruleset(self) -> "RulesConfig":
        if len(self.copies) != NUM_RANKS:
            raise ValueError(f"copies must list {NUM_RANKS} ranks, got {len(self.copies)}")
        if not self.suits:
            raise ValueError("at least one suit is required")
        if len(set(self.suits)) != len(self.suits):
            raise ValueError(f"suits must be unique: {self.suits}")
        if max(self.copies) > 3:
            raise ValueError(f"at most three copies per card are tracked, got {self.copies}")
        for num_players, hand_size in self.hand_sizes.items():
            if num_players < 2:
                raise ValueError(f"hand_sizes keys must be seat counts >= 2, got {num_players}")
            if hand_size > MAX_POSITIONS:
                raise ValueError(
                    f"hand size {hand_size} for {num_players} players exceeds "
                    f"{MAX_POSITIONS} positions"
                )
        return self


class HeuristicsConfig(StrictFrozenModel):
    """
    Tuning values used when comparing candidate clues.

    None of these affect the authoritative game score; they only rank the
    positions reached by hypothetical clues.
    """

    reclue_error: NonNegInt = Field(default=1)
    minor_flag_error: NonNegInt = Field(default=1)
    flag_error: NonNegInt = Field(default=2)
    critical_flag_error: NonNegInt = Field(default=3)
    trash_focus_error: NonNegInt = Field(default=5)
    no_interpretation_error: NonNegInt = Field(default=2)

    chop_playable_risk: NonPosInt = Field(default=-2)
    chop_critical_playable_risk: NonPosInt = Field(default=-3)
    chop_critical_risk: NonPosInt = Field(default=-5)

    error_multiplier: PositiveInt = Field(default=10)
    clued_weight: NonNegInt = Field(default=2)


class SimulationConfig(StrictFrozenModel):
    """Self-play simulation configuration."""

    num_games: PositiveInt = Field(default=100)
    num_players: Annotated[int, Field(ge=2, le=6)] = Field(default=4)
    num_workers: PositiveInt = Field(default=1)
    show_progress: bool = Field(default=True)


class SystemConfig(StrictFrozenModel):
    """System-level configuration."""

    seed: int | None = Field(default=None)
    config_name: str = Field(default="default")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class Config(StrictFrozenModel):
    """
    Complete agent configuration.

    All defaults are defined here in Python. YAML files provide only overrides.
    """

    rules: RulesConfig = Field(default_factory=RulesConfig)
    heuristics: HeuristicsConfig = Field(default_factory=HeuristicsConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    @model_validator(mode="after")
    def seats_have_hand_size(self) -> "Config":
        if self.simulation.num_players not in self.rules.hand_sizes:
            raise ValueError(
                f"no hand size configured for {self.simulation.num_players} players"
            )
        return self

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize config to a plain dict (for JSON, logging, etc.)."""
        return self.model_dump()

    @classmethod
    def default(cls) -> "Config":
        """Return a Config populated with all defaults."""
        return cls()

    def merge(self, overrides: dict[str, Any]) -> "Config":
        """Return a new Config with the provided overrides merged in."""
        merged = deep_merge_dicts(self.model_dump(), overrides)
        return Config.model_validate(merged)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "Config":
        """Create Config from a dict merged over defaults."""
        merged = deep_merge_dicts(cls().model_dump(), config_dict)
        return cls.model_validate(merged)
