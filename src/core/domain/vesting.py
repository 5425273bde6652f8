"""
VestingSchedule — Модель графика вестинга актора

Immutable Pydantic модели:
- VestingSchedule: start / initial_allotment / total_sold
- VestingInfo: read-only представление с текущим доступным объёмом

Все изменения графика создают новый экземпляр (model_copy(update=...)).
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class VestingStatus(str, Enum):
    """
    Статус вестинга актора.

    NO_SCHEDULE и COMPLETE не ограничивают продажи; ACTIVE ограничивает
    продажу значением sellable.
    """

    NO_SCHEDULE = "NO_SCHEDULE"
    ACTIVE = "ACTIVE"
    COMPLETE = "COMPLETE"


# =============================================================================
# MODELS
# =============================================================================


class VestingSchedule(BaseModel):
    """
    График вестинга одного актора.

    initial_allotment == 0 означает "графика нет"; start = 0 допустим.
    """

    start: int = Field(..., ge=0, description="Начало вестинга (unix seconds)")
    initial_allotment: int = Field(..., ge=0, description="Суммарно куплено в окне вестинга")
    total_sold: int = Field(default=0, ge=0, description="Суммарно продано по графику")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_sold_within_allotment(self) -> "VestingSchedule":
        """total_sold ≤ initial_allotment."""
        if self.total_sold > self.initial_allotment:
            raise ValueError(
                f"total_sold {self.total_sold} exceeds initial_allotment {self.initial_allotment}"
            )
        return self

    @property
    def exists(self) -> bool:
        return self.initial_allotment > 0

    @property
    def remaining(self) -> int:
        return self.initial_allotment - self.total_sold


class VestingInfo(BaseModel):
    """Read-only представление вестинга актора на момент `now`."""

    actor: str = Field(..., min_length=1)
    status: VestingStatus
    start: int = Field(..., ge=0)
    initial_allotment: int = Field(..., ge=0)
    total_sold: int = Field(..., ge=0)
    sellable: int = Field(..., ge=0, description="Доступно к продаже сейчас (по графику)")
    fully_vested_at: int | None = Field(None, ge=0)

    model_config = {"frozen": True}
