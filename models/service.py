"""Service catalog models for salon services."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.validation import parse_duration

# Discounts offered by the salon, in percent
ALLOWED_DISCOUNTS = (-15, -30, -50)


def compute_discounted_price(original_price: float, discount: Optional[int]) -> float:
    """Apply a negative percentage discount (e.g. -15) to a price."""
    if not discount:
        return original_price
    return round(original_price * (1 + discount / 100), 2)


def format_duration(minutes: int) -> str:
    """Human label for a duration: "45 min", "1h30", "2h"."""
    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{minutes} min"
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h{rest:02d}"


class Service(BaseModel):
    """Service offered by the salon."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: str = ""
    duration: int = Field(..., gt=0, description="Duration in minutes")
    original_price: float = Field(..., ge=0, alias="originalPrice")
    discount: Optional[int] = None
    discounted_price: Optional[float] = Field(default=None, alias="discountedPrice")
    section_id: Optional[str] = Field(default=None, alias="sectionId")

    @field_validator("discount")
    @classmethod
    def _check_discount(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value not in ALLOWED_DISCOUNTS:
            raise ValueError(f"discount must be one of {ALLOWED_DISCOUNTS}")
        return value

    @property
    def effective_price(self) -> float:
        if self.discounted_price is not None:
            return self.discounted_price
        return compute_discounted_price(self.original_price, self.discount)

    @property
    def duration_label(self) -> str:
        return format_duration(self.duration)

    @classmethod
    def from_form(
        cls,
        title: str,
        duration: str,
        original_price: str,
        discount: str = "",
        description: str = "",
        section_id: Optional[str] = None,
    ) -> "Service":
        """
        Build a service from the catalog form fields.

        The form sends the duration as "HH:mm" and prices/discounts as text.
        """
        price = float(original_price)
        discount_value = int(discount) if discount else None
        return cls(
            title=title,
            description=description,
            duration=parse_duration(duration),
            original_price=price,
            discount=discount_value,
            discounted_price=(
                compute_discounted_price(price, discount_value)
                if discount_value
                else None
            ),
            section_id=section_id,
        )
