from pydantic import BaseModel, Field, PositiveInt, field_validator
from pydantic import model_validator
from typing import Dict, List, Optional

DEFAULT_SIZES = "(max-width: 680px) calc(100vw - 40px), 335px"


class ResizeSpec(BaseModel):
    width: Optional[PositiveInt] = None
    height: Optional[PositiveInt] = None
    widths: Optional[List[PositiveInt]] = Field(default=None, min_length=1)
    sizes: Optional[str] = None

    @field_validator("widths")
    @classmethod
    def _ascending(cls, widths):
        if widths is None:
            return widths
        return sorted(set(widths))

    @model_validator(mode="after")
    def _exactly_one_target(self):
        targets = [self.width, self.height, self.widths]
        if sum(target is not None for target in targets) != 1:
            raise ValueError(
                "exactly one of 'width', 'height' or 'widths' must be set"
            )
        if self.sizes is not None and self.widths is None:
            raise ValueError("'sizes' is only allowed together with 'widths'")
        return self

    @property
    def is_multi_size(self) -> bool:
        return self.widths is not None

    @property
    def display_sizes(self) -> Optional[str]:
        if not self.is_multi_size:
            return None
        return self.sizes or DEFAULT_SIZES


class ResizeConfig(BaseModel):
    images: Dict[str, ResizeSpec]


# Card images: desktop 1x ~335px, desktop 2x ~670px, mobile 2x ~1280px.
# Seed images are shown at one size: top at ~160px wide, bottom at 88px high.
CARD_WIDTHS = [400, 800, 1200]

DEFAULT_RESIZE_CONFIG = ResizeConfig(
    images={
        "column_1.png": ResizeSpec(widths=CARD_WIDTHS),
        "column_2.png": ResizeSpec(widths=CARD_WIDTHS),
        "column_3.png": ResizeSpec(widths=CARD_WIDTHS),
        "seeds_left_top.png": ResizeSpec(width=320),
        "seeds_right_top.png": ResizeSpec(width=320),
        "seeds_left_bottom.png": ResizeSpec(height=176),
        "seeds_right_bottom.png": ResizeSpec(height=176),
    }
)
