# src/schemagen/typemodel/configs.py
"""
@brief
Pydantic constraint configurations for type descriptors.

@details
Each configurable category keeps its bounds in a small frozen model:
    - LengthConfig: element bounds for array types
    - NumberConfig: inclusive/exclusive bounds and step for number types
    - StringConfig: length bounds and regular expression for string types

Unknown keys are rejected so that a misspelled bound fails at definition
time instead of silently disappearing from the generated schema.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field


class _FrozenConfig(BaseModel):
    """
    @brief
    Base model for descriptor configurations.

    @details
    Forbids unknown fields and freezes instances, since a descriptor's
    configuration is shared by every place the descriptor is used.
    """

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


class LengthConfig(_FrozenConfig):
    """Element count bounds of an array type."""

    min_length: int | None = Field(None, ge=0, description="Minimum number of elements")
    max_length: int | None = Field(None, ge=0, description="Maximum number of elements")


class NumberConfig(_FrozenConfig):
    """
    @brief
    Numeric bounds of a number type.

    @details
    Exclusive bounds take precedence over inclusive ones when both are set.
    A whole-number `multiple_of` marks the type as an integer type.
    """

    min: int | float | None = Field(None, description="Inclusive lower bound")
    max: int | float | None = Field(None, description="Inclusive upper bound")
    min_exclusive: int | float | None = Field(None, description="Exclusive lower bound")
    max_exclusive: int | float | None = Field(None, description="Exclusive upper bound")
    multiple_of: int | float | None = Field(None, gt=0, description="Required step between values")


class StringConfig(_FrozenConfig):
    """Length bounds and pattern of a string type."""

    min_length: int | None = Field(None, ge=0, description="Minimum string length")
    max_length: int | None = Field(None, ge=0, description="Maximum string length")
    pattern: re.Pattern[str] | None = Field(None, description="Regular expression to match")


__all__ = ["LengthConfig", "NumberConfig", "StringConfig"]
