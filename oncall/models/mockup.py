"""Mockup generation models."""

from typing import Optional

from pydantic import Field

from .base import CamelModel


class MockupVariant(CamelModel):
    """One self-contained HTML/CSS candidate. Content is opaque."""

    name: str = Field(..., description="Short descriptive name for this variant")
    html: str = Field(..., description="Complete HTML markup for the component")
    css: str = Field(..., description="CSS styles for the component")


class MockupResult(CamelModel):
    """Structured output for mockup generation."""

    variants: list[MockupVariant] = Field(
        ...,
        min_length=1,
        max_length=2,
        description="1-2 design variants"
    )


class BrandColors(CamelModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None


class MockupRequest(CamelModel):
    """Body of POST /mockup."""

    component: str = Field(..., min_length=1, description="Component type")
    intent: str = Field(..., min_length=1, description="What the component should achieve")
    context: Optional[str] = None
    brand_colors: Optional[BrandColors] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "component": "login form",
                    "intent": "improve login page design",
                    "context": "Users complain the current form is cluttered",
                    "brandColors": {"primary": "#3b82f6"}
                }
            ]
        }
    }
