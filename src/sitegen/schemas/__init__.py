from .site_spec import (
    ColorPalette,
    DesignEffects,
    PageSpec,
    SectionSpec,
    SiteSpec,
    Typography,
)

__all__ = [
    "ColorPalette",
    "DesignEffects",
    "PageSpec",
    "SectionSpec",
    "SiteSpec",
    "Typography",
]
