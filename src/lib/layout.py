"""
Surface layout for a presentation

Computes where the background, header, body and footer surfaces sit for
a given screen size. Recomputed on every resize.

    row 0        ┌──────────────── header (3) ────────────────┐
    row 3        │        body (indented by body_margin)      │
                 │                                            │
    row lines-1  └──────────────── footer (1) ────────────────┘
"""

from typing import Dict, Optional

from ..config import AppSettings, appsettings
from ..models.display import Geometry, SurfaceName


def windows_configure(
    columns: int, lines: int, settings: Optional[AppSettings] = None
) -> Dict[SurfaceName, Geometry]:
    """
    Compute the geometry of all four surfaces

    Args:
        columns: Screen width
        lines: Screen height
        settings: Heights/margins (defaults to appsettings)

    Returns:
        Geometry per SurfaceName, in creation order (background first)

    Example:
        >>> layout = windows_configure(80, 24)
        >>> layout[SurfaceName.BODY]
        Geometry(width=72, height=15, col=8, row=3, stack_order=3, relative_to='screen')
    """
    settings = settings or appsettings

    header_height = settings.header_height
    footer_height = settings.footer_height
    body_height = max(1, lines - header_height - footer_height - settings.body_padding)

    return {
        SurfaceName.BACKGROUND: Geometry(
            width=columns,
            height=lines,
            col=0,
            row=0,
            stack_order=1,
        ),
        SurfaceName.HEADER: Geometry(
            width=columns,
            height=header_height,
            col=0,
            row=0,
            stack_order=2,
        ),
        SurfaceName.BODY: Geometry(
            width=max(1, columns - settings.body_margin),
            height=body_height,
            col=settings.body_margin,
            row=header_height,
            stack_order=3,
        ),
        SurfaceName.FOOTER: Geometry(
            width=columns,
            height=footer_height,
            col=0,
            row=max(0, lines - footer_height),
            stack_order=2,
        ),
    }
