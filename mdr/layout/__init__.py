"""Layout engine: display widths, wrapping, coordinate mapping, and scrolling."""

from .mapper import CoordinateMapper, link_at, link_at_position, link_at_scroll
from .scroll import WHEEL_STEP, clamp_scroll, max_scroll, page_size, scroll_by, scroll_percent
from .width import char_display_width, clip_to_width, text_display_width
from .wrap import EMPTY_LINE_WRAP, LineWrap, WrapRow, build_wraps, wrap_line

__all__ = [
    "CoordinateMapper",
    "EMPTY_LINE_WRAP",
    "LineWrap",
    "WHEEL_STEP",
    "WrapRow",
    "build_wraps",
    "char_display_width",
    "clamp_scroll",
    "clip_to_width",
    "link_at",
    "link_at_position",
    "link_at_scroll",
    "max_scroll",
    "page_size",
    "scroll_by",
    "scroll_percent",
    "text_display_width",
    "wrap_line",
]
