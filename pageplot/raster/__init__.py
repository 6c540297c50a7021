from .canvas import RGBA, blend_coverage, blit_rgb, new_canvas, stamp
from .draw_lines import draw_polyline
from .draw_markers import draw_dots
from .draw_text import draw_text, load_font, text_size

__all__ = [
    "RGBA",
    "blend_coverage",
    "blit_rgb",
    "draw_dots",
    "draw_polyline",
    "draw_text",
    "load_font",
    "new_canvas",
    "stamp",
    "text_size",
]
