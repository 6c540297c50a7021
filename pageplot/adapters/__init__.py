from .normalize import SeriesData, coerce_image, coerce_rgb, normalize_xy

__all__ = ["SeriesData", "coerce_image", "coerce_rgb", "normalize_xy"]
