"""
Image format conversion utilities.

Handles conversions between the in-memory formats the back ends use:
- NumPy arrays (OpenCV BGR/BGRA or RGBA layout)
- Color channel tuples
- Alpha blending of one array onto another
"""

from typing import Tuple

import numpy as np

from schemas import Color, Point


class ImageConverters:
    """Utilities for converting between image formats."""

    @staticmethod
    def ensure_four_channels(image: np.ndarray) -> np.ndarray:
        """
        Ensure image has an alpha channel (grayscale and 3-channel input expanded).

        Channel order is preserved, so BGR becomes BGRA and RGB becomes RGBA.

        Args:
            image: Input image of shape (h, w), (h, w, 1), (h, w, 3) or (h, w, 4)

        Returns:
            Image of shape (h, w, 4)
        """
        if image.ndim == 2:
            image = image[:, :, np.newaxis]
        if image.shape[2] == 1:
            image = np.repeat(image, 3, axis=2)
        if image.shape[2] == 3:
            alpha = np.full(image.shape[:2] + (1,), 255, dtype=image.dtype)
            image = np.concatenate([image, alpha], axis=2)
        return np.ascontiguousarray(image)

    @staticmethod
    def color_to_bgra(color: Color) -> Tuple[int, int, int, int]:
        """Color as a BGRA channel tuple (OpenCV order)."""
        r, g, b, a = color.to_rgba()
        return (b, g, r, a)

    @staticmethod
    def blend_over(base: np.ndarray, overlay: np.ndarray, point: Point) -> np.ndarray:
        """
        Alpha-composite overlay onto base at point.

        Both arrays must use the same channel order. The base keeps its own
        channel count; overlay transparency comes from its fourth channel.

        Args:
            base: Destination image (h, w, c)
            overlay: Source image (h, w, c)
            point: Top-left position of overlay on base

        Returns:
            New array with overlay composited
        """
        result = base.copy()
        h, w = overlay.shape[:2]
        x, y = point.x, point.y

        overlay = ImageConverters.ensure_four_channels(overlay).astype(np.float32)
        region = ImageConverters.ensure_four_channels(result[y : y + h, x : x + w]).astype(
            np.float32
        )

        src_a = overlay[:, :, 3:4] / 255.0
        dst_a = region[:, :, 3:4] / 255.0
        out_a = src_a + dst_a * (1.0 - src_a)

        safe_a = np.where(out_a == 0, 1.0, out_a)
        out_rgb = (overlay[:, :, :3] * src_a + region[:, :, :3] * dst_a * (1.0 - src_a)) / safe_a

        blended = np.concatenate([out_rgb, out_a * 255.0], axis=2)
        blended = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

        # 3-channel bases stay opaque
        result[y : y + h, x : x + w] = blended[:, :, : result.shape[2]]
        return result

    @staticmethod
    def ensure_color(image: np.ndarray) -> np.ndarray:
        """
        Ensure image has 3 or 4 channels (grayscale expanded to 3).

        Args:
            image: Input image (grayscale or color)

        Returns:
            Image of shape (h, w, 3) or (h, w, 4)
        """
        if image.ndim == 2:
            return np.ascontiguousarray(np.repeat(image[:, :, np.newaxis], 3, axis=2))
        if image.shape[2] == 1:
            return np.ascontiguousarray(np.repeat(image, 3, axis=2))
        return image
