"""Image loading shared by the OCR and vision adapters."""

import base64
from pathlib import Path
from typing import Any

import cv2
import numpy as np
from numpy.typing import NDArray
from PIL import Image


def load_image(source: Any) -> NDArray[np.uint8]:
    """
    Load an image into a BGR (or grayscale) numpy array.

    Args:
        source: A file path, raw encoded bytes, a PIL image or a numpy array

    Raises:
        ValueError: If the source cannot be decoded as an image
    """
    if isinstance(source, np.ndarray):
        return source

    if isinstance(source, Image.Image):
        rgb = np.asarray(source.convert("RGB"), dtype=np.uint8)
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)

    if isinstance(source, (str, Path)):
        image = cv2.imread(str(source))
        if image is None:
            raise ValueError(f"Could not read image: {source}")
        return image

    if isinstance(source, (bytes, bytearray)):
        buffer = np.frombuffer(bytes(source), dtype=np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
        if image is None:
            raise ValueError("Could not decode image bytes")
        return image

    raise ValueError(f"Unsupported image source: {type(source).__name__}")


def to_grayscale_pil(image: NDArray[np.uint8]) -> Image.Image:
    """Convert a BGR or grayscale array to a grayscale PIL image."""
    if image.ndim == 3:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return Image.fromarray(image)


def encode_png_base64(image: NDArray[np.uint8]) -> str:
    """Encode an image as base64 PNG for API upload."""
    success, buffer = cv2.imencode(".png", image)
    if not success:
        raise RuntimeError("Failed to encode image")

    return base64.b64encode(buffer).decode("utf-8")
