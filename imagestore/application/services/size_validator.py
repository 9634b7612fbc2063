"""
Image size validation.

Checks measured pixel dimensions against per-axis (operator, value)
constraints, e.g. ``{"height": ["==", 100]}``.

The subject may be a file path or an upload descriptor: a mapping whose first
value is a path or a mapping with ``tmp_name`` (the shape form handlers
produce), or a mapping carrying ``tmp_name`` itself.
"""

import os
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from PIL import Image

from imagestore.domain.models import DimensionConstraint, InvalidArgumentError

Dimensions = Tuple[int, int]
Measurer = Callable[[str], Dimensions]


def measure_image(path: str) -> Dimensions:
    """(width, height) of the image at path, read from its header."""
    with Image.open(path) as image:
        return image.size


def extract_image_path(subject: Any) -> str:
    """
    Normalize a validation subject to a file path.

    Raises:
        InvalidArgumentError: If no path can be extracted
    """
    if isinstance(subject, (str, os.PathLike)):
        return os.fspath(subject)

    if isinstance(subject, Mapping):
        if "tmp_name" in subject:
            return extract_image_path(subject["tmp_name"])
        values = list(subject.values())
        if values:
            return extract_image_path(values[0])

    raise InvalidArgumentError(f"Cannot extract an image path from {type(subject).__name__}")


def _constraint(constraints: Mapping[str, Any], axis: str) -> Optional[DimensionConstraint]:
    return DimensionConstraint.parse(constraints.get(axis))


class SizeValidator:
    """Predicate over image dimensions. Stateless."""

    def __init__(self, measurer: Measurer = measure_image):
        self._measure = measurer

    def validate_dimensions(self, dimensions: Dimensions, constraints: Mapping[str, Any]) -> bool:
        """
        Check (width, height) against constraints.

        Args:
            dimensions: Measured (width, height)
            constraints: Mapping with "width" and/or "height" -> (operator, value)

        Raises:
            InvalidArgumentError: Neither width nor height given, or a bad operator
        """
        if constraints.get("width") is None and constraints.get("height") is None:
            raise InvalidArgumentError(
                "Missing image size validation options! You must provide a height and/or width."
            )

        width, height = dimensions
        width_rule = _constraint(constraints, "width")
        height_rule = _constraint(constraints, "height")

        if height_rule is not None and not height_rule.matches(height):
            return False
        if width_rule is not None and not width_rule.matches(width):
            return False
        return True

    def validate(self, subject: Union[str, os.PathLike, Mapping[str, Any]], constraints: Mapping[str, Any]) -> bool:
        """Measure the image behind subject and check it against constraints."""
        if constraints.get("width") is None and constraints.get("height") is None:
            raise InvalidArgumentError(
                "Missing image size validation options! You must provide a height and/or width."
            )
        return self.validate_dimensions(self._measure(extract_image_path(subject)), constraints)


def validate_image_size(subject: Any, constraints: Mapping[str, Any]) -> bool:
    """Functional form of SizeValidator().validate."""
    return SizeValidator().validate(subject, constraints)
