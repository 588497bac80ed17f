"""
Sample fields on a regular grid covering a bounding box.

Each query succeeds only inside the active region of its field; failed queries
are skipped.
"""

import dataclasses as dc
import math
import typing

import numpy as np

from voxsim.kernel import BBox3, ScalarField, VectorField


Field: typing.TypeAlias = ScalarField | VectorField


def probe_axis(lower: float, upper: float, step: float) -> np.ndarray:
    """Points lower + n * step covering [lower, upper]; the last may overshoot by less than a step."""
    if step <= 0:
        raise ValueError(f"Probe step must be positive, got {step}")
    nb_steps = max(0, math.ceil((upper - lower) / step - 1e-9))
    return lower + step * np.arange(nb_steps + 1)


def probe_grid(bbox: BBox3, step: float) -> np.ndarray:
    """
    Grid points covering the box, Z outermost, then X, then Y.

    Returns
    -------
    np.ndarray
        Array of shape (nb_points, 3).
    """
    if bbox.is_empty:
        return np.zeros((0, 3))
    [xs, ys, zs] = [probe_axis(lo, hi, step) for lo, hi in zip(bbox.vec_min, bbox.vec_max)]
    zz, xx, yy = np.meshgrid(zs, xs, ys, indexing="ij")
    return np.column_stack([xx.ravel(), yy.ravel(), zz.ravel()])


@dc.dataclass
class ProbeSample:
    position: np.ndarray
    values: dict[str, typing.Any]
    """Only the fields whose query succeeded"""


def probe_fields(bbox: BBox3, fields: dict[str, Field], step: float) -> typing.Iterator[ProbeSample]:
    """Query every field at every grid point; points where all queries fail are skipped."""
    points = probe_grid(bbox, step)
    lookups = {name: field.get_values(points) for name, field in fields.items()}
    for index, position in enumerate(points):
        values = {name: values[index] for name, (found, values) in lookups.items() if found[index]}
        if values:
            yield ProbeSample(position, values)


def estimate_max_magnitude(field: VectorField, bbox: BBox3, step: float) -> float:
    """The largest vector magnitude found on the probe grid; 0 if no query succeeds."""
    found, values = field.get_values(probe_grid(bbox, step))
    if not np.any(found):
        return 0.0
    return float(np.max(np.linalg.norm(values[found], axis=1)))


def summarize(samples: typing.Iterable[ProbeSample]) -> dict[str, dict[str, float]]:
    """Count of successful queries and range of values (magnitudes for vectors) per field."""
    collected: dict[str, list[float]] = {}
    for sample in samples:
        for name, value in sample.values.items():
            collected.setdefault(name, []).append(float(np.linalg.norm(value)) if np.ndim(value) else float(value))
    return {
        name: {"count": len(values), "min": min(values), "max": max(values)}
        for name, values in collected.items()
    }
