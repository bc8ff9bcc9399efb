"""OFF (Object File Format) mesh import.

An OFF file is a header line `OFF`, a counts line `nv nf ne`, then `nv`
vertex lines `x y z` and `nf` face lines `n i0 i1 ... i(n-1)`. Lines starting
with `#` and blank lines are ignored anywhere in the file. Extra values after
the face indices (per-face colors) are ignored.

Faces may be arbitrary convex polygons; they are fan-triangulated when a
MeshObject is built from them.

Example:
    >>> from src.raytracer.scene.off_loader import load_off_mesh
    >>> mesh = load_off_mesh("models/cube.off")  # doctest: +SKIP
    >>> len(mesh)  # doctest: +SKIP
    12
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import numpy as np
import numpy.typing as npt

from src.raytracer.geometry.triangle import MeshObject
from src.raytracer.materials.phong import Material

logger = logging.getLogger(__name__)

# Light gray, slightly reflective
MESH_MATERIAL = Material(color=(0.7, 0.7, 0.7), reflectivity=0.2)


def _content_lines(text: str) -> Iterator[tuple[int, list[str]]]:
    """Yield (line_number, tokens) for every non-blank, non-comment line."""
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if line:
            yield number, line.split()


def parse_off(text: str) -> tuple[npt.NDArray[np.float64], list[list[int]]]:
    """Parse OFF text into vertices and polygon faces.

    Args:
        text: The file contents.

    Returns:
        A tuple (vertices, faces): an (nv, 3) float64 array and a list of
        vertex index lists.

    Raises:
        ValueError: If the header, counts, a vertex or a face is malformed,
            or a face references a vertex that does not exist.
    """
    lines = _content_lines(text)

    number, tokens = next(lines, (0, []))
    if not tokens or tokens[0] != "OFF":
        raise ValueError(f"Not an OFF file (line {number}): missing 'OFF' header")

    # Some writers put the counts on the header line itself
    counts = tokens[1:]
    if not counts:
        number, counts = next(lines, (0, []))
    if len(counts) < 2:
        raise ValueError(f"Line {number}: expected vertex and face counts")
    try:
        num_vertices, num_faces = int(counts[0]), int(counts[1])
    except ValueError as exc:
        raise ValueError(f"Line {number}: invalid counts {' '.join(counts)!r}") from exc
    if num_vertices <= 0 or num_faces <= 0:
        raise ValueError(
            f"Line {number}: invalid counts ({num_vertices} vertices, {num_faces} faces)"
        )

    vertices = np.empty((num_vertices, 3), dtype=np.float64)
    for i in range(num_vertices):
        number, tokens = next(lines, (0, []))
        if len(tokens) < 3:
            raise ValueError(f"Expected vertex {i}, found {'end of file' if not tokens else tokens}")
        try:
            vertices[i] = [float(tokens[0]), float(tokens[1]), float(tokens[2])]
        except ValueError as exc:
            raise ValueError(f"Line {number}: invalid vertex {' '.join(tokens)!r}") from exc

    faces: list[list[int]] = []
    for i in range(num_faces):
        number, tokens = next(lines, (0, []))
        if not tokens:
            raise ValueError(f"Expected face {i}, found end of file")
        try:
            sides = int(tokens[0])
            indices = [int(token) for token in tokens[1 : sides + 1]]
        except ValueError as exc:
            raise ValueError(f"Line {number}: invalid face {' '.join(tokens)!r}") from exc
        if sides < 3 or len(indices) != sides:
            raise ValueError(
                f"Line {number}: face {i} declares {sides} vertices, got {len(indices)}"
            )
        for index in indices:
            if not 0 <= index < num_vertices:
                raise ValueError(f"Line {number}: invalid vertex index {index} in face {i}")
        faces.append(indices)

    return vertices, faces


def load_off(path: str | os.PathLike[str]) -> tuple[npt.NDArray[np.float64], list[list[int]]]:
    """Read an OFF file from disk.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the contents are malformed.
    """
    with open(path, encoding="utf-8") as handle:
        text = handle.read()
    vertices, faces = parse_off(text)
    logger.debug("Loaded %s: %d vertices, %d faces", path, len(vertices), len(faces))
    return vertices, faces


def fit_to_unit(vertices: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Center vertices on the origin and scale the largest extent to 2.

    The result fits inside the [-1, 1] cube. A model with zero extent is only
    centered.
    """
    points = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    lo = points.min(axis=0)
    hi = points.max(axis=0)
    extent = float(np.max(hi - lo))
    if extent <= 0.0:
        extent = 2.0
    return (points - 0.5 * (lo + hi)) * (2.0 / extent)


def load_off_mesh(
    path: str | os.PathLike[str],
    material: Material = MESH_MATERIAL,
    fit: bool = False,
) -> MeshObject:
    """Read an OFF file and build a MeshObject from its faces.

    Args:
        path: Path to the OFF file.
        material: Material shared by every triangle.
        fit: If True, center the model and scale it into [-1, 1].

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the contents are malformed.
    """
    vertices, faces = load_off(path)
    if fit:
        vertices = fit_to_unit(vertices)
    return MeshObject.from_polygons(vertices, faces, material)
