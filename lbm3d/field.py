"""
Field Extraction

Flat buffers of grid quantities for presentation layers.

Ordering: cell (x, y, z) is row ``x + width * (y + height * z)``, i.e. x
varies fastest, then y, then z. This is the same ordering as
:meth:`GridState.cell_index` and as a 3D texture of size
width x height x depth filled slice by slice.

Extraction only reads the grid; the returned buffers never alias grid
memory.
"""

import numpy as np


def extract_velocity_field(grid, out=None):
    """
    Copy the velocity of every cell into a flat buffer.

    Parameters
    ----------
    grid : GridState
        Source grid (not modified)
    out : ndarray, optional
        Preallocated float buffer of shape (num_cells, 3)

    Returns
    -------
    field : ndarray
        Velocity vectors, shape (num_cells, 3)
    """
    n = grid.num_cells
    if out is None:
        out = np.empty((n, 3), dtype=np.float64)
    elif out.shape != (n, 3):
        raise ValueError(f"output buffer must have shape {(n, 3)}, got {out.shape}")

    # (3, nz, ny, nx) -> (3, N) -> (N, 3)
    out[...] = grid.velocity.reshape(3, n).T
    return out


def extract_density_field(grid):
    """Flat copy of the density, same ordering as the velocity field."""
    return grid.density.reshape(-1).copy()


def extract_velocity_magnitude(grid):
    """Flat |u| per cell."""
    field = extract_velocity_field(grid)
    return np.sqrt(np.sum(field * field, axis=1))


def velocity_field_to_grid(field, width, height, depth):
    """
    Reshape a flat velocity buffer back to (depth, height, width, 3).

    Parameters
    ----------
    field : array_like
        Buffer of shape (width * height * depth, 3)
    width, height, depth : int
        Grid dimensions

    Returns
    -------
    volume : ndarray
        ``volume[z, y, x]`` is the velocity of cell (x, y, z)
    """
    field = np.asarray(field)
    expected = (width * height * depth, 3)
    if field.shape != expected:
        raise ValueError(f"field must have shape {expected}, got {field.shape}")
    return field.reshape(depth, height, width, 3)
