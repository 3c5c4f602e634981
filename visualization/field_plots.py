"""
Field Visualization

Plotting functions for the flat velocity buffer produced by
``lbm3d.field.extract_velocity_field``.
"""

import matplotlib.pyplot as plt
import numpy as np

_AXES = {'x': 2, 'y': 1, 'z': 0}


def velocity_slice(field, width, height, depth, axis='z', index=None):
    """
    Cut one plane out of a flat velocity buffer.

    Parameters
    ----------
    field : ndarray
        Velocity buffer, shape (width * height * depth, 3), x fastest
    width, height, depth : int
        Grid dimensions
    axis : {'x', 'y', 'z'}
        Axis normal to the slice
    index : int, optional
        Slice position along ``axis`` (default: middle)

    Returns
    -------
    plane : ndarray
        Velocity vectors of the slice, shape (rows, cols, 3)
    """
    if axis not in _AXES:
        raise ValueError(f"axis must be one of 'x', 'y', 'z', got {axis!r}")

    volume = np.asarray(field).reshape(depth, height, width, 3)
    dim = _AXES[axis]
    if index is None:
        index = volume.shape[dim] // 2

    return np.take(volume, index, axis=dim)


def plot_velocity_slice(field, width, height, depth, axis='z', index=None,
                        ax=None, title="Velocity Magnitude"):
    """Plot |u| on one slice of the box."""
    plane = velocity_slice(field, width, height, depth, axis, index)
    magnitude = np.sqrt(np.sum(plane * plane, axis=-1))

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 5))
    else:
        fig = ax.figure

    im = ax.imshow(magnitude, origin='lower', cmap='viridis', aspect='equal')
    ax.set_title(f"{title} ({axis} = {index if index is not None else 'mid'})")
    fig.colorbar(im, ax=ax, label='|u|')

    return fig


def plot_density_slice(density, axis='z', index=None, ax=None, title="Density"):
    """Plot one slice of a (nz, ny, nx) density field."""
    if axis not in _AXES:
        raise ValueError(f"axis must be one of 'x', 'y', 'z', got {axis!r}")

    dim = _AXES[axis]
    if index is None:
        index = density.shape[dim] // 2
    plane = np.take(density, index, axis=dim)

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 5))
    else:
        fig = ax.figure

    im = ax.imshow(plane, origin='lower', cmap='RdBu_r', aspect='equal')
    ax.set_title(title)
    fig.colorbar(im, ax=ax, label='rho')

    return fig
