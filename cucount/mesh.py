"""Assignment of particles to Cartesian or angular meshes."""

from __future__ import annotations

import math
from dataclasses import replace

import numpy as np

from .logger import LogLevel, log_message
from .types import DTORAD, NDIM, Mesh, MeshType

_TWO_PI = 2 * math.pi
_MAX_ANGULAR_NSIDE = 2048


def cartesian_distance(position):
    """Euclidean norm of a 3-vector."""
    return math.sqrt(sum(float(x) * float(x) for x in position[:NDIM]))


def cartesian_to_sphere(position):
    """Return (r, cos(theta), phi) of a Cartesian position, phi in [0, 2 pi)."""
    r = cartesian_distance(position)
    if r == 0:
        return r, 1.0, 0.0
    x, y, z = (float(c) / r for c in position[:NDIM])
    if x == 0 and y == 0:
        return r, z, 0.0
    phi = math.atan2(y, x)
    if phi < 0:
        phi += _TWO_PI
    return r, z, phi


def wrap_angle(phi):
    """Wrap an angle into [0, 2 pi]."""
    phi = math.fmod(phi, _TWO_PI)
    if phi < 0:
        phi += _TWO_PI
    return phi


def angular_to_cell(mattrs, cth, phi):
    """Pixel index of the direction (cos(theta), phi) on an angular mesh."""
    if cth < -1 or cth > 1:
        raise ValueError(f"Invalid cos(theta) value: {cth}. Must be in range [-1, 1].")
    m0, m1 = mattrs.meshsize[0], mattrs.meshsize[1]
    icth = m0 - 1 if cth == 1 else int(0.5 * (1 + cth) * m0)
    iphi = int(0.5 * wrap_angle(phi) / math.pi * m1)
    return iphi + icth * m1


def cartesian_to_cell(mattrs, position):
    """Cell index of a Cartesian position, the first axis varying slowest."""
    index = 0
    for axis in range(NDIM):
        size = mattrs.meshsize[axis]
        offset = mattrs.boxcenter[axis] - mattrs.boxsize[axis] / 2
        index = index * size + int(
            (float(position[axis]) - offset) * size / mattrs.boxsize[axis]
        )
    return index


def _norms(positions):
    return np.sqrt(
        positions[:, 0] * positions[:, 0]
        + positions[:, 1] * positions[:, 1]
        + positions[:, 2] * positions[:, 2]
    )


def _sphere_arrays(positions):
    r = _norms(positions)
    with np.errstate(all="ignore"):
        unit = positions / r[:, None]
        zero = r == 0
        cth = np.where(zero, 1.0, unit[:, 2])
        phi = np.arctan2(unit[:, 1], unit[:, 0])
        phi = np.where(phi < 0, phi + _TWO_PI, phi)
        polar = zero | ((unit[:, 0] == 0) & (unit[:, 1] == 0))
        phi = np.where(polar, 0.0, phi)
    return r, cth, phi


def _angular_cells(mattrs, cth, phi):
    bad = (cth < -1) | (cth > 1)
    if np.any(bad):
        value = float(cth[bad][0])
        raise ValueError(f"Invalid cos(theta) value: {value}. Must be in range [-1, 1].")
    m0, m1 = mattrs.meshsize[0], mattrs.meshsize[1]
    icth = np.where(cth == 1, m0 - 1, np.trunc(0.5 * (1 + cth) * m0)).astype(np.int64)
    wrapped = np.fmod(phi, _TWO_PI)
    wrapped = np.where(wrapped < 0, wrapped + _TWO_PI, wrapped)
    iphi = np.trunc(0.5 * wrapped / np.pi * m1).astype(np.int64)
    return iphi + icth * m1


def _cartesian_cells(mattrs, positions):
    index = np.zeros(positions.shape[0], dtype=np.int64)
    with np.errstate(all="ignore"):
        for axis, (size, boxsize, center) in enumerate(
            zip(mattrs.meshsize, mattrs.boxsize, mattrs.boxcenter)
        ):
            offset = center - boxsize / 2
            step = np.trunc((positions[:, axis] - offset) * size / boxsize)
            index = index * size + step.astype(np.int64)
    return index


def _angular_attrs(populated, mattrs):
    total = sum(p.size for p in populated)
    mean_nparticles = total // len(populated)
    spheres = [_sphere_arrays(p.positions) for p in populated]
    cth = np.concatenate([s[1] for s in spheres])
    phi = np.concatenate([s[2] for s in spheres])
    cth_min, cth_max = float(cth.min()), float(cth.max())
    phi_min, phi_max = float(phi.min()), float(phi.max())

    fsky = (cth_max - cth_min) * (phi_max - phi_min) / (4 * math.pi)
    log_message(
        LogLevel.INFO,
        "Enclosing fractional area is %.4f [%.4f %.4f] x [%.4f %.4f].\n",
        fsky, cth_min, cth_max, phi_min, phi_max,
    )

    meshsize = tuple(mattrs.meshsize)
    if meshsize[0] * meshsize[1] == 0:
        theta_max = math.acos(mattrs.smax)
        nside1 = 5 * int(math.pi / theta_max) if theta_max > 0 else math.inf
        if fsky > 0:
            nside2 = min(int(math.sqrt(0.25 * mean_nparticles / fsky)), _MAX_ANGULAR_NSIDE)
        else:
            nside2 = _MAX_ANGULAR_NSIDE
        nside = max(min(nside1, nside2), 1)
        meshsize = (nside, 2 * nside, meshsize[2])

    ncells = meshsize[0] * meshsize[1]
    pixel_resolution = math.sqrt(4 * math.pi / ncells) / DTORAD
    log_message(LogLevel.INFO, "Mesh size is %d = %d x %d.\n", ncells, meshsize[0], meshsize[1])
    log_message(LogLevel.INFO, "Pixel resolution is %.4f deg.\n", pixel_resolution)
    return replace(
        mattrs,
        meshsize=meshsize,
        boxsize=(cth_max - cth_min, phi_max - phi_min, mattrs.boxsize[2]),
        boxcenter=((cth_max + cth_min) / 2.0, (phi_max + phi_min) / 2.0, mattrs.boxcenter[2]),
    )


def _cartesian_attrs(populated, mattrs):
    total = sum(p.size for p in populated)
    positions = np.concatenate([p.positions for p in populated])
    low = positions.min(axis=0)
    high = positions.max(axis=0)
    boxsize = tuple(1.001 * (float(h) - float(lo)) for lo, h in zip(low, high))
    boxcenter = tuple((float(h) + float(lo)) / 2.0 for lo, h in zip(low, high))
    volume = math.prod(boxsize)
    log_message(
        LogLevel.INFO,
        "Enclosing volume is %.4f [%.4f %.4f] x [%.4f %.4f] x [%.4f %.4f].\n",
        volume, low[0], high[0], low[1], high[1], low[2], high[2],
    )

    meshsize = tuple(mattrs.meshsize)
    if meshsize[0] == 0:
        if mattrs.smax <= 0:
            raise ValueError("smax must be positive to choose a Cartesian mesh size")
        nside1 = int(16.0 * volume ** (1.0 / 3.0) / mattrs.smax)
        nside2 = int((0.5 * total / len(populated)) ** (1.0 / 3.0))
        nside = max(min(nside1, nside2), 1)
        meshsize = (nside,) * NDIM

    ncells = math.prod(meshsize)
    log_message(
        LogLevel.INFO, "Mesh size is %d = %d x %d x %d.\n",
        ncells, meshsize[0], meshsize[1], meshsize[2],
    )
    log_message(LogLevel.INFO, "Voxel resolution is %.4f.\n", volume / max(ncells, 1))
    return replace(mattrs, meshsize=meshsize, boxsize=boxsize, boxcenter=boxcenter)


def set_mesh_attrs(list_particles, mattrs):
    """Return mesh attributes fitted to the extent of the given particle sets."""
    populated = [p for p in list_particles if p is not None and p.size > 0]
    if not populated:
        raise ValueError("no particles to build a mesh from")
    if mattrs.type is MeshType.ANGULAR:
        return _angular_attrs(populated, mattrs)
    return _cartesian_attrs(populated, mattrs)


def _build_mesh(particles, mattrs):
    positions = particles.positions
    if mattrs.type is MeshType.ANGULAR:
        ncells = mattrs.meshsize[0] * mattrs.meshsize[1]
        _, cth, phi = _sphere_arrays(positions)
        index = _angular_cells(mattrs, cth, phi)
    else:
        ncells = math.prod(mattrs.meshsize)
        index = _cartesian_cells(mattrs, positions)
    if ncells <= 0 or index.min() < 0 or index.max() >= ncells:
        raise ValueError("particles fall outside the mesh")

    with np.errstate(all="ignore"):
        spositions = positions / _norms(positions)[:, None]

    counts = np.bincount(index, minlength=ncells).astype(np.int64)
    log_message(
        LogLevel.INFO, "There are objects in %d out of %d boxes.\n",
        int(np.count_nonzero(counts)), ncells,
    )
    order = np.argsort(index, kind="stable")
    return Mesh(
        size=ncells,
        total_nparticles=int(counts.sum()),
        nparticles=counts,
        cumnparticles=np.cumsum(counts) - counts,
        positions=positions[order],
        spositions=spositions[order],
        weights=particles.weights[order],
    )


def set_mesh(list_particles, mattrs):
    """Sort each particle set into mesh cells; empty or missing sets give None."""
    meshes = [
        None if particles is None or particles.size == 0 else _build_mesh(particles, mattrs)
        for particles in list_particles
    ]
    log_message(LogLevel.INFO, "Mesh variables successfully set.\n")
    return meshes