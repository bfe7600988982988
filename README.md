# cucount

Sorts particles from one or more catalogues into a mesh — Cartesian boxes,
or angular pixels on the sphere — so that particles close to each other can
be found quickly. This is the first step of counting pairs of particles for
two-point correlation function estimates.

## Installation

```
pip install .
```

The tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Particles

`cucount.types.Particles` holds an `(N, 3)` array of Cartesian positions and
an array of `N` weights, both stored as contiguous float64 arrays. A
`ValueError` is raised if the shapes do not match. `Particles.size` is the
number of particles.

```python
import numpy as np
from cucount.types import Particles

rng = np.random.default_rng(42)
positions = rng.uniform(-100.0, 100.0, size=(1000, 3))
particles = Particles(positions, np.ones(1000))
```

## Building a mesh

A mesh is described by a frozen `cucount.types.MeshAttrs` with the fields
`meshsize`, `boxsize`, `boxcenter`, `smax` and `type` (a
`cucount.types.MeshType`, `CARTESIAN` or `ANGULAR`).

`cucount.mesh.set_mesh_attrs(list_particles, mattrs)` returns new attributes
fitted to the extent of all given particle sets (entries that are `None` or
empty are ignored):

- Cartesian: the box spans the particles' bounding box, enlarged by a factor
  1.001. If `meshsize[0]` is 0, a cubic mesh size is chosen from the volume,
  `smax` (the largest separation of interest, which must then be positive)
  and the mean number of particles per set.
- Angular: the box spans the range of cos(theta) and phi of the particles'
  directions. If the mesh size is 0, it is chosen from `smax` (here the
  cosine of the largest angle of interest) and the particle density, capped at
  2048 pixels in cos(theta), with twice as many in phi.

`cucount.mesh.set_mesh(list_particles, mattrs)` then returns one
`cucount.types.Mesh` per particle set (`None` for missing or empty sets).
A `Mesh` keeps the particles sorted by cell, together with `nparticles` and
`cumnparticles` per cell, their unit-vector positions `spositions`, and their
weights. `Mesh.cell_particles(cell)` returns the positions, unit positions and
weights of the particles in one cell.

```python
from cucount.mesh import set_mesh, set_mesh_attrs
from cucount.types import MeshAttrs, MeshType

mattrs = set_mesh_attrs([particles, particles], MeshAttrs(type=MeshType.CARTESIAN, smax=50.0))
mesh1, mesh2 = set_mesh([particles, particles], mattrs)
positions, unit_positions, weights = mesh1.cell_particles(0)
```

The lower-level helpers `cartesian_distance`, `cartesian_to_sphere`,
`wrap_angle`, `angular_to_cell` and `cartesian_to_cell` in `cucount.mesh` are
also available. `angular_to_cell` raises `ValueError` for a cos(theta) outside
[-1, 1], and `set_mesh` raises `ValueError` if a particle falls outside the mesh.

`cucount.types` also defines the `VarType` and `LosType` enumerations for the
variables (`S`, `MU`, `THETA`, `POLE`, `K`) and lines of sight (`FIRSTPOINT`,
`ENDPOINT`, `MIDPOINT`) used to describe pair-count binning.

## Logging

Progress messages are written to standard error with a `[LEVEL]` prefix. Their
verbosity is set with `cucount.logger.set_log_level`, using a
`cucount.logger.LogLevel` value (`DEBUG`, `INFO`, `WARN`, `ERROR`; the default
is `INFO`), and read back with `get_log_level`.

## What this package does not do

It builds the meshes only. It does not count pairs, and it has no way to
describe the binning or selection of pairs (separation ranges, steps, poles);
`VarType` and `LosType` are the only parts of that provided. There is no
command-line tool.