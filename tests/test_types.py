import numpy as np
import pytest

from cucount.types import Mesh, MeshAttrs, MeshType, Particles


def test_particles_size_from_positions():
    particles = Particles(np.zeros((5, 3)), np.ones(5))
    assert particles.size == 5


def test_particles_made_contiguous():
    base = np.arange(30, dtype=float).reshape(10, 3)
    positions = base[::2]
    weights = np.arange(10, dtype=float)[::2]
    particles = Particles(positions, weights)
    assert particles.positions.flags.c_contiguous
    assert particles.weights.flags.c_contiguous
    assert np.array_equal(particles.positions, positions)
    assert np.array_equal(particles.weights, weights)


def test_particles_from_lists_are_float64():
    particles = Particles([[1, 2, 3]], [2])
    assert particles.positions.dtype == np.float64
    assert particles.weights.tolist() == [2.0]


def test_particles_bad_position_shape():
    with pytest.raises(ValueError):
        Particles(np.zeros((4, 2)), np.ones(4))


def test_particles_weight_length_mismatch():
    with pytest.raises(ValueError):
        Particles(np.zeros((4, 3)), np.ones(3))


def test_mesh_attrs_defaults_request_automatic_size():
    attrs = MeshAttrs()
    assert attrs.meshsize == (0, 0, 0)
    assert attrs.type is MeshType.CARTESIAN


def _small_mesh():
    positions = np.arange(9, dtype=float).reshape(3, 3)
    return Mesh(
        size=2,
        total_nparticles=3,
        nparticles=np.array([1, 2]),
        cumnparticles=np.array([0, 1]),
        positions=positions,
        spositions=positions / np.linalg.norm(positions, axis=1)[:, None],
        weights=np.array([1.0, 2.0, 3.0]),
    )


def test_cell_particles_slices_cell():
    mesh = _small_mesh()
    positions, spositions, weights = mesh.cell_particles(1)
    assert weights.tolist() == [2.0, 3.0]
    assert np.array_equal(positions, mesh.positions[1:3])
    assert spositions.shape == (2, 3)


def test_cell_particles_out_of_range():
    mesh = _small_mesh()
    with pytest.raises(IndexError):
        mesh.cell_particles(2)
    with pytest.raises(IndexError):
        mesh.cell_particles(-1)