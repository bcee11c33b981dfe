# meshkit

Pure-Python tools for polygon meshes, with no dependencies outside the
standard library.

## Modules

- `meshkit.vecmath`: `Vec3`, an immutable, hashable 3D vector. It supports
  `+`, `-`, negation, scaling by a number and division by a number, along with
  `norm`, `unit`, `dot`, `cross` and `is_finite`. `unit` of the zero vector
  gives NaN components. `rotate_about_y(vec, degrees)` rotates a vector about
  the +Y axis.
- `meshkit.primitives`: indexed triangle data (`MeshData` of `MeshVertex`)
  and line data (`LineData` of `LineVertex`).
  - Shapes: `cube`, `quad`, `cone`, `torus`, `ico_sphere`, `uv_hemisphere`
    and `circle`.
  - Combining: `merge` concatenates meshes, `merge_lines` concatenates line
    lists, and `dedup` merges vertices that share a position. When it merges,
    the first vertex seen is kept.
  - Ready-made meshes: `cube_mesh`, `square_mesh`, `quad_mesh`, `cyl_mesh`,
    `cone_mesh`, `torus_mesh`, `sphere_mesh`, `hemi_mesh`, `capsule_mesh`,
    `arrow_mesh` and `scale_mesh`.
  - `spotlight_mesh(color, inner, outer)` draws the two cone-angle rings and
    spokes of a spotlight.
  - `cone` and `torus` raise `ValueError` when given too few sides or
    segments.
- `meshkit.halfedge`: `HalfedgeMesh` with `Vertex`, `Edge`, `Face` and
  `Halfedge` elements.
  - Boundary loops are stored as faces whose `boundary` flag is set.
  - Elements can answer queries such as `degree`, `normal`, `center`,
    `on_boundary`, `length` and `neighborhood_center`.
  - `erase` only marks an element for removal. The element is removed when
    `do_erase` runs.
  - `copy(eid)` returns a deep copy of the mesh, together with the copied
    element whose id is `eid`, or `None` if there is no such element.
  - `normal_of` and `center_of` work on any kind of element. `flip` reverses
    the reported orientation.
- `meshkit.build`: `from_poly(polygons, verts)` builds a new mesh.
  `rebuild(mesh, polygons, verts)` replaces the contents of an existing mesh.
  - Polygons are lists of vertex indices, and the indices need not be
    contiguous. The positions in `verts` go to the distinct indices in
    ascending order.
  - Both raise `MeshError` when the input is not a manifold, consistently
    oriented surface.
- `meshkit.checks`:
  - `validate(mesh)` checks the connectivity and ignores elements marked for
    erasure. On a problem it raises `ValidationError`, whose `element` and
    `message` say where the problem is and what it is. If the mesh passes, the
    marked elements are removed.
  - `warnings(mesh)` returns the first `(element, description)` pair it finds,
    or `None`. It looks for duplicate vertex positions, edges that wrap a
    single vertex, and repeated edges.
- `meshkit.convert`:
  - `to_mesh(mesh, split_faces)` fan-triangulates the faces that are not
    boundary loops. With `split_faces`, every triangle gets its own vertices
    with a flat normal. Without it, vertices are shared and carry smooth
    normals.
  - `from_mesh(data)` builds and validates a halfedge mesh from triangle data.
    It drops degenerate triangles and does not merge vertices.
- `meshkit.spline`: keyframe tracks and quaternions.
  - `Quat` is a quaternion and `slerp` interpolates between two of them.
  - `KeyframeTrack` is the abstract base for tracks keyed by time, with `set`,
    `erase`, `has`, `any`, `clear`, `crop` and `keys`.
  - `StepSpline` holds boolean values: each key's value lasts until the next
    key. `QuatSpline` slerps rotations between keys.
  - `SplineSet` groups several tracks, keys them together and evaluates them
    as a tuple.

## Installing

```
pip install .
```

## Example

```python
from meshkit.build import from_poly
from meshkit.checks import validate
from meshkit.convert import to_mesh
from meshkit.vecmath import Vec3

square = from_poly(
    [[0, 1, 2, 3]],
    [Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(1, 1, 0), Vec3(0, 1, 0)],
)
validate(square)
print(square.has_boundary(), square.n_boundaries())  # True 1
triangles = to_mesh(square, split_faces=False)
print(triangles.elems)  # [0, 1, 2, 0, 2, 3]
```

## What it does not do

- It does not render or display meshes. `to_mesh` only produces vertex and
  index lists.
- It has no mesh editing operations: no edge flip, split or collapse, no
  bevels, no triangulation pass, no subdivision and no remeshing. The
  `new_pos` and `is_new` fields on elements are there for such code to use.
- It does not read or write mesh files.
- It has no cubic interpolation of vectors or numbers. To add one, subclass
  `KeyframeTrack` and implement `at`.
- It has no command-line program.

## Running the tests

```
pip install .[test]
pytest
```