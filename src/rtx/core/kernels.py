"""Compiled render kernels.

The hot path of a render runs here as numba ``njit`` functions over flat
arrays, so rows really run in parallel on all cores instead of taking turns
on the interpreter lock. The object-level API (Sphere.distance,
random_bounce_dir, ...) calls the same functions, so both paths share one
implementation of every intersection and bounce formula.

Scene layout, one row per object:

    shape_types: int64[n], one of SPHERE, PLANE, TRIANGLE
    geometry: float64[n, GEOMETRY_SIZE]
        sphere:   center[0:3], radius[3]
        plane:    point[0:3], normal[3:6]
        triangle: v0[0:3], edge1[3:6], edge2[6:9], normal[9:12]
    materials: float64[n, MATERIAL_SIZE]
        base_color[0:3], emission_color[3:6], roughness[6]

Randomness uses counter-based splitmix64 streams. Every sample gets its own
stream seeded from (key, row, sample index), so the image does not depend on
the number of threads or on the order rows finish in.

Distances use ``NO_HIT`` (infinity) for a miss.
"""

import math

import numpy as np
from numba import njit, prange

# Shape tags, equal to rtx.geometry.ShapeType
SPHERE = 0
PLANE = 1
TRIANGLE = 2

GEOMETRY_SIZE = 12
MATERIAL_SIZE = 7

NO_HIT = math.inf

# Discriminants at or below this are treated as a miss
DISCRIMINANT_EPSILON = 1e-100

# Pivots smaller than this make the edge system unsolvable
PIVOT_EPSILON = 1e-12

# Allowed distance of a point from the triangle's plane, relative to its size
PLANE_TOLERANCE = 1e-6

# =============================================================================
# Random streams (splitmix64)
# =============================================================================

# uint64 only: mixing in Python ints makes numba promote to float64
_GAMMA = np.uint64(0x9E3779B97F4A7C15)
_MIX1 = np.uint64(0xBF58476D1CE4E5B9)
_MIX2 = np.uint64(0x94D049BB133111EB)
_SHIFT30 = np.uint64(30)
_SHIFT27 = np.uint64(27)
_SHIFT31 = np.uint64(31)
_SHIFT11 = np.uint64(11)
_UNIT_SCALE = 2.0**-53


@njit(cache=True)
def mix64(z):
    """The splitmix64 finalizer, a bijection on uint64."""
    z = (z ^ (z >> _SHIFT30)) * _MIX1
    z = (z ^ (z >> _SHIFT27)) * _MIX2
    return z ^ (z >> _SHIFT31)


@njit(cache=True)
def fold_seed(words):
    """Fold an array of uint64 words into a single 64-bit key."""
    key = np.uint64(0)
    for word in words:
        key = mix64((key ^ word) + _GAMMA)
    return key


@njit(cache=True)
def stream_seed(key, row, index):
    """Starting state of the stream for sample ``index`` of image row ``row``."""
    z = mix64(np.uint64(key) + np.uint64(row) * _GAMMA)
    return mix64(z + np.uint64(index) * _GAMMA)


@njit(cache=True)
def next_uniform(state):
    """Advance a one-element uint64 state array and return a float in [0, 1)."""
    state[0] += _GAMMA
    return (mix64(state[0]) >> _SHIFT11) * _UNIT_SCALE


# =============================================================================
# Vector helpers
# =============================================================================


@njit(cache=True)
def dot3(a, b):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


@njit(cache=True)
def normalize3(v):
    """Unit vector along v, or zeros for a zero vector."""
    n = math.sqrt(dot3(v, v))
    if n == 0.0:
        return np.zeros(3)
    return v / n


@njit(cache=True)
def unit_vector_from(u1, u2):
    """Map two uniforms in [0, 1) to a point on the unit sphere.

    Cylindrical equal-area mapping: z = 2 * u1 - 1, azimuth = 2 * pi * u2.
    """
    z = u1 * 2.0 - 1.0
    theta = u2 * 2.0 * math.pi
    r = math.sqrt(max(0.0, 1.0 - z * z))
    out = np.empty(3)
    out[0] = r * math.cos(theta)
    out[1] = r * math.sin(theta)
    out[2] = z
    return normalize3(out)


# =============================================================================
# Intersection
# =============================================================================


@njit(cache=True)
def sphere_distance(center, radius, position, direction):
    offset = position - center
    d = normalize3(direction)
    a = dot3(d, d)
    if a == 0.0:
        return NO_HIT
    b = 2.0 * dot3(offset, d)
    c = dot3(offset, offset) - radius * radius
    discriminant = b * b - 4.0 * a * c
    if discriminant <= DISCRIMINANT_EPSILON:
        return NO_HIT
    t = (-b - math.sqrt(discriminant)) / (2.0 * a)
    if t <= 0.0:
        return NO_HIT
    return t


@njit(cache=True)
def plane_distance(point, normal, position, direction):
    d = normalize3(direction)
    facing = dot3(d, normal)
    side = dot3(position - point, normal)
    # either the ray is going away from the plane or it starts behind it
    if facing >= 0.0 or side <= 0.0:
        return NO_HIT
    return -side / facing


@njit(cache=True)
def solve_edge_system(edge1, edge2, target):
    """Solve a * edge1 + b * edge2 = target by Gaussian elimination.

    Each unknown is eliminated using the row with the largest magnitude entry
    as pivot (the first one on ties). The leftover row is the residual.

    Returns:
        Tuple (solved, a, b, residual). ``solved`` is False when the edges are
        (nearly) collinear; the other values are then meaningless.
    """
    rows = np.empty((3, 3))
    for i in range(3):
        rows[i, 0] = edge1[i]
        rows[i, 1] = edge2[i]
        rows[i, 2] = target[i]

    for col in range(2):
        pivot = col
        for i in range(col + 1, 3):
            if abs(rows[i, col]) > abs(rows[pivot, col]):
                pivot = i
        if not abs(rows[pivot, col]) >= PIVOT_EPSILON:
            return False, 0.0, 0.0, 0.0
        for j in range(3):
            tmp = rows[col, j]
            rows[col, j] = rows[pivot, j]
            rows[pivot, j] = tmp
        scale = rows[col, col]
        for j in range(3):
            rows[col, j] /= scale
        for i in range(3):
            if i != col:
                factor = rows[i, col]
                for j in range(3):
                    rows[i, j] -= rows[col, j] * factor

    return True, rows[0, 2], rows[1, 2], rows[2, 2]


@njit(cache=True)
def triangle_contains(v0, edge1, edge2, point):
    p = point - v0
    solved, a, b, residual = solve_edge_system(edge1, edge2, p)
    if not solved:
        return False
    scale = max(1.0, math.sqrt(dot3(p, p)))
    if abs(residual) > PLANE_TOLERANCE * scale:
        return False
    return 0.0 <= a <= 1.0 and 0.0 <= b <= 1.0 and a + b <= 1.0


@njit(cache=True)
def triangle_distance(v0, edge1, edge2, normal, position, direction):
    d = normalize3(direction)
    facing = dot3(normal, d)
    if facing >= 0.0:
        return NO_HIT
    t = dot3(normal, v0 - position) / facing
    if not t > 0.0:
        return NO_HIT
    if not triangle_contains(v0, edge1, edge2, position + d * t):
        return NO_HIT
    return t


@njit(cache=True)
def shape_distance(shape_type, geometry, position, direction):
    """Distance along the ray to one packed shape, NO_HIT for a miss."""
    if shape_type == SPHERE:
        return sphere_distance(geometry[0:3], geometry[3], position, direction)
    if shape_type == PLANE:
        return plane_distance(geometry[0:3], geometry[3:6], position, direction)
    return triangle_distance(
        geometry[0:3], geometry[3:6], geometry[6:9], geometry[9:12], position, direction
    )


@njit(cache=True)
def shape_normal(shape_type, geometry, position):
    if shape_type == SPHERE:
        return normalize3(position - geometry[0:3])
    if shape_type == PLANE:
        return geometry[3:6].copy()
    return geometry[9:12].copy()


# =============================================================================
# Tracing
# =============================================================================


@njit(cache=True)
def bounce_direction(ray_dir, normal, roughness, u1, u2):
    """Blend a random unit vector with the mirror direction by 1 - roughness.

    The result is flipped when it points into the surface.
    """
    random_dir = unit_vector_from(u1, u2)
    reflected = ray_dir - normal * (2.0 * dot3(ray_dir, normal))
    final = normalize3(random_dir + (reflected - random_dir) * (1.0 - roughness))
    if dot3(final, normal) <= 0.0:
        final = -final
    return final


@njit(cache=True)
def primary_direction(to_world, fov, vertical_fov, x, y):
    """World-space direction through image coordinate (x, y), both in [0, 1)."""
    angle_x = fov * (x - 0.5)
    angle_y = vertical_fov * (y - 0.5)
    cam = np.empty(3)
    cam[0] = math.sin(angle_x)
    cam[1] = math.sin(angle_y)
    cam[2] = math.cos(angle_x) * math.cos(angle_y)
    out = np.empty(3)
    for i in range(3):
        out[i] = to_world[i, 0] * cam[0] + to_world[i, 1] * cam[1] + to_world[i, 2] * cam[2]
    return out


@njit(cache=True)
def trace_ray(position, direction, shape_types, geometry, materials, max_bounces,
              max_distance, state):
    """Bounce one ray through the packed scene and return the gathered light."""
    resulting = np.zeros(3)
    light = np.ones(3)
    count = shape_types.shape[0]
    if count == 0:
        return resulting

    pos = position.copy()
    d = direction.copy()
    for _ in range(max_bounces + 1):
        if light[0] == 0.0 and light[1] == 0.0 and light[2] == 0.0:
            break

        best = -1
        best_t = NO_HIT
        for i in range(count):
            t = shape_distance(shape_types[i], geometry[i], pos, d)
            if not math.isfinite(t) or t <= 0.0 or t > max_distance:
                continue
            if best < 0 or t < best_t:
                best = i
                best_t = t
        if best < 0:
            break

        pos = pos + d * best_t
        normal = shape_normal(shape_types[best], geometry[best], pos)
        material = materials[best]
        u1 = next_uniform(state)
        u2 = next_uniform(state)
        d = bounce_direction(d, normal, material[6], u1, u2)
        resulting = resulting + light * material[3:6]
        light = light * material[0:3]

    return resulting


@njit(cache=True)
def render_pixel_kernel(row, column, x, y, shape_types, geometry, materials,
                        camera_position, to_world, fov, vertical_fov, rays_per_pixel,
                        max_bounces, max_distance, focal_length, focal_offset,
                        non_focal_offset, key, state):
    """Average rays_per_pixel depth-of-field samples for one pixel."""
    ray_dir = primary_direction(to_world, fov, vertical_fov, x, y)
    focal_point = camera_position + ray_dir * focal_length
    jitter = np.empty(3)

    total = np.zeros(3)
    for sample in range(rays_per_pixel):
        state[0] = stream_seed(key, row, column * rays_per_pixel + sample)
        for i in range(3):
            jitter[i] = next_uniform(state)
        ray_position = camera_position + jitter * non_focal_offset
        for i in range(3):
            jitter[i] = next_uniform(state)
        target_point = focal_point + jitter * focal_offset
        total += trace_ray(
            ray_position,
            normalize3(target_point - ray_position),
            shape_types,
            geometry,
            materials,
            max_bounces,
            max_distance,
            state,
        )
    return total / rays_per_pixel


@njit(parallel=True, cache=True)
def render_rows(rows, width, height, shape_types, geometry, materials, camera_position,
                to_world, fov, vertical_fov, rays_per_pixel, max_bounces, max_distance,
                focal_length, focal_offset, non_focal_offset, key):
    """Render the given image rows in parallel.

    Returns:
        Array of shape (len(rows), width, 3).
    """
    image = np.zeros((rows.shape[0], width, 3))

    # Parallel loop over rows
    for i in prange(rows.shape[0]):
        row = rows[i]
        state = np.zeros(1, dtype=np.uint64)
        y = row / height
        for column in range(width):
            image[i, column] = render_pixel_kernel(
                row, column, column / width, y, shape_types, geometry, materials,
                camera_position, to_world, fov, vertical_fov, rays_per_pixel,
                max_bounces, max_distance, focal_length, focal_offset,
                non_focal_offset, key, state,
            )
    return image
