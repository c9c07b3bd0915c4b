"""Seedable per-pixel random number streams for kernels.

Taichi's built-in ``ti.random`` draws from per-thread states whose assignment
to pixels depends on scheduling, so two runs with the same seed need not
agree. Instead, each stream here is a 32-bit xorshift state stored in a
field, and pixel (x, y) of a width-W image always draws from stream
``y * W + x``. Seeding hashes (seed, stream index) into every state, so a
render is a pure function of the scene and the seed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.core.sampling import seed_streams, random_f32
    >>> seed_streams(1234)
    1234
    >>> # Use random_f32(stream) within a Taichi kernel
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from lightpath.core.config import MAX_IMAGE_PIXELS

vec3 = tm.vec3

# One stream per pixel of the largest supported image
MAX_STREAMS = MAX_IMAGE_PIXELS

# Rejection sampling gives up after this many draws and returns the origin
MAX_REJECTION_ATTEMPTS = 100

_rng_states = ti.field(dtype=ti.u32, shape=MAX_STREAMS)

# Set once any streams have been seeded in this process
_streams_seeded = False


@ti.func
def _wang_hash(value: ti.u32) -> ti.u32:
    h = (value ^ ti.u32(61)) ^ (value >> ti.u32(16))
    h *= ti.u32(9)
    h = h ^ (h >> ti.u32(4))
    h *= ti.u32(668265261)
    h = h ^ (h >> ti.u32(15))
    return h


@ti.kernel
def _seed_kernel(seed: ti.u32, count: ti.i32):
    for i in range(count):
        state = _wang_hash(seed ^ _wang_hash(ti.cast(i, ti.u32) + ti.u32(1)))
        # xorshift never leaves the all-zero state
        if state == ti.u32(0):
            state = ti.u32(625341585)
        _rng_states[i] = state


def random_seed() -> int:
    """Draw a fresh 32-bit seed from the operating system's entropy."""
    return int(np.random.default_rng().integers(0, 2**32))


def seed_streams(seed: int | None = None, count: int = MAX_STREAMS) -> int:
    """Seed the first ``count`` random streams.

    Args:
        seed: Any integer; only its low 32 bits are used. None draws one
            with ``random_seed``.
        count: Number of streams to seed.

    Returns:
        The 32-bit seed actually used.

    Raises:
        ValueError: If ``count`` is outside [1, MAX_STREAMS].
    """
    if not 1 <= count <= MAX_STREAMS:
        raise ValueError(f"Stream count {count} must lie in [1, {MAX_STREAMS}]")
    global _streams_seeded

    if seed is None:
        seed = random_seed()
    seed &= 0xFFFFFFFF
    _seed_kernel(seed, count)
    _streams_seeded = True
    return seed


def ensure_streams_seeded() -> None:
    """Seed every stream randomly unless some seeding already happened."""
    if not _streams_seeded:
        seed_streams()


# =============================================================================
# Kernel-side draws
# =============================================================================


@ti.func
def next_u32(stream: ti.i32) -> ti.u32:
    """Advance a stream by one xorshift32 step and return the new state."""
    x = _rng_states[stream]
    x ^= x << ti.u32(13)
    x ^= x >> ti.u32(17)
    x ^= x << ti.u32(5)
    _rng_states[stream] = x
    return x


@ti.func
def random_f32(stream: ti.i32) -> ti.f32:
    """Uniform float in [0, 1) built from the top 24 bits of the next state."""
    return ti.cast(next_u32(stream) >> ti.u32(8), ti.f32) * (1.0 / 16777216.0)


@ti.func
def random_range(stream: ti.i32, low: ti.f32, high: ti.f32) -> ti.f32:
    return low + (high - low) * random_f32(stream)


@ti.func
def random_in_unit_sphere(stream: ti.i32) -> vec3:
    """Uniform random point strictly inside the unit ball.

    Draws in the enclosing cube until the sample lands inside the ball.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = vec3(
                random_range(stream, -1.0, 1.0),
                random_range(stream, -1.0, 1.0),
                random_range(stream, -1.0, 1.0),
            )
            if tm.dot(candidate, candidate) < 1.0:
                p = candidate
                found = True
    return p


@ti.func
def random_in_unit_disc(stream: ti.i32) -> vec3:
    """Uniform random point (x, y, 0) strictly inside the unit disc."""
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = vec3(random_range(stream, -1.0, 1.0), random_range(stream, -1.0, 1.0), 0.0)
            if candidate.x * candidate.x + candidate.y * candidate.y < 1.0:
                p = candidate
                found = True
    return p


@ti.func
def random_unit_vector(stream: ti.i32) -> vec3:
    """Random unit vector: a unit-ball sample scaled to length 1."""
    return tm.normalize(random_in_unit_sphere(stream))
