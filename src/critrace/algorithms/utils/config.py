"""Module-level switches shared by the compiled kernels."""

FASTMATH = False  # Global flag for Numba's fastmath option

TOL = 1e-10  # Default Newton tolerance on the update step
