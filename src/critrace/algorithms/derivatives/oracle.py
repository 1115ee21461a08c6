"""Higher-order derivatives of scalar functions of one variable.

The tracer needs derivatives of up to fourth order along a direction in
concentration space. Repeated finite differencing loses most significant
digits at that order, so derivatives are taken with forward composition of
:func:`jax.grad`, which is exact up to round-off and has no step size.
"""

from typing import Callable, Protocol, runtime_checkable

import jax
import jax.numpy as jnp


@runtime_checkable
class DerivativeOracle(Protocol):
    """Protocol for the differentiation oracle.

    An oracle receives a scalar function of one real argument and returns
    the function value together with its derivatives. Implementations must
    be traceable by :mod:`jax` because they are called inside compiled
    kernels.
    """

    def derivatives(self, f: Callable, x, order: int):
        """Return ``[f(x), f'(x), ..., f^(order)(x)]``."""
        ...


class JaxDerivativeOracle:
    """Derivative oracle based on nested :func:`jax.grad`.

    Examples
    --------
    >>> oracle = JaxDerivativeOracle()
    >>> oracle.derivatives(lambda s: s ** 4, 1.0, 4)
    Array([ 1.,  4., 12., 24., 24.], dtype=float64)
    """

    def derivatives(self, f: Callable, x, order: int):
        if order < 0:
            raise ValueError("order must be non-negative")
        funcs = [f]
        for _ in range(order):
            funcs.append(jax.grad(funcs[-1]))
        return jnp.stack([jnp.asarray(g(x), dtype=jnp.float64) for g in funcs])
