"""Butcher tableau of the Cash-Karp embedded 5(4) pair.

References
----------
Cash, J. R.; Karp, A. H. (1990). "A variable order Runge-Kutta method for
initial value problems with rapidly varying right-hand sides".
"""

import numpy as np

C = np.array([0.0, 1.0 / 5.0, 3.0 / 10.0, 3.0 / 5.0, 1.0, 7.0 / 8.0], dtype=np.float64)

A = np.array([
    [0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [1.0 / 5.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [3.0 / 40.0, 9.0 / 40.0, 0.0, 0.0, 0.0, 0.0],
    [3.0 / 10.0, -9.0 / 10.0, 6.0 / 5.0, 0.0, 0.0, 0.0],
    [-11.0 / 54.0, 5.0 / 2.0, -70.0 / 27.0, 35.0 / 27.0, 0.0, 0.0],
    [1631.0 / 55296.0, 175.0 / 512.0, 575.0 / 13824.0, 44275.0 / 110592.0, 253.0 / 4096.0, 0.0],
], dtype=np.float64)

# fifth-order weights
B_HIGH = np.array([37.0 / 378.0, 0.0, 250.0 / 621.0, 125.0 / 594.0, 0.0, 512.0 / 1771.0], dtype=np.float64)

# embedded fourth-order weights
B_LOW = np.array([
    2825.0 / 27648.0, 0.0, 18575.0 / 48384.0, 13525.0 / 55296.0, 277.0 / 14336.0, 1.0 / 4.0,
], dtype=np.float64)

E = B_HIGH - B_LOW

ORDER = 5
ERROR_ORDER = 4
