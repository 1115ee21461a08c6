from typing import Protocol, runtime_checkable


@runtime_checkable
class ThermoModel(Protocol):
    """Protocol for the thermodynamic models consumed by the tracer.

    Both methods are evaluated under :mod:`jax` transformations, so an
    implementation must be written with :mod:`jax.numpy` operations and must
    not convert its arguments to Python floats.
    """

    def alphar(self, T, rhotot, molefrac):
        """Reduced residual Helmholtz energy ``a^r / (R T)``.

        Parameters
        ----------
        T : float
            Temperature in K.
        rhotot : float
            Total molar concentration in mol/m^3.
        molefrac : array_like
            Mole fractions, same length as the component list.

        Returns
        -------
        float
            Dimensionless residual Helmholtz energy.
        """
        ...

    def R(self, molefrac):
        """Mixture gas constant in J/(mol K)."""
        ...
