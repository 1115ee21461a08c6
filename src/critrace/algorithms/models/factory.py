"""Build models from a textual description.

A description is a mapping (or its JSON encoding) of the form::

    {"kind": "vdW", "model": {"Tcrit / K": [...], "pcrit / Pa": [...]}}

Kinds are looked up in a registry filled with :func:`register_model`, so
adding a new equation of state does not require touching the tracer.
"""

import json
from typing import Any, Callable, Mapping

from critrace.algorithms.types.exceptions import InvalidInputError
from critrace.utils.log_config import logger

_REGISTRY: dict[str, Callable[[dict], Any]] = {}


def register_model(kind: str, builder: Callable[[dict], Any] | None = None):
    """Register a model builder under ``kind``.

    Used either as a class decorator (the class must provide a
    ``from_spec`` class method) or called directly with ``builder``.

    Examples
    --------
    >>> @register_model("myeos")
    ... class MyEOS:
    ...     @classmethod
    ...     def from_spec(cls, spec):
    ...         return cls()
    """
    if builder is not None:
        _REGISTRY[kind] = builder
        return builder

    def decorator(cls):
        _REGISTRY[kind] = cls.from_spec
        return cls

    return decorator


def available_models() -> list[str]:
    return sorted(_REGISTRY)


def build_model(description: str | Mapping[str, Any]):
    """Instantiate a model from its description.

    Parameters
    ----------
    description : str or Mapping
        Mapping with keys ``"kind"`` and ``"model"``, or its JSON string.

    Returns
    -------
    ThermoModel
        The constructed model.

    Raises
    ------
    InvalidInputError
        If the description is malformed or names an unknown kind.
    """
    if isinstance(description, str):
        try:
            description = json.loads(description)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Model description is not valid JSON: {exc}") from exc

    try:
        kind = description["kind"]
        spec = description["model"]
    except (KeyError, TypeError) as exc:
        raise InvalidInputError("Model description needs 'kind' and 'model' entries") from exc

    builder = _REGISTRY.get(kind)
    if builder is None:
        raise InvalidInputError(f"Unknown kind: {kind}")

    try:
        model = builder(spec)
    except KeyError as exc:
        raise InvalidInputError(f"Missing parameter {exc} for model kind {kind}") from exc

    logger.debug("Built %s model", kind)
    return model
