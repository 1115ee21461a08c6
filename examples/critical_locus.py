"""Example script: critical locus of a binary van der Waals mixture, traced
from the critical point of the first component, with every point polished
at fixed composition.

Run with
    python examples/critical_locus.py
"""

import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from critrace import CriticalLocusTracer, ContinuationOptions, build_model
from critrace.utils.io.common import _ensure_dir
from critrace.utils.log_config import logger

_RESULTS_DIR = "results"

# argon + methane
_MODEL = {
    "kind": "vdW",
    "model": {
        "Tcrit / K": [150.687, 190.564],
        "pcrit / Pa": [4.863e6, 4.5992e6],
    },
}


def main() -> None:
    _ensure_dir(_RESULTS_DIR)

    model = build_model(_MODEL)
    T0, rhovec0 = model.pure_critical_point(0)
    logger.info("Starting from T=%.3f K, rhovec=%s", T0, rhovec0)

    tracer = CriticalLocusTracer.with_default_engine(
        config=ContinuationOptions(polish=True, verbose=True)
    )
    result = tracer.trace(
        model, T0, rhovec0,
        filename=os.path.join(_RESULTS_DIR, "critical_locus_progress.csv"),
    )
    logger.info("%r", result)
    if result.error is not None:
        logger.warning("Trace ended with %s", result.error)

    result.to_csv(os.path.join(_RESULTS_DIR, "critical_locus.csv"))
    result.save(os.path.join(_RESULTS_DIR, "critical_locus.h5"))
    result.plot(save=True, filepath=os.path.join(_RESULTS_DIR, "critical_locus.svg"))


if __name__ == "__main__":
    main()
