"""Generic building blocks shared by every critrace pipeline.

A pipeline is assembled as facade -> engine -> interface -> backend. The
interface turns user input into an immutable problem and then into a
backend call, the backend does the numerical work, and the engine glues
the two together and maps backend failures onto library exceptions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from critrace.algorithms.types.exceptions import EngineError

ConfigT = TypeVar("ConfigT", bound=Union["_CritraceBaseConfig", None])

ProblemT = TypeVar("ProblemT", bound="_CritraceBaseProblem")

ResultT = TypeVar("ResultT")

OutputsT = TypeVar("OutputsT")

InterfaceT = TypeVar("InterfaceT", bound="_CritraceBaseInterface")


@dataclass(frozen=True)
class _BackendCall:
    """Describe a backend call with positional and keyword arguments."""

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


class _CritraceBaseProblem(ABC):
    """Marker base class for problem payloads produced by interfaces."""

    __slots__ = ()


class _CritraceBaseConfig(ABC):
    """Base class for frozen configuration dataclasses.

    Subclasses are declared with ``@dataclass(frozen=True)`` and implement
    :meth:`_validate`, which runs right after construction.
    """

    __slots__ = ()

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Validate the configuration. Raise ``ValueError`` on bad values."""
        return None


class _CritraceBaseBackend(Generic[OutputsT], ABC):
    """Base class for backends.

    Backends hold the numerical algorithm. They expose a ``run`` method and a
    few lifecycle hooks that subclasses (or tests) can override to observe
    progress without touching the algorithm itself.
    """

    def __init__(self) -> None:
        pass

    @abstractmethod
    def run(self, *args, **kwargs) -> OutputsT:
        """Run the backend."""
        ...

    def on_iteration(self, k: int, x: Any, r_norm: float) -> None:
        """Called after each iteration of the main algorithm.

        Parameters
        ----------
        k : int
            Current iteration number (0-based).
        x : Any
            Current solution estimate or state.
        r_norm : float
            Current residual norm or convergence metric.
        """
        return

    def on_accept(self, x: Any, *, iterations: int, residual_norm: float) -> None:
        """Called when the backend detects convergence or a successful step."""
        return

    def on_failure(self, x: Any, *, iterations: int, residual_norm: float) -> None:
        """Called when the backend completes without converging."""
        return


class _CritraceBaseInterface(Generic[ConfigT, ProblemT, ResultT, OutputsT], ABC):
    """Shared contract for translating between domain objects and backends."""

    def __init__(self) -> None:
        self._backend: _CritraceBaseBackend | None = None

    @abstractmethod
    def create_problem(self, *, config: ConfigT, **kwargs) -> ProblemT:
        """Compose an immutable problem payload for the backend."""

    @abstractmethod
    def to_backend_inputs(self, problem: ProblemT) -> _BackendCall:
        """Translate a problem into backend invocation arguments."""

    @abstractmethod
    def to_results(self, outputs: OutputsT, *, problem: ProblemT) -> ResultT:
        """Package backend outputs into user-facing result objects."""

    def bind_backend(self, backend: _CritraceBaseBackend) -> None:
        self._backend = backend

    def on_start(self, problem: ProblemT) -> None:
        return None

    def on_success(self, outputs: OutputsT, *, problem: ProblemT) -> None:
        return None

    def on_failure(self, exc: Exception, *, problem: ProblemT) -> None:
        return None


class _CritraceBaseEngine(Generic[ProblemT, ResultT, OutputsT], ABC):
    """Template providing the canonical engine flow."""

    def __init__(
        self,
        *,
        backend: _CritraceBaseBackend[OutputsT],
        interface: _CritraceBaseInterface[Any, ProblemT, ResultT, OutputsT] | None = None,
    ) -> None:
        self._backend = backend
        self._interface = interface

    @property
    def backend(self) -> _CritraceBaseBackend[OutputsT]:
        return self._backend

    def set_interface(self, interface: _CritraceBaseInterface[Any, ProblemT, ResultT, OutputsT]) -> None:
        self._interface = interface

    def solve(self, problem: ProblemT) -> ResultT:
        """Execute the standard engine orchestration for ``problem``."""
        interface = self._get_interface()
        interface.bind_backend(self._backend)
        call = interface.to_backend_inputs(problem)
        interface.on_start(problem)

        try:
            outputs = self._invoke_backend(call)
        except Exception as exc:
            interface.on_failure(exc, problem=problem)
            self._handle_backend_failure(exc, problem=problem, call=call)
            raise

        interface.on_success(outputs, problem=problem)
        return interface.to_results(outputs, problem=problem)

    def _get_interface(self) -> _CritraceBaseInterface[Any, ProblemT, ResultT, OutputsT]:
        if self._interface is None:
            raise EngineError(
                f"{self.__class__.__name__} must be configured with an interface before solving."
            )
        return self._interface

    def _handle_backend_failure(self, exc: Exception, *, problem: ProblemT, call: _BackendCall) -> None:
        raise EngineError(str(exc)) from exc

    def _invoke_backend(self, call: _BackendCall) -> OutputsT:
        return self._backend.run(*call.args, **call.kwargs)


class _CritraceBaseFacade(Generic[ConfigT, ProblemT, ResultT]):
    """Base class for user-facing facades.

    Facades own a frozen configuration and an engine. They are usually
    built with a ``with_default_engine`` class method that wires the
    default backend and interface together.
    """

    def __init__(self, config: ConfigT, interface, engine) -> None:
        self._make_pipeline(config, interface, engine)

    @classmethod
    @abstractmethod
    def with_default_engine(cls, *, config: ConfigT | None = None) -> "_CritraceBaseFacade[ConfigT, ProblemT, ResultT]":
        pass

    @property
    def config(self) -> ConfigT:
        return self._config

    def update_config(self, **kwargs) -> None:
        """Update configuration parameters.

        Parameters
        ----------
        **kwargs
            Configuration parameters to update. ``None`` values are ignored.

        Raises
        ------
        ValueError
            If the configuration parameter is not valid.
        """
        filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
        if not filtered_kwargs:
            return

        config_dict = {name: getattr(self._config, name) for name in self._config.__dataclass_fields__}
        for key, value in filtered_kwargs.items():
            if key not in config_dict:
                raise ValueError(f"Unknown configuration parameter: {key}")
            config_dict[key] = value

        self._config = type(self._config)(**config_dict)

    def _get_engine(self) -> _CritraceBaseEngine:
        return self._engine

    def _create_problem(self, *, config: ConfigT | None = None, **kwargs) -> ProblemT:
        return self._interface.create_problem(config=config if config is not None else self._config, **kwargs)

    def _make_pipeline(self, config, interface, engine) -> None:
        self._config: ConfigT = config
        self._interface = interface
        self._engine = engine
        self._engine.set_interface(interface)
        self._backend = engine.backend
        interface.bind_backend(self._backend)
