"""Base class for solvers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from clusterpt import console, printing
from clusterpt.representations.enums import RepresentationEnum

if TYPE_CHECKING:
    from typing import Any


class BaseSolver(ABC):
    """Base class for solvers."""

    _options: set[str] = set()

    def __init_subclass__(cls, *args: Any, **kwargs: Any) -> None:
        """Initialise a subclass of :class:`BaseSolver`."""

        def wrap_init(init: Any) -> Any:
            """Wrapper to call __post_init__ after __init__."""

            def wrapped_init(self: BaseSolver, *args: Any, **kwargs: Any) -> None:
                init(self, *args, **kwargs)
                if init.__name__ == "__init__":
                    self.__log_init__()
                    self.__post_init__()

            return wrapped_init

        def wrap_kernel(kernel: Any) -> Any:
            """Wrapper to call __post_kernel__ after kernel."""

            def wrapped_kernel(self: BaseSolver, *args: Any, **kwargs: Any) -> Any:
                result = kernel(self, *args, **kwargs)
                if kernel.__name__ == "kernel":
                    self.__post_kernel__()
                return result

            return wrapped_kernel

        cls.__init__ = wrap_init(cls.__init__)  # type: ignore[method-assign]
        cls.kernel = wrap_kernel(cls.kernel)  # type: ignore[method-assign]

    def __log_init__(self) -> None:
        """Hook called after :meth:`__init__` for logging purposes."""
        printing.init_console()
        console.print("")

        # Print the solver name
        console.print(f"[method]{self.__class__.__name__}[/method]")

        # Print the options table
        rows = []
        for key in sorted(self._options):
            if not hasattr(self, key):
                raise ValueError(f"Option {key} not set in {self.__class__.__name__}")
            rows.append((key, printing.format_option(getattr(self, key))))
        printing.print_table(("Option", "Value"), rows)

    def __post_init__(self) -> None:
        """Hook called after :meth:`__init__`."""
        pass

    def __post_kernel__(self) -> None:
        """Hook called after :meth:`kernel`."""
        pass

    def set_options(self, **kwargs: Any) -> None:
        """Set options for the solver.

        Args:
            kwargs: Keyword arguments to set as options.
        """
        for key, val in kwargs.items():
            if key not in self._options:
                raise ValueError(f"Unknown option for {self.__class__.__name__}: {key}")
            if isinstance(getattr(self, key, None), RepresentationEnum):
                # Casts string to the appropriate enum type if the default value is an enum
                val = getattr(self, key).__class__(val)
            setattr(self, key, val)

    @abstractmethod
    def kernel(self) -> Any:
        """Run the solver."""
        pass
