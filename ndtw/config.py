"""
Configuration
-------------

Global options controlling how the Dynamic Time Warping engine guards its own workload.

Available Options
=================

**DTW Options**

- ``dtw.warn_cells`` : int (default: 1000000)
    Number of grid cells (``x_length * y_length``) above which an unconstrained DTW computation
    logs a performance warning.

- ``dtw.max_cells`` : int or None (default: None)
    Upper bound on the estimated work (``x_length * y_length * (1 + 2 * aside)``) of a single DTW
    computation. Engines exceeding it are rejected at construction. ``None`` disables the check.

Examples
========
>>> from ndtw import get_option, set_option, option_context
>>> get_option('dtw.warn_cells')
1000000
>>> set_option('dtw.max_cells', 10_000)
>>> with option_context('dtw.max_cells', None):
...     engine = dtw(long_series_a, long_series_b)
>>> get_option('dtw.max_cells')
10000
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Callable, Optional

from ndtw.logging import get_logger, raise_log

logger = get_logger(__name__)


class _Option:
    """Internal class representing a single configuration option."""

    def __init__(
        self,
        key: str,
        default_value: Any,
        description: str,
        validator: Optional[Callable] = None,
    ):
        self.key = key
        self.default_value = default_value
        self.description = description
        self.validator = validator
        self.value = default_value

    def set(self, value: Any) -> None:
        """Set the option value with validation."""
        if self.validator is not None:
            self.validator(value)
        self.value = value

    def reset(self) -> None:
        """Reset the option to its default value."""
        self.value = self.default_value

    def get(self) -> Any:
        """Get the current option value."""
        return self.value


class _OptionsManager:
    def __init__(self):
        """Manager for all ndtw configuration options."""
        dtw_warn_cells = _Option(
            key="dtw.warn_cells",
            default_value=10**6,
            description="Number of grid cells above which an unconstrained DTW computation "
            "logs a performance warning.",
            validator=self._validate_positive_int,
        )

        dtw_max_cells = _Option(
            key="dtw.max_cells",
            default_value=None,
            description="Upper bound on the estimated work of a single DTW computation. "
            "Larger problems are rejected at construction. None disables the check.",
            validator=self._validate_optional_positive_int,
        )

        self._options = {
            opt.key: opt
            for opt in [
                dtw_warn_cells,
                dtw_max_cells,
            ]
        }

    @staticmethod
    def _validate_positive_int(value: Any):
        """Validator for positive integers."""
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise_log(ValueError("Value must be a positive integer"), logger)

    @staticmethod
    def _validate_optional_positive_int(value: Any):
        """Validator for positive integers or None."""
        if value is None:
            return
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise_log(ValueError("Value must be a positive integer or None"), logger)

    def _find_option(self, pattern: str, check_unique: bool = False) -> list[_Option]:
        """Find options matching a pattern (supports both exact match and prefix match)."""
        if not pattern:
            raise_log(
                ValueError("Pattern must be non-empty"),
                logger,
            )

        if pattern == "all":
            return list(self._options.values())

        # Exact match
        if pattern in self._options:
            return [self._options[pattern]]

        # Prefix match (e.g., 'dtw' matches all 'dtw.*' options)
        matches = [
            opt
            for key, opt in self._options.items()
            if key.split(".")[0].startswith(pattern)
        ]
        if matches:
            if check_unique and len(matches) > 1:
                raise_log(
                    ValueError(
                        f"Pattern '{pattern}' matches multiple options: {[opt.key for opt in matches]}"
                        ". "
                        "Give a specific option."
                    ),
                    logger,
                )
            return matches

        raise_log(ValueError(f"No option found matching pattern: '{pattern}'"), logger)

    def get_option(self, pattern: str) -> Any:
        """Get the value of an option."""
        matches = self._find_option(pattern, check_unique=True)
        return matches[0].get()

    def set_option(self, pattern: str, value: Any) -> None:
        """Set the value of an option."""
        matches = self._find_option(pattern, check_unique=True)
        matches[0].set(value)

    def reset_option(self, pattern: str) -> None:
        """Reset option(s) to default value(s)."""
        matches = self._find_option(pattern, check_unique=False)
        for opt in matches:
            opt.reset()

    def describe_option(self, pattern: str) -> str:
        """Describe option(s) matching the pattern."""
        matches = self._find_option(pattern, check_unique=False)

        description_parts = []
        for opt in sorted(matches, key=lambda x: x.key):
            type_name = (
                "int" if opt.default_value is None else type(opt.default_value).__name__
            )
            desc = f"{opt.key} : {type_name}\n"
            desc += f"    {opt.description}\n"
            desc += f"    [default: {opt.default_value}] [currently: {opt.get()}]"
            description_parts.append(desc)

        return "\n\n".join(description_parts)

    @contextmanager
    def option_context(self, *args) -> Generator[None, None, None]:
        """Context manager to temporarily set options."""
        if len(args) % 2 != 0:
            raise_log(
                ValueError(
                    "option_context requires an even number of arguments (option-value pairs)"
                ),
                logger,
            )

        original_values = {}
        try:
            for pattern, value in zip(args[::2], args[1::2]):
                original_values[pattern] = self.get_option(pattern)
                self.set_option(pattern, value)

            yield
        finally:
            for key, value in original_values.items():
                self.set_option(key, value)


# Global options manager instance
_global_options = _OptionsManager()


def get_option(pat: str) -> Any:
    """
    Retrieves the value of the specified option.

    Available Options:

    - dtw.[warn_cells, max_cells]

    Parameters
    ----------
    pat
        The option key to retrieve. Must uniquely identify a single option.

    Returns
    -------
    Any
        The current value of the option.

    Raises
    ------
    ValueError
        If no option matches the pattern, or if the pattern is ambiguous.
    """
    return _global_options.get_option(pat)


def set_option(pat: str, value: Any) -> None:
    """
    Sets the value of the specified option.

    Parameters
    ----------
    pat
        The option key to set. Must uniquely identify a single option.
    value
        The new value for the option. Must be valid according to the option's validator.

    Raises
    ------
    ValueError
        If no option matches the pattern, if the pattern is ambiguous, or if the value is invalid for the option.
    """
    _global_options.set_option(pat, value)


def reset_option(pat: str) -> None:
    """
    Reset one or more options to their default value.

    Parameters
    ----------
    pat
        The option key or pattern to reset. Can match multiple options. Use `"all"` to reset all options.
    """
    _global_options.reset_option(pat)


def describe_option(pat: str) -> str:
    """
    Describe one or more options.

    Parameters
    ----------
    pat
        The option key or pattern to describe. Can match multiple options. Use `"all"` to describe all options.

    Returns
    -------
    str
        The description for the specified options.
    """
    return _global_options.describe_option(pat)


@contextmanager
def option_context(*args) -> Generator[None, None, None]:
    """
    Context manager to temporarily set options in the `with` statement context.

    Parameters
    ----------
    *args
        Pairs of (key, value) for options to set temporarily.

    Examples
    --------
    >>> from ndtw import option_context
    >>> with option_context('dtw.warn_cells', 100):
    ...     engine.cost()
    """
    with _global_options.option_context(*args):
        yield
