"""
Configuration accessors shared by backend implementations.

`BackendBase` owns a `BackendConfig` and exposes the Keras-style global
settings (`epsilon`, `floatx`, `image_data_format`) as getter/setter pairs.
Concrete backends inherit from it and read these settings when forwarding
operations.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ...domain._data_format import DataFormat
from ..config._config import BackendConfig, load_config, validate_epsilon, validate_floatx


class BackendBase:
    """
    Base class holding backend-wide settings.

    Parameters
    ----------
    config : Optional[BackendConfig]
        Explicit settings. When None, settings are loaded from the user's
        `keras.json` (or defaults if absent).
    """

    def __init__(self, config: Optional[BackendConfig] = None) -> None:
        self._config = config if config is not None else load_config()

    @property
    def config(self) -> BackendConfig:
        return self._config

    def epsilon(self) -> float:
        """Return the fuzz factor used in numeric expressions."""
        return self._config.epsilon

    def set_epsilon(self, value: float) -> None:
        self._config.epsilon = validate_epsilon(value)

    def floatx(self) -> str:
        """Return the default float dtype name, e.g. "float32"."""
        return self._config.floatx

    def set_floatx(self, value: str) -> None:
        """
        Set the default float dtype name.

        Raises
        ------
        ValueError
            If `value` is not float16, float32 or float64.
        """
        self._config.floatx = validate_floatx(str(value))

    def image_data_format(self) -> str:
        """Return the default image layout ("channels_last" or "channels_first")."""
        return self._config.image_data_format

    def set_image_data_format(self, data_format: str) -> None:
        """
        Set the default image layout.

        Raises
        ------
        ValueError
            If `data_format` is not a known layout.
        """
        self._config.image_data_format = DataFormat.parse(data_format).value

    def normalize_data_format(self, value: Optional[str]) -> str:
        """
        Return `value` validated, or the configured default when it is None.
        """
        if value is None:
            value = self.image_data_format()
        return DataFormat.parse(value.lower() if isinstance(value, str) else value).value

    def cast_to_floatx(self, x: Any) -> np.ndarray:
        """Cast a NumPy array or Python value to the default float dtype."""
        return np.asarray(x, dtype=self.floatx())
