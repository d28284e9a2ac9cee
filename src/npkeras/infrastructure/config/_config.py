"""
Backend configuration loading and persistence.

The backend reads three user-tunable settings from a JSON file, the same way
Keras reads `keras.json`:

- `floatx`            : default float dtype name ("float16" | "float32" | "float64")
- `epsilon`           : fuzz factor used by losses to avoid log(0)
- `image_data_format` : "channels_last" (default) or "channels_first"

File location
-------------
`$NPKERAS_HOME/keras.json`, where `NPKERAS_HOME` defaults to `~/.npkeras`.

Failure behavior
----------------
- A missing file yields the defaults.
- A file that is not valid JSON (or not a JSON object) yields the defaults and
  emits a `RuntimeWarning`.
- A well-formed file carrying invalid values raises `ValueError`.
"""

from __future__ import annotations

import json
import os
import warnings
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from typing_extensions import Self

from ...domain._data_format import DataFormat

CONFIG_FILENAME = "keras.json"
HOME_ENV_VAR = "NPKERAS_HOME"

_ALLOWED_FLOATX = ("float16", "float32", "float64")


def config_dir() -> Path:
    """Return the directory holding the configuration file."""
    env = os.environ.get(HOME_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".npkeras"


def validate_floatx(value: str) -> str:
    """
    Validate a floatx dtype name.

    Raises
    ------
    ValueError
        If `value` is not one of float16/float32/float64.
    """
    if value not in _ALLOWED_FLOATX:
        raise ValueError(
            f"Unknown floatx type: {value!r}. Expected one of {_ALLOWED_FLOATX}."
        )
    return value


def validate_epsilon(value: Any) -> float:
    """Validate the fuzz factor; it must be a non-negative real number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"epsilon must be a number, got {value!r}.")
    if value < 0:
        raise ValueError(f"epsilon must be non-negative, got {value!r}.")
    return float(value)


@dataclass
class BackendConfig:
    """
    Mutable backend settings.

    Attributes
    ----------
    floatx : str
        Default float dtype name.
    epsilon : float
        Fuzz factor used in numeric expressions.
    image_data_format : str
        Default layout for image-like tensors.
    """

    floatx: str = "float32"
    epsilon: float = 1e-7
    image_data_format: str = field(default=DataFormat.CHANNELS_LAST.value)

    def __post_init__(self) -> None:
        self.floatx = validate_floatx(self.floatx)
        self.epsilon = validate_epsilon(self.epsilon)
        self.image_data_format = DataFormat.parse(self.image_data_format).value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        """
        Build a config from a mapping, ignoring unknown keys (e.g. "backend").
        """
        defaults = cls()
        return cls(
            floatx=data.get("floatx", defaults.floatx),
            epsilon=data.get("epsilon", defaults.epsilon),
            image_data_format=data.get(
                "image_data_format", defaults.image_data_format
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: Optional[Path] = None) -> BackendConfig:
    """
    Load the backend configuration.

    Parameters
    ----------
    path : Optional[Path]
        Explicit path to a JSON file. Defaults to `config_dir() / "keras.json"`.

    Returns
    -------
    BackendConfig
        The parsed configuration, or defaults if the file is absent/unreadable.
    """
    path = Path(path) if path is not None else config_dir() / CONFIG_FILENAME
    if not path.exists():
        return BackendConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        warnings.warn(
            f"Could not read backend config at {path}; using defaults. Reason: {e}",
            RuntimeWarning,
            stacklevel=2,
        )
        return BackendConfig()

    if not isinstance(data, dict):
        warnings.warn(
            f"Backend config at {path} is not a JSON object; using defaults.",
            RuntimeWarning,
            stacklevel=2,
        )
        return BackendConfig()

    return BackendConfig.from_mapping(data)


def save_config(config: BackendConfig, path: Optional[Path] = None) -> Path:
    """
    Write `config` as JSON and return the path written.
    """
    path = Path(path) if path is not None else config_dir() / CONFIG_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=4), encoding="utf-8")
    return path
