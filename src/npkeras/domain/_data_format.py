"""
Enumerated backend arguments.

This module defines the small, closed sets of string-valued arguments the
backend accepts (image data layouts, resize interpolation methods,
convolution padding modes and learning phases) together with strict parsers
that normalize user-facing strings and reject anything else with a
`ValueError`.

The design intentionally avoids any NumPy dependency so these enumerations
can be shared by the domain and infrastructure layers alike.
"""

from enum import Enum, IntEnum


class DataFormat(Enum):
    """
    Layout of image-like tensors.

    Attributes
    ----------
    CHANNELS_FIRST : DataFormat
        (batch, channels, *spatial) layout, i.e. NCHW for 4D tensors.
    CHANNELS_LAST : DataFormat
        (batch, *spatial, channels) layout, i.e. NHWC for 4D tensors.
    """

    CHANNELS_FIRST = "channels_first"
    CHANNELS_LAST = "channels_last"

    @classmethod
    def parse(cls, value: str) -> "DataFormat":
        """
        Parse a data format string.

        Parameters
        ----------
        value : str
            Either "channels_first" or "channels_last".

        Returns
        -------
        DataFormat
            The matching enumeration member.

        Raises
        ------
        ValueError
            If `value` is not one of the supported layouts.
        """
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(
            f"Invalid `data_format` argument: {value}. "
            "Expected 'channels_first' or 'channels_last'."
        )

    @property
    def spatial_axes(self) -> tuple[int, int]:
        """
        Return the (rows, cols) axes of a 4D tensor in this layout.
        """
        return (2, 3) if self is DataFormat.CHANNELS_FIRST else (1, 2)


class Interpolation(Enum):
    """
    Image resize interpolation methods known to graph engines.

    Only `NEAREST` and `BILINEAR` are executed by the NumPy engine; the
    remaining members are recognized so that requesting them reports an
    unsupported operation rather than an invalid argument.
    """

    AREA = "area"
    BICUBIC = "bicubic"
    BILINEAR = "bilinear"
    GAUSSIAN = "gaussian"
    LANCZOS3 = "lanczos3"
    LANCZOS5 = "lanczos5"
    MITCHELLCUBIC = "mitchellcubic"
    NEAREST = "nearest"

    @classmethod
    def parse(cls, value: str) -> "Interpolation":
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        choices = ", ".join(sorted(m.value for m in cls))
        raise ValueError(
            f"`interpolation` argument should be one of: {choices}. "
            f"Received: interpolation={value}."
        )

    @property
    def is_supported(self) -> bool:
        return self in (Interpolation.NEAREST, Interpolation.BILINEAR)


class PaddingMode(Enum):
    """
    Convolution padding modes.

    Parsing is case-insensitive; `str(mode)` yields the upper-case engine
    spelling ("VALID" / "SAME").
    """

    VALID = "VALID"
    SAME = "SAME"

    @classmethod
    def parse(cls, value: str) -> "PaddingMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        raise ValueError(f"Invalid padding: {value}")

    def __str__(self) -> str:
        return self.value


class GraphLearningPhase(IntEnum):
    """
    Learning phase flag kept per graph.

    Attributes
    ----------
    TEST_MODE : GraphLearningPhase
        Inference behavior (value 0).
    TRAIN_MODE : GraphLearningPhase
        Training behavior (value 1).
    """

    TEST_MODE = 0
    TRAIN_MODE = 1

    @classmethod
    def parse(cls, value: object) -> "GraphLearningPhase":
        """
        Parse a learning phase from a bool or the integers 0 / 1.

        Raises
        ------
        ValueError
            If `value` is anything else.
        """
        if isinstance(value, bool):
            return cls.TRAIN_MODE if value else cls.TEST_MODE
        if value in (0, 1):
            return cls(int(value))
        raise ValueError("Expected learning phase to be 0 or 1.")
