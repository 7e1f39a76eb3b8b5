"""
RoundingMode — режимы округления десятичных результатов
"""

from enum import Enum
from typing import Union

from hypernum.core.errors import ValidationError


class RoundingMode(str, Enum):
    """
    Режим округления при отбрасывании дробных цифр.

    FLOOR/CEIL/DOWN/UP — направленные, без случая ничьей.
    HALF_* — к ближайшему; различаются только разрешением ничьей.
    """

    FLOOR = "FLOOR"
    CEIL = "CEIL"
    DOWN = "DOWN"
    UP = "UP"
    HALF_EVEN = "HALF_EVEN"
    HALF_UP = "HALF_UP"
    HALF_DOWN = "HALF_DOWN"


def coerce_rounding_mode(mode: Union[RoundingMode, str]) -> RoundingMode:
    """
    Приведение имени режима к RoundingMode.

    Args:
        mode: RoundingMode или его имя (регистр не важен)

    Raises:
        ValidationError: Если режим неизвестен
    """
    if isinstance(mode, RoundingMode):
        return mode
    if isinstance(mode, str) and mode.strip().upper() in RoundingMode.__members__:
        return RoundingMode[mode.strip().upper()]
    raise ValidationError(
        f"Unknown rounding mode: {mode!r}",
        context={"allowed": [m.value for m in RoundingMode]},
    )
