from .loader import load_config
from .models import (
    DeobConfig,
    FormattingConfig,
    OutputConfig,
    RenameConfig,
    StagesConfig,
)

__all__ = [
    "DeobConfig",
    "FormattingConfig",
    "OutputConfig",
    "RenameConfig",
    "StagesConfig",
    "load_config",
]
