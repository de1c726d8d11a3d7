from .clean_model import CleanModel, TimestampedCleanModel
from .mock_model import MockModel
from .errors import (
    ErrorCode,
    ALL_ERROR_CODES
)
