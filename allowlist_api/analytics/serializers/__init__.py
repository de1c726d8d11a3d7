from .stats import (
    AllowlistStatsSerializer,
    AllowlistStatsResponseSerializer,
)
