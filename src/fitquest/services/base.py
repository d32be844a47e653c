"""
Base service class.

Services hold configuration and a logger; all state they act on is passed in
and returned, so a service instance can be shared freely.
"""

import logging
from abc import ABC
from typing import Optional

from ..config import Settings, get_settings


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging setup
    - Settings resolution
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    @property
    def settings(self) -> Settings:
        """Get the settings, falling back to the cached environment settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings
