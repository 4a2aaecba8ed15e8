# Base log source interface

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional, Tuple
import logging

from .models import LogStream, LogEvent


class BaseLogSource(ABC):
    """
    Paginated log source. Each call returns one page plus the continuation
    token for the next one (None when the source reports no further page).
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self._initializeClient()

    @abstractmethod
    def _initializeClient(self) -> None:
        pass

    @abstractmethod
    def listGroups(self, prefix: str, token: Optional[str] = None) -> Tuple[List[str], Optional[str]]:
        pass

    @abstractmethod
    def listStreams(self, group: str, token: Optional[str] = None) -> Tuple[List[LogStream], Optional[str]]:
        # Ordered by last event time, newest first
        pass

    @abstractmethod
    def getEvents(
        self,
        group: str,
        stream: str,
        token: Optional[str] = None
    ) -> Tuple[List[LogEvent], Optional[str]]:
        # Read from the head of the stream, following forward tokens
        pass

    @abstractmethod
    def testConnection(self) -> bool:
        pass

    def getRequiredFields(self) -> List[str]:
        return []

    def validateConfig(self) -> bool:
        requiredFields = self.getRequiredFields()
        missingFields = [field for field in requiredFields if field not in self.config]

        if missingFields:
            self.logger.error(f"Missing required configuration fields: {missingFields}")
            return False

        return True

    def handleError(self, error: Exception, context: str) -> None:
        self.logger.error(f"Error in {context}: {str(error)}", exc_info=True)

    def getStatus(self) -> Dict[str, Any]:
        return {
            'source': self.__class__.__name__,
            'configValid': self.validateConfig(),
            'connected': self.testConnection()
        }
