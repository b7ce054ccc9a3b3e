"""
Repository Interface Definitions

Defines the abstract interface for analysis persistence so the service layer
does not depend on a concrete MongoDB deployment.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class WriteResult:
    """
    Result of an insert.

    Attributes:
        inserted_id: String form of the new document's _id
        acknowledged: Whether the server acknowledged the write
    """
    inserted_id: Optional[str]
    acknowledged: bool = True


class AnalysisRepositoryInterface(ABC):
    """
    Abstract interface for the analyses collection.

    Records are insert-only: this system never updates or deletes them.
    All methods are fail-fast; callers decide whether errors are fatal.
    """

    @abstractmethod
    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        """
        Insert one analysis document.

        Args:
            document: Analysis document (see src.common.types.AnalysisRecord)

        Returns:
            WriteResult with inserted_id set
        """
        pass

    @abstractmethod
    def find_by_username(self, github_username: str, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Analyses for one handle, newest first.

        Args:
            github_username: GitHub handle
            limit: Maximum documents to return

        Returns:
            List of documents (no __v, _id as string)
        """
        pass

    @abstractmethod
    def find_recent(self, limit: int = 100) -> List[Dict[str, Any]]:
        """
        Most recent analyses across all handles, newest first.

        Args:
            limit: Maximum documents to return
        """
        pass

    @abstractmethod
    def ensure_indexes(self) -> None:
        """Create the username and (username, createdAt desc) indexes."""
        pass
