from abc import ABC, abstractmethod
from postgrest.exceptions import APIError
from supabase import Client
from app.core.errors import FileNotFound, StoreError
from app.modules.files.models import FILES_TABLE
from app.modules.files.schemas import File
from typing import List
import logging

logger = logging.getLogger(__name__)


class FileRepository(ABC):
    """Metadata store operations for file records."""

    @abstractmethod
    def create(self, file: File) -> None:
        pass

    @abstractmethod
    def get_by_id(self, file_id: str) -> File:
        """Raises FileNotFound on miss."""

    @abstractmethod
    def delete(self, file_id: str) -> None:
        """Raises FileNotFound on miss."""

    @abstractmethod
    def list_by_group_id(self, group_id: str) -> List[File]:
        """Files of a group, newest first."""


class SupabaseFileRepository(FileRepository):
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create(self, file: File) -> None:
        try:
            self.supabase.table(FILES_TABLE).insert(file.model_dump(mode="json")).execute()
        except APIError as e:
            logger.error(f"Failed to insert file {file.id}: {e}")
            raise StoreError(str(e))

    def get_by_id(self, file_id: str) -> File:
        try:
            result = self.supabase.table(FILES_TABLE)\
                .select("*")\
                .eq("id", file_id)\
                .maybe_single()\
                .execute()
        except APIError as e:
            logger.error(f"Failed to load file {file_id}: {e}")
            raise StoreError(str(e))
        if result is None or not result.data:
            raise FileNotFound()
        return File(**result.data)

    def delete(self, file_id: str) -> None:
        try:
            result = self.supabase.table(FILES_TABLE)\
                .delete()\
                .eq("id", file_id)\
                .execute()
        except APIError as e:
            logger.error(f"Failed to delete file {file_id}: {e}")
            raise StoreError(str(e))
        if not result.data:
            raise FileNotFound()

    def list_by_group_id(self, group_id: str) -> List[File]:
        try:
            result = self.supabase.table(FILES_TABLE)\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute()
        except APIError as e:
            logger.error(f"Failed to list files of group {group_id}: {e}")
            raise StoreError(str(e))
        return [File(**f) for f in result.data or []]
