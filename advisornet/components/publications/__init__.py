"""
Publications component - members' papers, reports and other works.
"""

from .component import run, run_create, run_delete, run_list, run_update, storage_path
from .models import (
    CreatePublicationInput,
    DeletePublicationInput,
    ListPublicationsInput,
    PublicationListOutput,
    PublicationOutput,
    UpdatePublicationInput,
)
from .ports import FileStorePort, ProfileRepoPort, PublicationRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_create",
    "run_update",
    "run_delete",
    "run_list",
    "storage_path",
    # Models
    "CreatePublicationInput",
    "UpdatePublicationInput",
    "DeletePublicationInput",
    "ListPublicationsInput",
    "PublicationOutput",
    "PublicationListOutput",
    # Ports
    "FileStorePort",
    "ProfileRepoPort",
    "PublicationRepoPort",
    "TimePort",
]
