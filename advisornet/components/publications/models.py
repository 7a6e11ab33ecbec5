from dataclasses import dataclass, field
from uuid import UUID

from advisornet.domain.entities import Publication, User
from advisornet.domain.uploads import UploadedFile


@dataclass
class CreatePublicationInput:
    user: User
    title: str
    description: str | None = None
    publication_type: str = "paper"
    external_url: str | None = None
    file: UploadedFile | None = None


@dataclass
class UpdatePublicationInput:
    user: User
    publication_id: UUID
    title: str | None = None
    description: str | None = None
    publication_type: str | None = None
    external_url: str | None = None
    file: UploadedFile | None = None
    remove_file: bool = False


@dataclass
class DeletePublicationInput:
    user: User
    publication_id: UUID


@dataclass
class ListPublicationsInput:
    viewer: User
    profile_id: UUID


@dataclass
class PublicationOutput:
    publication: Publication | None = None
    success: bool = False
    error: str | None = None
    code: str | None = None


@dataclass
class PublicationListOutput:
    publications: list[Publication] = field(default_factory=list)
    success: bool = False
    error: str | None = None
    code: str | None = None
