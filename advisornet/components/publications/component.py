import logging
from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from advisornet.domain.entities import PUBLICATION_TYPES, Publication, PublicationType
from advisornet.domain.policy import PolicyEngine
from advisornet.domain.uploads import PUBLICATIONS_BUCKET, UploadedFile, check_upload
from advisornet.rules.models import UploadsRules

from .models import (
    CreatePublicationInput,
    DeletePublicationInput,
    ListPublicationsInput,
    PublicationListOutput,
    PublicationOutput,
    UpdatePublicationInput,
)
from .ports import FileStorePort, ProfileRepoPort, PublicationRepoPort, TimePort

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def storage_path(user_id: UUID, file: UploadedFile, now: datetime) -> str:
    """<user id>/<epoch millis>-<uuid>.<ext>"""
    millis = int(now.timestamp() * 1000)
    return f"{user_id}/{millis}-{uuid4().hex}.{file.extension}"


def _store_file(
    user_id: UUID,
    file: UploadedFile,
    store: FileStorePort,
    uploads: UploadsRules,
    now: datetime,
) -> tuple[str | None, str | None, str | None]:
    """Returns (key, public url, error)."""
    problem = check_upload(file, PUBLICATIONS_BUCKET, uploads)
    if problem:
        return None, None, problem
    key = store.save(PUBLICATIONS_BUCKET, storage_path(user_id, file, now), file.data)
    return key, store.public_url(PUBLICATIONS_BUCKET, key), None


def _discard_file(store: FileStorePort, key: str | None) -> None:
    if not key:
        return
    try:
        store.delete(PUBLICATIONS_BUCKET, key)
    except (OSError, ValueError) as e:
        logger.warning("Could not remove publication file %s: %s", key, e)


def run_create(
    inp: CreatePublicationInput,
    repo: PublicationRepoPort,
    profile_repo: ProfileRepoPort,
    store: FileStorePort,
    policy: PolicyEngine,
    time: TimePort,
) -> PublicationOutput:
    if not policy.can_publish(inp.user):
        return PublicationOutput(error="Access denied", code="forbidden")

    title = _clean(inp.title)
    if not title:
        return PublicationOutput(error="Title is required", code="invalid")
    if inp.publication_type not in PUBLICATION_TYPES:
        return PublicationOutput(
            error=f"Unknown publication type: {inp.publication_type}", code="invalid"
        )

    profile = profile_repo.get_by_user_id(inp.user.id)
    if not profile:
        return PublicationOutput(error="Profile not found", code="not_found")

    now = time.now_utc()
    key = url = None
    if inp.file is not None:
        key, url, problem = _store_file(inp.user.id, inp.file, store, policy.rules.uploads, now)
        if problem:
            return PublicationOutput(error=problem, code="invalid")

    publication = Publication(
        id=uuid4(),
        profile_id=profile.id,
        title=title,
        description=_clean(inp.description),
        publication_type=cast(PublicationType, inp.publication_type),
        file_url=url,
        file_path=key,
        external_url=_clean(inp.external_url),
        created_at=now,
        updated_at=now,
    )
    try:
        repo.save(publication)
    except Exception:
        _discard_file(store, key)
        raise
    return PublicationOutput(publication=publication, success=True)


def _owned(
    user_id: UUID,
    publication_id: UUID,
    repo: PublicationRepoPort,
    profile_repo: ProfileRepoPort,
) -> tuple[Publication | None, PublicationOutput | None]:
    publication = repo.get_by_id(publication_id)
    if not publication:
        return None, PublicationOutput(error="Publication not found", code="not_found")
    profile = profile_repo.get_by_user_id(user_id)
    if not profile or publication.profile_id != profile.id:
        return None, PublicationOutput(error="Access denied", code="forbidden")
    return publication, None


def run_update(
    inp: UpdatePublicationInput,
    repo: PublicationRepoPort,
    profile_repo: ProfileRepoPort,
    store: FileStorePort,
    policy: PolicyEngine,
    time: TimePort,
) -> PublicationOutput:
    if not policy.can_publish(inp.user):
        return PublicationOutput(error="Access denied", code="forbidden")

    publication, failure = _owned(inp.user.id, inp.publication_id, repo, profile_repo)
    if failure:
        return failure
    assert publication

    updated = publication.model_copy()
    if inp.title is not None:
        title = _clean(inp.title)
        if not title:
            return PublicationOutput(error="Title is required", code="invalid")
        updated.title = title
    if inp.publication_type is not None:
        if inp.publication_type not in PUBLICATION_TYPES:
            return PublicationOutput(
                error=f"Unknown publication type: {inp.publication_type}", code="invalid"
            )
        updated.publication_type = cast(PublicationType, inp.publication_type)
    if inp.description is not None:
        updated.description = _clean(inp.description)
    if inp.external_url is not None:
        updated.external_url = _clean(inp.external_url)

    now = time.now_utc()
    old_key = publication.file_path
    if inp.file is not None:
        key, url, problem = _store_file(inp.user.id, inp.file, store, policy.rules.uploads, now)
        if problem:
            return PublicationOutput(error=problem, code="invalid")
        updated.file_path, updated.file_url = key, url
    elif inp.remove_file:
        updated.file_path = updated.file_url = None

    updated.updated_at = now
    repo.save(updated)

    if old_key and old_key != updated.file_path:
        _discard_file(store, old_key)

    return PublicationOutput(publication=updated, success=True)


def run_delete(
    inp: DeletePublicationInput,
    repo: PublicationRepoPort,
    profile_repo: ProfileRepoPort,
    store: FileStorePort,
    policy: PolicyEngine,
) -> PublicationOutput:
    if not policy.can_publish(inp.user):
        return PublicationOutput(error="Access denied", code="forbidden")

    publication, failure = _owned(inp.user.id, inp.publication_id, repo, profile_repo)
    if failure:
        return failure
    assert publication

    repo.delete(publication.id)
    _discard_file(store, publication.file_path)
    return PublicationOutput(publication=publication, success=True)


def run_list(
    inp: ListPublicationsInput, repo: PublicationRepoPort, policy: PolicyEngine
) -> PublicationListOutput:
    if not policy.can_view_publications(inp.viewer):
        return PublicationListOutput(error="Access denied", code="forbidden")
    items = sorted(repo.list_by_profile(inp.profile_id), key=lambda p: p.created_at, reverse=True)
    return PublicationListOutput(publications=items, success=True)


def run(
    inp: (
        CreatePublicationInput
        | UpdatePublicationInput
        | DeletePublicationInput
        | ListPublicationsInput
    ),
    *,
    repo: PublicationRepoPort,
    profile_repo: ProfileRepoPort | None = None,
    store: FileStorePort | None = None,
    policy: PolicyEngine | None = None,
    time: TimePort | None = None,
) -> PublicationOutput | PublicationListOutput:
    if isinstance(inp, CreatePublicationInput):
        assert profile_repo and store and policy and time
        return run_create(inp, repo, profile_repo, store, policy, time)

    elif isinstance(inp, UpdatePublicationInput):
        assert profile_repo and store and policy and time
        return run_update(inp, repo, profile_repo, store, policy, time)

    elif isinstance(inp, DeletePublicationInput):
        assert profile_repo and store and policy
        return run_delete(inp, repo, profile_repo, store, policy)

    elif isinstance(inp, ListPublicationsInput):
        assert policy
        return run_list(inp, repo, policy)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
