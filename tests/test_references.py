"""
Tests for reference persistence
"""
import pytest

from hashvault.core import CreateReferencePayload
from hashvault.errors import BadRequestError, ConflictError
from hashvault.models import ReferenceKind

from fakes import PUBLIC_REPO_ID, PRIVATE_REPO_ID

COMMIT_1 = '1' * 64
COMMIT_2 = '2' * 64


def _tag(name, commit_hash=COMMIT_1, repository_id=PUBLIC_REPO_ID):
    return CreateReferencePayload(repository_id=repository_id, kind=ReferenceKind.TAG,
                                  name=name, commit_hash=commit_hash)


def test_create_and_find(reference_store):
    created = reference_store.create(_tag('v1.0'))

    found = reference_store.find(PUBLIC_REPO_ID, ReferenceKind.TAG, 'v1.0')
    assert found.id == created.id
    assert found.commit_hash == COMMIT_1
    assert found.is_tag
    assert found.created_at is not None


def test_find_is_scoped_by_repository_and_kind(reference_store):
    reference_store.create(_tag('main'))

    assert reference_store.find(PUBLIC_REPO_ID, ReferenceKind.MAIN, 'main') is None
    assert reference_store.find(PRIVATE_REPO_ID, ReferenceKind.TAG, 'main') is None


def test_unique_triple(reference_store):
    reference_store.create(_tag('v1.0'))

    with pytest.raises(ConflictError):
        reference_store.create(_tag('v1.0', commit_hash=COMMIT_2))

    # Session is usable after the rollback
    assert len(reference_store.list_by_repository(PUBLIC_REPO_ID)) == 1

    # Same name in another repository is fine
    reference_store.create(_tag('v1.0', repository_id=PRIVATE_REPO_ID))


def test_create_revalidates_formats(reference_store):
    with pytest.raises(BadRequestError):
        reference_store.create(_tag('v1.0', commit_hash='not-a-hash'))

    with pytest.raises(BadRequestError):
        reference_store.create(_tag('has space'))

    with pytest.raises(BadRequestError):
        reference_store.create(_tag('x' * 101))


def test_main_must_be_named_main(reference_store):
    with pytest.raises(BadRequestError):
        reference_store.create(CreateReferencePayload(
            repository_id=PUBLIC_REPO_ID, kind=ReferenceKind.MAIN, name='trunk', commit_hash=COMMIT_1
        ))


def test_update_commit_hash(reference_store):
    ref = reference_store.create(CreateReferencePayload(
        repository_id=PUBLIC_REPO_ID, kind=ReferenceKind.MAIN, name='main', commit_hash=COMMIT_1
    ))

    updated = reference_store.update_commit_hash(ref.id, COMMIT_2)

    assert updated.id == ref.id
    assert updated.commit_hash == COMMIT_2
    assert updated.updated_at is not None


def test_update_missing_reference(reference_store):
    assert reference_store.update_commit_hash(9999, COMMIT_2) is None


def test_delete(reference_store):
    ref = reference_store.create(_tag('v1.0'))

    assert reference_store.delete(ref.id) is True
    assert reference_store.delete(ref.id) is False
    assert reference_store.find(PUBLIC_REPO_ID, ReferenceKind.TAG, 'v1.0') is None


def test_list_by_repository(reference_store):
    reference_store.create(_tag('v2.0'))
    reference_store.create(_tag('v1.0'))
    reference_store.create(CreateReferencePayload(
        repository_id=PUBLIC_REPO_ID, kind=ReferenceKind.MAIN, name='main', commit_hash=COMMIT_1
    ))
    reference_store.create(_tag('other', repository_id=PRIVATE_REPO_ID))

    tags = reference_store.list_by_repository(PUBLIC_REPO_ID, ReferenceKind.TAG)
    assert [tag.name for tag in tags] == ['v1.0', 'v2.0']

    everything = reference_store.list_by_repository(PUBLIC_REPO_ID)
    assert len(everything) == 3
