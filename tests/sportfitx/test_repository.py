from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError

from sportfitx.models.document import Document
from sportfitx.repository import DESCENDING, apply_update, matches


def test_matches_supports_dotted_paths_into_embedded_documents() -> None:
    document = {'name': 'Yoga', 'instructor': {'email': 'coach@x.com'}}

    assert matches(document, {'instructor.email': 'coach@x.com'})
    assert not matches(document, {'instructor.email': 'other@x.com'})
    assert not matches(document, {'instructor.name': 'Coach'})


def test_apply_update_sets_and_increments_without_touching_the_original() -> None:
    original = {'total_seats': 10, 'enrollment': 5}

    updated = apply_update(original, {'$set': {'status': 'approved'}, '$inc': {'enrollment': 1, 'total_seats': -1}})

    assert updated == {'total_seats': 9, 'enrollment': 6, 'status': 'approved'}
    assert original == {'total_seats': 10, 'enrollment': 5}


def test_apply_update_rejects_unknown_operators() -> None:
    with pytest.raises(ValueError):
        apply_update({}, {'$push': {'tags': 'hiit'}})


def test_insert_one_assigns_object_id_shaped_identifier(store) -> None:
    result = store.users.insert_one({'email': 'a@x.com'})

    assert len(result.inserted_id) == 24
    assert store.users.find_one({'_id': result.inserted_id}) == {'_id': result.inserted_id, 'email': 'a@x.com'}


def test_insert_one_keeps_client_supplied_identifier(store) -> None:
    store.classes.insert_one({'_id': 'C1', 'name': 'Boxing'})

    assert store.classes.find_one({'_id': 'C1'})['name'] == 'Boxing'


def test_collections_are_isolated_from_each_other(store) -> None:
    store.users.insert_one({'email': 'a@x.com'})

    assert store.payments.find() == []
    assert len(store.users.find()) == 1


def test_find_sorts_descending_with_missing_values_last_and_applies_limit(store) -> None:
    for name, enrollment in [('a', 3), ('b', None), ('c', 9), ('d', 1)]:
        document = {'name': name}
        if enrollment is not None:
            document['enrollment'] = enrollment
        store.classes.insert_one(document)

    names = [document['name'] for document in store.classes.find(sort=('enrollment', DESCENDING), limit=3)]

    assert names == ['c', 'a', 'd']


def test_update_one_reports_matched_and_modified_counts(store) -> None:
    inserted = store.users.insert_one({'email': 'a@x.com', 'role': 'admin'})

    unchanged = store.users.update_one({'_id': inserted.inserted_id}, {'$set': {'role': 'admin'}})
    changed = store.users.update_one({'_id': inserted.inserted_id}, {'$set': {'role': 'instructor'}})
    missing = store.users.update_one({'_id': 'nope'}, {'$set': {'role': 'admin'}})

    assert (unchanged.matched_count, unchanged.modified_count) == (1, 0)
    assert (changed.matched_count, changed.modified_count) == (1, 1)
    assert (missing.matched_count, missing.upserted_count) == (0, 0)
    assert store.users.find_one({'email': 'a@x.com'})['role'] == 'instructor'


def test_update_one_upsert_seeds_document_from_filter(store) -> None:
    result = store.classes.update_one({'_id': 'C9'}, {'$inc': {'enrollment': 1, 'total_seats': -1}}, upsert=True)

    assert result.upserted_id == 'C9'
    assert store.classes.find_one({'_id': 'C9'}) == {'_id': 'C9', 'enrollment': 1, 'total_seats': -1}


def test_delete_one_removes_only_the_first_match(store) -> None:
    store.selected_classes.insert_one({'studentEmail': 'a@x.com', 'classId': 'C1'})
    store.selected_classes.insert_one({'studentEmail': 'b@x.com', 'classId': 'C1'})

    result = store.selected_classes.delete_one({'classId': 'C1'})

    assert result.deleted_count == 1
    assert [document['studentEmail'] for document in store.selected_classes.find()] == ['b@x.com']
    assert store.selected_classes.delete_one({'classId': 'C2'}).deleted_count == 0


def test_find_sorts_mixed_value_types_by_type_rank(store) -> None:
    for name, enrollment in [('text', 'many'), ('number', 4), ('flag', True), ('none', None), ('float', 7.5)]:
        store.users.insert_one({'name': name, 'enrollment': enrollment})

    names = [document['name'] for document in store.users.find(sort=('enrollment', DESCENDING))]

    assert names == ['flag', 'text', 'float', 'number', 'none']


def test_string_filters_are_evaluated_by_the_database(store) -> None:
    for index in range(5):
        store.users.insert_one({'email': f'user{index}@x.com', 'profile': {'city': 'Oslo' if index % 2 else 'Rome'}})
    loaded = []

    def count_load(target, _context):
        loaded.append(target.id)

    event.listen(Document, 'load', count_load)
    try:
        user = store.users.find_one({'email': 'user3@x.com'})
        in_oslo = store.users.find({'profile.city': 'Oslo'})
    finally:
        event.remove(Document, 'load', count_load)

    assert user['email'] == 'user3@x.com'
    assert [document['email'] for document in in_oslo] == ['user1@x.com', 'user3@x.com']
    assert len(loaded) == 3


def test_non_string_filters_still_match(store) -> None:
    store.classes.insert_one({'name': 'Spin', 'enrollment': 3})
    store.classes.insert_one({'name': 'Row', 'enrollment': 4})

    assert store.classes.find_one({'enrollment': 4})['name'] == 'Row'
    assert store.classes.find({'enrollment': 4, 'name': 'Spin'}) == []


def test_insert_one_rejects_duplicate_identifier(store) -> None:
    store.classes.insert_one({'_id': 'C1', 'name': 'Boxing'})

    with pytest.raises(IntegrityError):
        store.classes.insert_one({'_id': 'C1', 'name': 'Again'})


def test_concurrent_increments_on_one_document_are_not_lost(file_store) -> None:
    file_store.classes.insert_one({'_id': 'C1', 'total_seats': 1000, 'enrollment': 0})
    update = {'$inc': {'enrollment': 1, 'total_seats': -1}}

    def increment_many(_worker: int) -> int:
        for _ in range(25):
            file_store.classes.update_one({'_id': 'C1'}, update, upsert=True)
        return 25

    with ThreadPoolExecutor(max_workers=4) as executor:
        applied = sum(executor.map(increment_many, range(4)))

    assert applied == 100
    assert file_store.classes.find_one({'_id': 'C1'}) == {'_id': 'C1', 'total_seats': 900, 'enrollment': 100}


def test_concurrent_upserts_of_one_identifier_create_a_single_document(file_store) -> None:
    update = {'$inc': {'enrollment': 1}}

    def upsert(_worker: int) -> None:
        file_store.classes.update_one({'_id': 'ghost'}, update, upsert=True)

    with ThreadPoolExecutor(max_workers=4) as executor:
        list(executor.map(upsert, range(8)))

    assert file_store.classes.find() == [{'_id': 'ghost', 'enrollment': 8}]
