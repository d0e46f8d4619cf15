from fastapi import APIRouter, Depends, Query

from sportfitx.auth.dependencies import ensure_owner, get_store, verify_admin, verify_instructor, verify_jwt
from sportfitx.models.fitness_class import STATUS_APPROVED, STATUS_PENDING, ClassDocument
from sportfitx.models.results import InsertOneResult, UpdateResult
from sportfitx.repository import DESCENDING, DocumentStore

router = APIRouter(tags=['classes'])

POPULAR_LIMIT = 6


@router.get('/classes')
def list_approved_classes(store: DocumentStore = Depends(get_store)) -> list[dict]:
    return store.classes.find({'status': STATUS_APPROVED})


@router.get('/classes/{class_id}')
def get_class(
    class_id: str,
    _claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
) -> dict | None:
    return store.classes.find_one({'_id': class_id})


@router.post('/classes')
def create_class(data: ClassDocument, store: DocumentStore = Depends(get_store)) -> InsertOneResult:
    return store.classes.insert_one(data.to_document())


@router.put('/classes/{class_id}')
def update_class(
    class_id: str,
    data: ClassDocument,
    store: DocumentStore = Depends(get_store),
) -> UpdateResult:
    return store.classes.update_one({'_id': class_id}, {'$set': data.to_document()}, upsert=True)


@router.get('/popular-classes')
def list_popular_classes(store: DocumentStore = Depends(get_store)) -> list[dict]:
    return store.classes.find({'status': STATUS_APPROVED}, sort=('enrollment', DESCENDING), limit=POPULAR_LIMIT)


@router.get('/manage-classes')
def manage_classes(
    _claims: dict = Depends(verify_admin),
    store: DocumentStore = Depends(get_store),
) -> list[dict]:
    return store.classes.find()


@router.get('/my-classes')
def list_my_classes(
    email: str | None = Query(default=None),
    claims: dict = Depends(verify_instructor),
    store: DocumentStore = Depends(get_store),
) -> list[dict]:
    if not email:
        return []
    ensure_owner(claims, email)
    return store.classes.find({'instructorEmail': email})


@router.post('/add-class')
def add_class(
    data: ClassDocument,
    _claims: dict = Depends(verify_instructor),
    store: DocumentStore = Depends(get_store),
) -> InsertOneResult:
    document = data.to_document()
    document.setdefault('status', STATUS_PENDING)
    document.setdefault('enrollment', 0)
    document.setdefault('total_seats', 0)
    return store.classes.insert_one(document)
