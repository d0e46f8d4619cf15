from fastapi import APIRouter, Depends, Query

from sportfitx.auth.dependencies import ensure_owner, get_store, verify_jwt
from sportfitx.models.results import DeleteResult, InsertOneResult
from sportfitx.models.selection import SelectionDocument
from sportfitx.repository import DocumentStore

router = APIRouter(tags=['selected-class'])


@router.get('/selected-class')
def list_selected_classes(
    email: str | None = Query(default=None),
    claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
) -> list[dict]:
    if not email:
        return []
    ensure_owner(claims, email)
    return store.selected_classes.find({'studentEmail': email})


@router.post('/selected-class')
def select_class(
    data: SelectionDocument,
    _claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
) -> InsertOneResult:
    return store.selected_classes.insert_one(data.to_document())


@router.delete('/selected-class/{selection_id}')
def remove_selected_class(
    selection_id: str,
    _claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
) -> DeleteResult:
    return store.selected_classes.delete_one({'_id': selection_id})
