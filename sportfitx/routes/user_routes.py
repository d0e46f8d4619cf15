from fastapi import APIRouter, Depends

from sportfitx.auth.dependencies import ensure_owner, get_store, verify_admin, verify_jwt
from sportfitx.models.results import ExistsMessage, InsertOneResult, UpdateResult
from sportfitx.models.user import ROLE_ADMIN, ROLE_INSTRUCTOR, RoleCheckResponse, UserDocument, UserUpdate
from sportfitx.repository import DESCENDING, DocumentStore

router = APIRouter(tags=['users'])

POPULAR_LIMIT = 6


@router.get('/users')
def list_users(store: DocumentStore = Depends(get_store)) -> list[dict]:
    return store.users.find()


@router.get('/manage-users')
def manage_users(
    _claims: dict = Depends(verify_admin),
    store: DocumentStore = Depends(get_store),
) -> list[dict]:
    return store.users.find()


@router.get('/users/admin/{email}', response_model=RoleCheckResponse, response_model_exclude_none=True)
def check_admin(
    email: str,
    claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
):
    ensure_owner(claims, email)
    user = store.users.find_one({'email': email})
    return RoleCheckResponse(admin=user is not None and user.get('role') == ROLE_ADMIN)


@router.get('/users/instructor/{email}', response_model=RoleCheckResponse, response_model_exclude_none=True)
def check_instructor(
    email: str,
    claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
):
    ensure_owner(claims, email)
    user = store.users.find_one({'email': email})
    return RoleCheckResponse(instructor=user is not None and user.get('role') == ROLE_INSTRUCTOR)


@router.get('/users/{email}')
def get_user(email: str, store: DocumentStore = Depends(get_store)) -> dict | None:
    return store.users.find_one({'email': email})


@router.post('/users')
def create_user(
    data: UserDocument,
    store: DocumentStore = Depends(get_store),
) -> InsertOneResult | ExistsMessage:
    if store.users.find_one({'email': data.email}) is not None:
        return ExistsMessage(message='user already exists')

    return store.users.insert_one(data.model_dump(exclude_unset=True))


@router.patch('/users/{user_id}')
def update_user(
    user_id: str,
    data: UserUpdate,
    store: DocumentStore = Depends(get_store),
) -> UpdateResult:
    return store.users.update_one({'_id': user_id}, {'$set': data.model_dump(exclude_unset=True)})


@router.get('/instructor')
def list_instructors(store: DocumentStore = Depends(get_store)) -> list[dict]:
    return store.users.find({'role': ROLE_INSTRUCTOR})


@router.get('/popular-instructor')
def list_popular_instructors(store: DocumentStore = Depends(get_store)) -> list[dict]:
    return store.users.find({'role': ROLE_INSTRUCTOR}, sort=('enrollment', DESCENDING), limit=POPULAR_LIMIT)
