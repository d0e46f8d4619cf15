import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sportfitx.core import config
from sportfitx.core.errors import ApiError, api_error_handler, conflict_error_handler, database_error_handler
from sportfitx.database import SessionLocal, ensure_document_schema
from sportfitx.repository import DocumentStore, WriteConflict
from sportfitx.routes import auth_routes, class_routes, payment_routes, selection_routes, user_routes

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title='SportFitX API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)
app.add_exception_handler(IntegrityError, conflict_error_handler)
app.add_exception_handler(WriteConflict, conflict_error_handler)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        ensure_document_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')
    app.state.store = DocumentStore(SessionLocal)
    logger.info('Document store ready (%s)', config.APP_ENV)


@app.get('/', response_class=PlainTextResponse)
def root():
    return 'sportfitx server is running'


app.include_router(auth_routes.router)
app.include_router(user_routes.router)
app.include_router(class_routes.router)
app.include_router(selection_routes.router)
app.include_router(payment_routes.router)


if __name__ == '__main__':
    uvicorn.run(app, host='0.0.0.0', port=config.PORT)
