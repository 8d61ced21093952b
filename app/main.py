# app/main.py
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.endpoints import (
    auth,
    health,
    metrics,
    questions,
    quiz_attempts,
    quizzes,
    reports,
    skills,
    users,
)
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.db.session import Database
from middleware.request_logging import RequestLoggingMiddleware

logger = logging.getLogger('app')


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Todas las respuestas de error llevan un campo `message`."""
    content = exc.detail if isinstance(exc.detail, dict) else {'message': exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, 'headers', None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'message': 'Invalid request', 'errors': jsonable_encoder(exc.errors())},
    )


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Construye la aplicación. El contexto de base de datos se inyecta (tests) o
    se crea a partir de la configuración.
    """
    database = database or Database(settings.DATABASE_URI)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.connect()
        if settings.AUTO_CREATE_TABLES:
            database.create_all()
        logger.info('SkillQuiz API started')
        yield
        database.dispose()
        logger.info('SkillQuiz API stopped')

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description='''
        ## Backend API para cuestionarios por skill

        **Servicios Disponibles:**
        - **Authentication**: Registro y login con JWT
        - **Users**: Administración de usuarios y roles
        - **Skills / Quizzes / Questions**: Catálogo de preguntas de opción múltiple
        - **Quiz**: Envío, calificación atómica e historial de intentos
        - **Reports**: Analítica por usuario, skill, grupo y periodo
        - **Health / Metrics**: Monitoreo del servicio
        ''',
        version='1.0.0',
        openapi_url='/openapi.json',
        docs_url='/docs',
        redoc_url='/redoc',
        lifespan=lifespan,
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(health.router, prefix='/api', tags=['Health Check'])
    app.include_router(auth.router, prefix='/api/auth', tags=['Authentication'])
    app.include_router(users.router, prefix='/api/users', tags=['Users'])
    app.include_router(skills.router, prefix='/api/skills', tags=['Skills'])
    app.include_router(quizzes.router, prefix='/api', tags=['Quizzes'])
    app.include_router(questions.router, prefix='/api/questions', tags=['Questions'])
    app.include_router(quiz_attempts.router, prefix='/api/quiz', tags=['Quiz Attempts'])
    app.include_router(reports.router, prefix='/api/reports', tags=['Reports'])
    app.include_router(metrics.router, tags=['Metrics'])

    @app.get('/')
    async def root():
        return {
            'message': f'Bienvenido a {settings.PROJECT_NAME}',
            'status': 'operativo',
            'version': '1.0.0',
            'docs': '/docs',
            'available_services': [
                'health', 'auth', 'users', 'skills', 'quizzes', 'questions', 'quiz', 'reports', 'metrics'
            ],
        }

    return app


setup_logging(settings.LOG_DIR, settings.LOG_LEVEL)
app = create_app()

if __name__ == '__main__':
    import uvicorn
    uvicorn.run(app, host='0.0.0.0', port=8000)
