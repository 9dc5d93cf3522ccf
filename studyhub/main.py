import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .routes import router
from .core import init_metrics
from .errors import StudyHubError
from .seed import seed_demo_data
from .stores import Stores, build_stores
from .workers import PurgeWorker, PURGE_INTERVAL_SECONDS
from .ws_manager import PresenceManager
import logging
from pythonjsonlogger import jsonlogger

ENABLE_METRICS = os.getenv('ENABLE_METRICS', '1') == '1'
SEED_DEMO_DATA = os.getenv('SEED_DEMO_DATA', '0') == '1'

# setup structured logging
logger = logging.getLogger('studyhub')
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(os.getenv('LOG_LEVEL', 'INFO'))


def create_app(stores: Stores = None, background: bool = True) -> FastAPI:
    app = FastAPI(title="StudyHub API", version="0.1.0")
    app.state.stores = stores or build_stores()
    app.state.presence = PresenceManager(app.state.stores.peers)
    app.state.purge_worker = PurgeWorker(app.state.stores.library, app.state.stores.files)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=['*'],
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.include_router(router, prefix="/api")

    @app.get('/healthz')
    async def healthz():
        return {'status': 'ok'}

    @app.exception_handler(StudyHubError)
    async def studyhub_error(request: Request, exc: StudyHubError):
        logger.info({'msg': 'request_rejected', 'error': exc.name, 'detail': exc.detail, 'path': request.url.path})
        return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail, 'error': exc.name})

    @app.middleware('http')
    async def log_requests(request: Request, call_next):
        logger.info({'msg': 'request_start', 'method': request.method, 'path': request.url.path})
        response = await call_next(request)
        logger.info({'msg': 'request_end', 'status': response.status_code})
        return response

    @app.on_event("startup")
    async def startup():
        if SEED_DEMO_DATA:
            await seed_demo_data(app.state.stores)
            logger.info({'msg': 'demo_data_seeded'})
        if not background:
            return
        # metrics failures are logged, never fatal
        if ENABLE_METRICS:
            init_metrics()
        if PURGE_INTERVAL_SECONDS > 0:
            app.state.purge_worker.spawn()

    @app.on_event("shutdown")
    async def shutdown():
        await app.state.purge_worker.stop()

    return app


app = create_app()
