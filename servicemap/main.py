# servicemap/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from servicemap.api.routes_basic import router as basic_router
from servicemap.api.routes_map import router as map_router
from servicemap.api.routes_services import router as services_router
from servicemap.config import LOG_LEVEL
from servicemap.map.adapters import SessionUI
from servicemap.map.controller import ServiceMapController

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Un solo controlador por proceso: mapa + dataset en memoria
    controller = ServiceMapController(ui=SessionUI())
    controller.initialize_map()
    outcome = await controller.load_services()
    logger.info("Service map ready: %d services from %s", outcome.count, outcome.origin)

    app.state.controller = controller
    yield
    app.state.controller = None


app = FastAPI(
    title="Service Map",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS totalmente abierto
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(basic_router)
app.include_router(map_router)
app.include_router(services_router, prefix="/api")
