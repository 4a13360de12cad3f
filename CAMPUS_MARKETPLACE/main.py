import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from core.database import Base, engine
from routers.admin_router import router as admin_router
from routers.registration_router import router as registration_router
from routers.product_router import router as product_router
import models.student_pin
import models.student
import models.product

logging.basicConfig( level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting campus marketplace backend...")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database tables created")

    yield

    logger.info("Campus marketplace backend stopped")

app = FastAPI(title="Campus Marketplace API",lifespan=lifespan)

app.include_router(registration_router)
app.include_router(product_router)
app.include_router(admin_router)

@app.get("/")
def root():
    return {
        "status":"Campus Marketplace API is running"
    }
