from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.responses import HTMLResponse
from .components.portal import PhotoPortal
from .core.config import logger
from .routers.deps import get_portal
from .routers.gallery import router as gallery_router
from .routers.header import router as header_router
from .routers.uploads import router as uploads_router
from .ui.render import render

tags_metadata = [
    {
        "name": "uploads",
        "description": (
            "Pending uploads held by the page before they are stored.\n\n"
            "- Add files via multipart; non-images are ignored.\n"
            "- Caption or remove pending files.\n"
            "- Submit to store every pending file in order."
        ),
    },
    {
        "name": "gallery",
        "description": (
            "Stored images, newest first.\n\n"
            "- Open/close the lightbox.\n"
            "- Edit captions, delete images, download originals."
        ),
    },
    {"name": "header", "description": "Site title and light/dark display mode."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    portal = PhotoPortal()
    app.state.portal = portal
    await portal.mount()
    logger.info("Photo portal mounted with %d image(s)", len(portal.gallery.images))
    yield
    portal.unmount()


app = FastAPI(
    title="Photo Portal",
    description=(
        "How to Use:\n\n"
        "1) Add images: POST /api/uploads with one or more `files`, then caption them with PUT /api/uploads/{index}/caption.\n"
        "2) Upload: POST /api/uploads/submit stores each file and adds it to the gallery.\n"
        "3) Browse: GET /api/gallery, open one with POST /api/gallery/{image_id}/open.\n"
        "4) Edit/Delete/Download: PUT .../caption, DELETE /api/gallery/{image_id}?confirm=true, GET .../download.\n\n"
        "The page itself is served at /."
    ),
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.include_router(header_router)
app.include_router(uploads_router)
app.include_router(gallery_router)


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(portal: PhotoPortal = Depends(get_portal)):
    return render("index.html", header=portal.header, uploader=portal.uploader, gallery=portal.gallery)
