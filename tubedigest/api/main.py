from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tubedigest.api.routes.generate import router as generate_router
from tubedigest.api.routes.history import router as history_router
from tubedigest.api.routes.process import router as process_router

app = FastAPI(
    title="TubeDigest API",
    description="YouTube transcript acquisition and LLM summaries",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(process_router)
app.include_router(generate_router)
app.include_router(history_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
