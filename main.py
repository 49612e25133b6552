from contextlib import asynccontextmanager
from typing import List, Optional

import structlog
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import load_settings
from content import QuoteSource, SongSearch, build_quote_source
from database import AccountStore, EntryStore, connect, ensure_indexes
from errors import MoodJournalError
from history import mood_history
from logging_config import setup_logging
from schemas import Credentials, Message, MoodHistory, MoodIn, Quote

settings = load_settings()
setup_logging(json_mode=settings.log_json or settings.is_production, level=settings.log_level)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = connect(settings)
    db = client[settings.database_name]
    try:
        ensure_indexes(db)
    except PyMongoError as e:
        logger.critical("db.connect_failed", error=str(e))
        client.close()
        raise
    logger.info("db.connected", database=settings.database_name)

    app.state.db = db
    app.state.songs = SongSearch(settings.youtube_api_key, timeout=settings.http_timeout)
    app.state.quotes = build_quote_source(settings)
    logger.info("web.startup", port=settings.port, quote_source=settings.quote_source)
    yield
    client.close()
    logger.info("web.shutdown")


app = FastAPI(title="Mood Journal API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MoodJournalError)
async def mood_journal_error_handler(request: Request, exc: MoodJournalError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _field_name(loc) -> Optional[str]:
    # loc is e.g. ("body", "triggers", 0) or ("body", 9) for a JSON decode offset
    names = [p for p in loc if isinstance(p, str) and p not in ("body", "query")]
    return names[-1] if names else None


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted({name for name in (_field_name(err.get("loc") or ()) for err in exc.errors()) if name})
    message = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("web.unhandled_error", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error"})


# -------- Dependencies --------

def get_db(request: Request) -> Database:
    return request.app.state.db


def get_account_store(db: Database = Depends(get_db)) -> AccountStore:
    return AccountStore(db)


def get_entry_store(db: Database = Depends(get_db)) -> EntryStore:
    return EntryStore(db)


def get_song_search(request: Request) -> SongSearch:
    return request.app.state.songs


def get_quote_source(request: Request) -> QuoteSource:
    return request.app.state.quotes


# -------- Liveness --------

@app.get("/", response_class=PlainTextResponse)
def read_root():
    return "Mood Journal Backend is running!"


@app.get("/api/health")
def health():
    return {"status": "ok"}


# -------- Auth --------

@app.post("/api/auth/signup", status_code=201, response_model=Message)
def signup(payload: Credentials, accounts: AccountStore = Depends(get_account_store)):
    accounts.register(payload.email, payload.password)
    return {"message": "User registered successfully"}


@app.post("/api/auth/login", response_model=Message)
def login(payload: Credentials, accounts: AccountStore = Depends(get_account_store)):
    accounts.verify(payload.email, payload.password)
    return {"message": "Login successful"}


# -------- Mood Journal Endpoints --------

@app.post("/api/mood", status_code=201, response_model=Message)
def save_mood(entry: MoodIn, entries: EntryStore = Depends(get_entry_store)):
    entries.save(entry.email, entry.mood, entry.triggers)
    return {"message": "Mood saved successfully"}


@app.get("/api/mood/history", response_model=MoodHistory)
def get_mood_history(
    email: Optional[str] = Query(None),
    days: Optional[str] = Query(None),
    triggers: Optional[str] = Query(None, description="comma-separated trigger filter"),
    entries: EntryStore = Depends(get_entry_store),
):
    return mood_history(entries, email, days, triggers)


# -------- Content --------

@app.get("/api/songs")
def get_songs(
    mood: Optional[str] = Query(None),
    page_token: Optional[str] = Query(None, alias="pageToken"),
    songs: SongSearch = Depends(get_song_search),
):
    return songs.search(mood, page_token=page_token)


@app.get("/api/quotes", response_model=List[Quote])
def get_quotes(mood: Optional[str] = Query(None), quotes: QuoteSource = Depends(get_quote_source)):
    return quotes.quotes_for(mood)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
