import logging
import random
from pathlib import Path

import aiofiles
import httpx
from pydantic import BaseModel, TypeAdapter

from pagewarden.utils.settings import settings
from pagewarden.utils.utils import normalize_string

logger = logging.getLogger(__name__)


class SearchQueries(BaseModel):
    title: str
    queries: list[str]


search_queries_adapter = TypeAdapter(list[SearchQueries])


async def load_local_queries(path: Path | str) -> list[SearchQueries]:
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        content = await f.read()
    return search_queries_adapter.validate_json(content)


async def fetch_remote_queries(url: str) -> list[SearchQueries]:
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(url)
        response.raise_for_status()
        # Served as text/plain, so parse the body ourselves
        return search_queries_adapter.validate_json(response.text)


def pick_query(entries: list[SearchQueries], title: str) -> str:
    wanted = normalize_string(title)
    for entry in entries:
        if normalize_string(entry.title) == wanted and entry.queries:
            return random.choice(entry.queries)
    return title


async def get_search_query(title: str) -> str:
    try:
        if settings.SEARCH_ON_BING_LOCAL_QUERIES:
            entries = await load_local_queries(settings.LOCAL_QUERIES_PATH)
        else:
            entries = await fetch_remote_queries(settings.REMOTE_QUERIES_URL)

        answer = pick_query(entries, title)
        logger.info(f"[SEARCH-ON-BING-QUERY] Fetched answer: {answer} | question: {title}")
        return answer
    except httpx.HTTPStatusError as e:
        logger.error(
            f"[SEARCH-ON-BING-QUERY] Failed to fetch queries: {e.response.status_code} - {e.response.text}"
        )
        return title
    except Exception as e:
        logger.error(f"[SEARCH-ON-BING-QUERY] An error occurred: {e}")
        return title
