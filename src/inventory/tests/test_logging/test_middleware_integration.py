import json
import logging

import httpx
import pytest
from fastapi import FastAPI

from inventory.core.logging.builder import setup_logging
from inventory.core.logging.middleware import RequestIDMiddleware

from ..conftest import make_settings


def _build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/hello")
    async def hello():
        logging.getLogger("inventory.test").info("handling hello")
        return {"ok": True}

    return app


@pytest.mark.asyncio
async def test_request_id_in_response_and_logs(capsys):
    setup_logging(make_settings(LOG_FORMAT="json", LOG_LEVEL="INFO", LOG_TO_STDOUT=True))

    transport = httpx.ASGITransport(app=_build_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.get("/hello")

    assert resp.status_code == 200
    rid = resp.headers.get("X-Request-ID")
    assert rid

    records = []
    for line in capsys.readouterr().out.splitlines():
        try:
            records.append(json.loads(line))
        except ValueError:
            continue

    assert any(r.get("request_id") == rid and r.get("message") == "handling hello" for r in records)
