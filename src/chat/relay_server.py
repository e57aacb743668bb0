"""
Chat relay - forwards estimator questions to the OpenAI Responses API

Run with `blueprint-chat-relay` (uvicorn). The API key stays on the relay;
the desktop app only ever sends the question and a snapshot of the totals.
"""

import logging
import os
from typing import Any, Optional

import requests
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError

from chat.prompts import build_input


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
NO_REPLY = "No reply generated."
UPSTREAM_TIMEOUT_SECONDS = 60


class ChatRequest(BaseModel):
    message: Optional[str] = None
    snapshot: Optional[Any] = None
    # Older clients sent display strings under 'context'
    context: Optional[Any] = None


class ChatReply(BaseModel):
    reply: str


app = FastAPI(title="Blueprint Flooring Estimator chat relay", version="1.0.0")


def _error(status_code, error, details=None):
    body = {'error': error}
    if details is not None:
        body['details'] = details
    return JSONResponse(status_code=status_code, content=body)


def extract_reply(data):
    """Assistant text from a Responses API payload"""
    if not isinstance(data, dict):
        return NO_REPLY
    text = data.get('output_text')
    if isinstance(text, str) and text:
        return text
    output = data.get('output')
    for item in output if isinstance(output, list) else []:
        if not isinstance(item, dict) or not isinstance(item.get('content'), list):
            continue
        for content in item['content']:
            if (isinstance(content, dict) and content.get('type') == 'output_text'
                    and isinstance(content.get('text'), str) and content['text']):
                return content['text']
    return NO_REPLY


def call_openai(message, snapshot, api_key):
    """POST to the Responses API; returns the parsed JSON or raises requests errors"""
    base_url = os.environ.get('OPENAI_BASE_URL', DEFAULT_BASE_URL).rstrip('/')
    response = requests.post(
        f"{base_url}/responses",
        headers={
            'Authorization': f"Bearer {api_key}",
            'Content-Type': 'application/json',
        },
        json={
            'model': os.environ.get('OPENAI_MODEL', DEFAULT_MODEL),
            'input': build_input(message, snapshot),
        },
        timeout=UPSTREAM_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    return response.json()


@app.post("/api/chat", response_model=ChatReply)
async def chat(request: Request):
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    try:
        body = ChatRequest.model_validate(payload if isinstance(payload, dict) else {})
    except ValidationError:
        return _error(status.HTTP_400_BAD_REQUEST, 'Missing message')

    if not body.message or not body.message.strip():
        return _error(status.HTTP_400_BAD_REQUEST, 'Missing message')

    api_key = os.environ.get('OPENAI_API_KEY')
    if not api_key:
        logger.error("OPENAI_API_KEY is not set")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Missing OPENAI_API_KEY environment variable')

    snapshot = body.snapshot if body.snapshot is not None else (body.context or {})
    try:
        data = await run_in_threadpool(call_openai, body.message, snapshot, api_key)
    except requests.HTTPError as e:
        details = e.response.text if e.response is not None else str(e)
        logger.warning("OpenAI returned an error: %s", details)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, 'OpenAI request failed', details)
    except requests.RequestException as e:
        logger.warning("OpenAI request failed: %s", e)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, 'OpenAI request failed', str(e))
    except ValueError as e:
        logger.warning("OpenAI returned invalid JSON: %s", e)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Server error', str(e))

    return ChatReply(reply=extract_reply(data))


@app.api_route("/api/chat", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def chat_wrong_method():
    return _error(status.HTTP_405_METHOD_NOT_ALLOWED, 'Use POST')


@app.get("/health")
async def health():
    return {'ok': True}


def main():
    logging.basicConfig(level=os.environ.get('BFE_RELAY_LOG_LEVEL', 'INFO').upper(),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    host = os.environ.get('BFE_RELAY_HOST', '127.0.0.1')
    port = int(os.environ.get('BFE_RELAY_PORT', '8000'))
    logger.info("Chat relay listening on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
