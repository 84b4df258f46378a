import asyncio
import json
import logging
import os
import sys
import time

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, ValidationError

from nextversion import verify as V
from nextversion.config import load_action_inputs, load_settings
from nextversion.errors import ConfigError, VersionResolveError
from nextversion.github_client import GitHubClient, GitHubError
from nextversion.resolver import VersionOutputs, resolve_next_version

load_dotenv()

logger = logging.getLogger("nextversion")
if not logger.handlers:
    handler = logging.StreamHandler()
    logger.addHandler(handler)
logger.setLevel(logging.DEBUG if os.getenv("RUNNER_DEBUG") == "1" else logging.INFO)

app = FastAPI(title="next-version", version="0.1.0")

SET = load_settings()


class Repository(BaseModel):
    full_name: str


class PushEvent(BaseModel):
    ref: str
    after: str
    repository: Repository
    deleted: bool = False


@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "github_token": bool(SET.github_token),
        "webhook_secret": bool(SET.webhook_secret),
        "not_conventional_commits_reaction": SET.not_conventional_commits_reaction.value,
    }


@app.get("/readyz")
def readyz():
    # resolving versions needs API access
    return {"ok": bool(SET.github_token)}


async def _resolve_push(event: PushEvent) -> VersionOutputs:
    async with GitHubClient(SET.github_token, event.repository.full_name, api_url=SET.github_api_url) as client:
        return await resolve_next_version(
            client,
            target_branch=event.ref,
            policy=SET.not_conventional_commits_reaction,
            init_release_version=SET.init_release_version,
            pre_release_glue=SET.pre_release_version_glue,
            sha=event.after,
        )


def _log_result(event: PushEvent | None, status_code: int, start: float, **extra) -> None:
    if not SET.structured_logging:
        return
    logger.info(
        json.dumps(
            {
                "event": "version_result",
                "repository": event.repository.full_name if event else None,
                "ref": event.ref if event else None,
                "status_code": status_code,
                "latency_ms": int((time.time() - start) * 1000),
                **extra,
            }
        )
    )


@app.post("/hooks/github")
async def github_hook(request: Request):
    start = time.time()
    body = await request.body()
    if len(body) > SET.max_body_bytes:
        raise HTTPException(status_code=413, detail="payload too large")

    if SET.webhook_secret:
        verified, reason = V.verify_github(
            SET.webhook_secret, request.headers.get("X-Hub-Signature-256", ""), body
        )
        if not verified:
            raise HTTPException(status_code=401, detail=f"signature_{reason}")

    event_name = request.headers.get("X-GitHub-Event", "")
    if event_name != "push":
        return Response(
            content=json.dumps({"skipped": True, "reason": f"unsupported_event:{event_name or 'none'}"}),
            media_type="application/json",
            status_code=202,
        )

    try:
        event = PushEvent.model_validate_json(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="invalid push payload")
    if event.deleted:
        return Response(
            content=json.dumps({"skipped": True, "reason": "ref_deleted"}),
            media_type="application/json",
            status_code=202,
        )
    if not SET.github_token:
        raise HTTPException(status_code=503, detail="github_token_not_set")

    try:
        outputs = await _resolve_push(event)
    except (ConfigError, VersionResolveError, GitHubError, httpx.HTTPError) as e:
        _log_result(event, 422, start, error=str(e))
        return Response(
            content=json.dumps({"detail": str(e)}), media_type="application/json", status_code=422
        )
    _log_result(event, 200, start, **outputs.as_outputs())
    return Response(content=json.dumps(outputs.as_outputs()), media_type="application/json", status_code=200)


def write_outputs(outputs: dict[str, str], output_path: str | None) -> None:
    """Append outputs in the GITHUB_OUTPUT `name=value` format, or print them."""
    lines = "".join(f"{name}={value}\n" for name, value in outputs.items())
    if not output_path:
        sys.stdout.write(lines)
        return
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(lines)


async def _run_action() -> VersionOutputs:
    inputs = load_action_inputs()
    async with GitHubClient(inputs.github_token, inputs.repository, api_url=inputs.api_url) as client:
        outputs = await resolve_next_version(
            client,
            target_branch=inputs.target_branch,
            policy=inputs.not_conventional_commits_reaction,
            init_release_version=inputs.init_release_version,
            pre_release_glue=inputs.pre_release_version_glue,
            sha=inputs.sha,
        )
    write_outputs(outputs.as_outputs(), inputs.output_path)
    return outputs


def run_action() -> int:
    """Action entrypoint: resolve once, write outputs, return the exit code."""
    try:
        asyncio.run(_run_action())
    except (ConfigError, VersionResolveError, GitHubError, httpx.HTTPError) as e:
        logger.error(str(e))
        return 1
    return 0


def action_main():
    # CLI entrypoint: `next-version`
    sys.exit(run_action())


def main():
    # Convenience CLI entrypoint: `next-version-server`
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8787"))
    uvicorn.run("services.nextversion.main:app", host=host, port=port, reload=False)
