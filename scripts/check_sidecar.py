#!/usr/bin/env python3
"""
Quick sanity script for a running SynonymBar sidecar.

Workflow:
- GET /health and print version, capabilities and providers.
- POST /rewrite/self-test against the active provider.
- Optionally POST /rewrite with a word or sentence and print the candidates.

Environment knobs:
- SYNONYM_BAR_SIDECAR_URL: sidecar base (default http://127.0.0.1:8787)
- QUERY_TEXT: when set, run one real query with this text.
- QUERY_MODE: "word" (default) or "sentence".
- QUERY_TONE: "casual" (default) or "formal", only used for sentences.
"""

from __future__ import annotations

import json
import os
import sys
import time

import requests


BASE_URL = os.environ.get("SYNONYM_BAR_SIDECAR_URL", "http://127.0.0.1:8787").rstrip("/")


def check_health() -> None:
    resp = requests.get(f"{BASE_URL}/health", timeout=5)
    resp.raise_for_status()
    data = resp.json()
    print("[health]")
    print(f"version: {data.get('version')}")
    print(f"capabilities: {', '.join(data.get('capabilities', []))}")
    print(f"providers: {', '.join(data.get('providers', []))}")


def run_self_test() -> bool:
    start = time.time()
    resp = requests.post(f"{BASE_URL}/rewrite/self-test", timeout=40)
    resp.raise_for_status()
    data = resp.json()
    status = "ok" if data.get("ok") else "failed"
    print(f"\n[self-test] {data.get('provider')} {status} in {time.time()-start:.2f}s")
    print(data.get("message"))
    return bool(data.get("ok"))


def run_query(text: str, mode: str, tone: str) -> None:
    payload = {"text": text, "mode": mode, "tone": tone}
    resp = requests.post(f"{BASE_URL}/rewrite", json=payload, timeout=40)
    if resp.status_code >= 400:
        detail = resp.json().get("detail")
        if isinstance(detail, dict):
            print(f"\n[query] HTTP {resp.status_code} {detail.get('kind')}: {detail.get('message')}")
        else:
            print(f"\n[query] HTTP {resp.status_code} {json.dumps(detail, ensure_ascii=False)}")
        return
    print("\n[query candidates]")
    print(json.dumps(resp.json(), ensure_ascii=False, indent=2))


def main() -> None:
    check_health()
    ok = run_self_test()
    text = os.environ.get("QUERY_TEXT")
    if text and ok:
        run_query(text, os.environ.get("QUERY_MODE", "word"), os.environ.get("QUERY_TONE", "casual"))
    if not ok:
        sys.exit(2)


if __name__ == "__main__":
    try:
        main()
    except requests.RequestException as exc:
        print(f"[error] {exc}", file=sys.stderr)
        sys.exit(1)
