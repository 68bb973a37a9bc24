from __future__ import annotations

import random
import time
from dataclasses import dataclass

import requests
from requests import Response
from requests.adapters import HTTPAdapter


DEFAULT_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_6) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
]


@dataclass(frozen=True)
class FetchResult:
    url: str
    status_code: int | None
    ok: bool
    text: str | None
    error: str | None
    elapsed_ms: int


class HttpClient:
    """
    Thin requests wrapper. Failures are reported through FetchResult instead of
    raised; each fetch is a single attempt.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float,
        proxy_url: str | None = None,
        user_agents: list[str] | None = None,
        accept_language: str = "el-GR,el;q=0.9,en;q=0.8",
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._proxy_url = proxy_url
        self._user_agents = user_agents or DEFAULT_USER_AGENTS
        self._accept_language = accept_language
        self._sess: requests.Session | None = None

    def _session(self) -> requests.Session:
        if self._sess is not None:
            return self._sess
        s = requests.Session()
        adapter = HTTPAdapter(pool_connections=4, pool_maxsize=4, max_retries=0)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        self._sess = s
        return s

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": random.choice(self._user_agents),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": self._accept_language,
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    def _proxies(self) -> dict[str, str] | None:
        if not self._proxy_url:
            return None
        return {"http": self._proxy_url, "https": self._proxy_url}

    def fetch_text(self, url: str) -> FetchResult:
        started = time.perf_counter()
        try:
            resp: Response = self._session().get(
                url,
                headers=self._headers(),
                proxies=self._proxies(),
                timeout=(self._timeout_seconds, self._timeout_seconds),
                allow_redirects=True,
            )
        except requests.RequestException as e:
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            return FetchResult(
                url=url,
                status_code=None,
                ok=False,
                text=None,
                error=f"{type(e).__name__}: {e}",
                elapsed_ms=elapsed_ms,
            )
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        ok = 200 <= resp.status_code < 300
        return FetchResult(
            url=str(resp.url),
            status_code=resp.status_code,
            ok=ok,
            text=resp.text if ok else None,
            error=None if ok else f"HTTP {resp.status_code}",
            elapsed_ms=elapsed_ms,
        )

    def close(self) -> None:
        if self._sess is not None:
            self._sess.close()
            self._sess = None
