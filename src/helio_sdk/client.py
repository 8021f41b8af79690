"""Python client for the Helio REST API."""

from __future__ import annotations

import random
import re
import threading
import time
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple
from uuid import uuid4

import httpx

from .config import ClientConfig, default_config
from .context import RequestLogContext
from .encoding import encode_parameters, multipart_fields, objects_to_ids
from .error_classifier import classify_error_response, general_api_error, network_error
from .errors import AuthenticationError, HelioError
from .log import log_debug, log_error, log_info
from .options import OptionsLike, RequestOptions
from .response import HelioResponse
from .result import Failure, RequestResult, Success
from .retry import RetryPolicy
from .transport import HttpTransport
from .user_agent import SystemProfiler, user_agent

QUERY_METHODS = ("get", "head", "delete")
IDEMPOTENT_RETRY_METHODS = ("post", "delete")
MULTIPART = "multipart/form-data"

_WHITESPACE = re.compile(r"\s")


def normalize_header_name(name: str) -> str:
    return name.replace("_", "-")


class HelioClient:
    """Executes requests against the Helio API.

    ``execute`` returns a :class:`Success` or :class:`Failure`; ``request``
    raises the failure's error instead. Resource classes go through
    ``request`` on whichever client they are handed, falling back to
    :meth:`default`.
    """

    _default: ClassVar[Optional["HelioClient"]] = None
    _default_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self._config = config if config is not None else default_config
        self._http = HttpTransport(self._config, transport=transport)
        self._profiler = SystemProfiler()
        self._sleep = sleep
        self._rand = rand
        self._local = threading.local()

    @classmethod
    def default(cls) -> "HelioClient":
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls(default_config)
            return cls._default

    def __enter__(self) -> "HelioClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def last_response(self) -> Optional[HelioResponse]:
        """The response of the most recent successful call made on this thread."""
        return getattr(self._local, "last_response", None)

    def execute(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        opts: OptionsLike = None,
    ) -> RequestResult:
        try:
            response, context = self._execute_request(method, path, params, RequestOptions.normalize(opts))
        except HelioError as exc:
            return Failure(exc)
        return Success(response=response, context=context)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        opts: OptionsLike = None,
    ) -> Tuple[HelioResponse, RequestOptions]:
        """Run a request and return the response with options to reuse for follow-up calls."""
        opts = RequestOptions.normalize(opts)
        result = self.execute(method, path, params, opts)
        response = result.unwrap()
        persisted = opts.persistable().merge(RequestOptions(api_token=result.context.api_token))
        return response, persisted

    def _execute_request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]],
        opts: RequestOptions,
    ) -> Tuple[HelioResponse, RequestLogContext]:
        method = method.lower()
        config = self._config
        api_base = opts.api_base or config.api_base
        api_id = opts.api_id or config.api_id
        api_token = opts.api_token or config.api_token

        self._check_api_token(api_token)

        params = objects_to_ids(dict(params or {}))
        url = f"{api_base}{path}"

        headers = httpx.Headers(self._request_headers(api_token, api_id, method))
        headers.update({normalize_header_name(key): value for key, value in opts.headers.items()})

        body: Optional[str] = None
        files = None
        query: Optional[str] = None
        if method in QUERY_METHODS:
            query = encode_parameters(params) or None
            if query:
                url = f"{url}{'&' if '?' in url else '?'}{query}"
        elif headers.get("Content-Type") == MULTIPART:
            # httpx writes its own Content-Type carrying the boundary.
            del headers["Content-Type"]
            files = multipart_fields(params)
        else:
            body = encode_parameters(params)

        context = RequestLogContext(
            method=method,
            path=path,
            api_id=headers.get("X-API-ID"),
            api_token=api_token,
            api_version=headers.get("Helio-Version"),
            idempotency_key=headers.get("Idempotency-Key"),
            query_params=query,
            body=params if files is not None else body,
        )

        def send() -> httpx.Response:
            return self._http.send(method, url, headers=headers, content=body, files=files)

        http_resp, context = self._execute_with_rescues(api_base, context, send)

        try:
            resp = HelioResponse.from_httpx(http_resp)
        except ValueError:
            error = general_api_error(http_resp.status_code, http_resp.text, http_resp.headers)
            log_error(
                config,
                "Helio API error",
                status=http_resp.status_code,
                error_message=error.message,
                idempotency_key=context.idempotency_key,
                request_id=context.request_id,
            )
            raise error

        self._local.last_response = resp
        return resp, context

    def _execute_with_rescues(
        self,
        api_base: str,
        context: RequestLogContext,
        send: Callable[[], httpx.Response],
    ) -> Tuple[httpx.Response, RequestLogContext]:
        policy = RetryPolicy.from_config(self._config, rand=self._rand)
        num_retries = 0
        while True:
            request_start = time.monotonic()
            self._log_request(context, num_retries)
            try:
                response = send()
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                # The request context stays clean for the next attempt.
                error_context = context.from_response_headers(exc.response.headers)
                self._log_response(error_context, request_start, exc.response.status_code, exc.response.text)
                if policy.should_retry(exc, num_retries):
                    num_retries += 1
                    self._sleep(policy.sleep_time(num_retries))
                    continue
                raise classify_error_response(self._config, exc.response, error_context) from exc
            except httpx.RequestError as exc:
                self._log_response_error(context, request_start, exc)
                if policy.should_retry(exc, num_retries):
                    num_retries += 1
                    self._sleep(policy.sleep_time(num_retries))
                    continue
                raise network_error(self._config, exc, context, num_retries, api_base) from exc
            else:
                context = context.from_response_headers(response.headers)
                self._log_response(context, request_start, response.status_code, response.text)
                return response, context

    @staticmethod
    def _check_api_token(api_token: Optional[str]) -> None:
        if not api_token:
            raise AuthenticationError(
                "No API key provided. Set your API key with ClientConfig(api_token=<API-TOKEN>) "
                "or pass one per call. You can generate API keys from the Helio web interface. "
                "See https://helio.zurb.com for details, or email helio@zurb.com if you have any questions."
            )
        if _WHITESPACE.search(api_token):
            raise AuthenticationError(
                "Your API key is invalid, as it contains whitespace. (HINT: You can double-check "
                "your API key from the Helio web interface. See https://helio.zurb.com for details, "
                "or email helio@zurb.com if you have any questions.)"
            )

    def _request_headers(self, api_token: str, api_id: Optional[str], method: str) -> Dict[str, str]:
        config = self._config
        headers = {
            "User-Agent": user_agent(config.app_info),
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/x-www-form-urlencoded",
        }

        # Retrying a write is only safe when the server can deduplicate it.
        if method in IDEMPOTENT_RETRY_METHODS and config.max_network_retries > 0:
            headers["Idempotency-Key"] = str(uuid4())

        if api_id:
            headers["X-API-ID"] = api_id
        if config.api_version:
            headers["Helio-Version"] = config.api_version
        headers["X-API-TOKEN"] = api_token
        headers.update(self._profiler.headers(config.app_info))
        return headers

    def _log_request(self, context: RequestLogContext, num_retries: int) -> None:
        log_info(
            self._config,
            "Request to Helio API",
            api_id=context.api_id,
            api_version=context.api_version,
            idempotency_key=context.idempotency_key,
            method=context.method,
            num_retries=num_retries,
            path=context.path,
        )
        log_debug(
            self._config,
            "Request details",
            body=context.body,
            idempotency_key=context.idempotency_key,
            query_params=context.query_params,
        )

    def _log_response(self, context: RequestLogContext, request_start: float, status: int, body: str) -> None:
        log_info(
            self._config,
            "Response from Helio API",
            api_id=context.api_id,
            api_version=context.api_version,
            elapsed=round(time.monotonic() - request_start, 6),
            idempotency_key=context.idempotency_key,
            method=context.method,
            path=context.path,
            request_id=context.request_id,
            status=status,
        )
        log_debug(
            self._config,
            "Response details",
            body=body,
            idempotency_key=context.idempotency_key,
            request_id=context.request_id,
        )

    def _log_response_error(self, context: RequestLogContext, request_start: float, exc: Exception) -> None:
        log_error(
            self._config,
            "Request error",
            elapsed=round(time.monotonic() - request_start, 6),
            error_message=str(exc),
            idempotency_key=context.idempotency_key,
            method=context.method,
            path=context.path,
        )

    def close(self) -> None:
        self._http.close()


__all__ = ["HelioClient"]
