"""HTTPクライアント（リトライ機能付き）"""

import time
from typing import Any, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions.errors import HTTPError, ParsingError
from ..logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "LocAbility/1.0 (+accessibility mapping)"

# 429 は公開Overpassの混雑時に返る
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

FormData = Union[dict[str, Any], str]


class HTTPClient:
    """
    リトライ機能付きHTTPクライアント

    Features:
    - 自動リトライ（指数バックオフ、Retry-After を尊重）
    - タイムアウト設定
    - JSON応答のデコード
    """

    def __init__(
        self,
        timeout: int = 30,
        max_retries: int = 2,
        backoff_factor: float = 1.0,
        status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            timeout: リクエストタイムアウト（秒）
            max_retries: 最大リトライ回数
            backoff_factor: バックオフ係数
            status_forcelist: リトライ対象のステータスコード
            user_agent: User-Agentヘッダー（公開Overpassは連絡先付きのUAを求める）
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        # Overpass はクエリを POST で受けるため POST もリトライ対象にする
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=status_forcelist,
            allowed_methods=frozenset({"GET", "POST"}),
            respect_retry_after_header=True,
        )

        self.session = requests.Session()
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": self.user_agent})

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        リクエストを送信し、2xx以外は例外にする

        Raises:
            HTTPError: 通信失敗・リトライ上限到達・エラーステータスの場合
        """
        started = time.monotonic()
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise HTTPError(f"Failed to {method} {url}: {e}") from e

        logger.debug(
            f"{method} {url} -> {response.status_code} "
            f"({time.monotonic() - started:.2f}s, {len(response.content)} bytes)"
        )
        return response

    def post(
        self,
        url: str,
        data: Optional[FormData] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """フォームデータをPOST"""
        return self.request("POST", url, data=data, headers=headers)

    def post_json(self, url: str, data: Optional[FormData] = None) -> Any:
        """
        フォームデータをPOSTし、応答をJSONとしてデコード

        Raises:
            HTTPError: リクエスト失敗時
            ParsingError: 応答がJSONでない場合
        """
        response = self.post(url, data=data, headers={"Accept": "application/json"})
        try:
            return response.json()
        except ValueError as e:
            content_type = response.headers.get("Content-Type", "unknown")
            raise ParsingError(f"Expected JSON from {url}, got {content_type}: {e}") from e

    def close(self) -> None:
        """セッションをクローズ"""
        self.session.close()
        logger.debug("HTTP session closed")

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
