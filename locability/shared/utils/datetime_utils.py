"""日時関連ユーティリティ"""

from datetime import datetime, timezone
from typing import Any


def now_utc() -> datetime:
    """現在のUTC時間を取得"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    datetimeをUTCに揃える

    Args:
        dt: 変換対象のdatetime（タイムゾーン情報がない場合はUTCとして扱う）

    Returns:
        UTCのdatetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime) -> str:
    """datetimeをISO 8601文字列（UTC）に変換"""
    return ensure_utc(dt).isoformat()


def parse_datetime(value: Any) -> datetime:
    """
    ISO 8601文字列またはdatetime（Firestore Timestampを含む）をUTCのdatetimeに変換

    Args:
        value: 変換対象

    Returns:
        UTCのdatetime

    Raises:
        ValueError: 解釈できない値の場合
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, str):
        # Python 3.10 以前の fromisoformat は "Z" を受け付けない
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        return ensure_utc(datetime.fromisoformat(text))

    raise ValueError(f"Unsupported datetime value: {value!r}")


def format_duration(seconds: float) -> str:
    """
    秒数を読みやすい形式に変換

    Args:
        seconds: 秒数

    Returns:
        "1m 23.4s" のような文字列
    """
    minutes = int(seconds // 60)
    secs = seconds - minutes * 60

    if minutes > 0:
        return f"{minutes}m {secs:.1f}s"
    return f"{secs:.1f}s"
