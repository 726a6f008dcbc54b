"""テキスト処理ユーティリティ"""

import re
from typing import Any, Optional


def normalize_text(text: Optional[Any]) -> Optional[str]:
    """
    テキストを正規化（OSMタグの数値なども文字列として扱う）

    - 前後の空白を除去
    - 連続する空白を1つに
    - 全角スペースを半角スペースに変換
    """
    if text is None or text == "":
        return None

    text = str(text).replace("　", " ")
    text = re.sub(r"\s+", " ", text)
    text = text.strip()

    return text if text else None


def normalize_tag_value(value: Optional[str]) -> Optional[str]:
    """
    OSMタグの値を比較用に正規化（小文字化・空白除去）

    Args:
        value: タグの値

    Returns:
        Optional[str]: 正規化された値（空の場合はNone）
    """
    normalized = normalize_text(value)
    return normalized.lower() if normalized else None


def tokenize(text: Optional[str]) -> list[str]:
    """
    自由記述テキストを小文字の単語に分割

    Args:
        text: 対象テキスト

    Returns:
        list[str]: 単語のリスト
    """
    normalized = normalize_text(text)
    if not normalized:
        return []

    return re.findall(r"[a-z0-9]+", normalized.lower())


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    テキストを指定長で切り詰め

    Args:
        text: 対象テキスト
        max_length: 最大文字数
        suffix: 切り詰め時の接尾辞

    Returns:
        切り詰められたテキスト
    """
    if not text or len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix
