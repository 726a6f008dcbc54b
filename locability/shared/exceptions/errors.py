"""カスタム例外定義"""


class LocAbilityError(Exception):
    """アプリケーション基底例外"""

    pass


class HTTPError(LocAbilityError):
    """HTTP関連のエラー"""

    pass


class ParsingError(LocAbilityError):
    """レコード解析エラー（必須フィールド欠落・未知の列挙値）"""

    pass


class GeodataImportError(LocAbilityError):
    """外部ジオデータ取り込みのエラー"""

    pass


class StorageError(LocAbilityError):
    """ストレージ関連のエラー"""

    pass


class ConfigurationError(LocAbilityError):
    """設定エラー"""

    pass


class ValidationError(LocAbilityError):
    """バリデーションエラー"""

    pass
