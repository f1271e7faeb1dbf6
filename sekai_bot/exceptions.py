"""Discord Bot カスタム例外定義

ハンドラーはこれらの例外を送出し、handlers.responses.respond_error で
ユーザー向けメッセージに変換する。
"""

from typing import Any


class BotError(Exception):
    """Discord Bot基底例外クラス

    全てのBot固有例外の親クラス。
    エラーメッセージと詳細情報を保持。
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Args:
            message: エラーメッセージ（ユーザーにそのまま表示できる文言）
            details: エラーの詳細情報（ログ用）
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class CommandValidationError(BotError):
    """コマンド引数・実行場所が不正な場合のエラー

    エフェメラルメッセージで実行者にのみ通知する。
    """
    pass


class NotFoundError(BotError):
    """検索対象が見つからない場合のエラー

    エラーログには残さない（INFOレベルで記録）。
    """
    pass


class SongNotFoundError(NotFoundError):
    """楽曲が見つからない場合のエラー"""
    pass


class RoleMembersNotFoundError(NotFoundError):
    """指定ロールを持つメンバーがいない場合のエラー"""
    pass


class CatalogUnavailableError(BotError):
    """楽曲データが読み込まれていない場合のエラー

    楽曲データファイルが存在しない・壊れている場合に発生。
    """
    pass


class DiscordAPIError(BotError):
    """Discord API呼び出し時のエラー

    権限不足・通信失敗など、discord.pyの例外をラップする際に使用。
    """
    pass
