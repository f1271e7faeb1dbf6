"""Discord Bot コマンドハンドラーモジュール

各スラッシュコマンドのビジネスロジックを管理します。
SekaiBot クラスからロジックを分離し、ハンドラー単位でテストできるようにしています。

Modules:
    calc_handler: /calc（イベントポイント逆算とページ送り）
    purge_handler: /purge（メッセージ一括削除）
    room_id_handler: /roomid（部屋番号でチャンネル名変更）
    check_role_handler: /checkrole（ロール保持者一覧）
    reminder_handler: /taki（定期リマインド）
    efficiency_handler: /efficiency（楽曲の効率難易度）
    read_channel_handler: /readchannel（指定チャンネルの最新メッセージ）
"""

from sekai_bot.handlers.calc_handler import CalcHandler
from sekai_bot.handlers.check_role_handler import CheckRoleHandler
from sekai_bot.handlers.efficiency_handler import EfficiencyHandler
from sekai_bot.handlers.purge_handler import PurgeHandler
from sekai_bot.handlers.read_channel_handler import ReadChannelHandler
from sekai_bot.handlers.reminder_handler import ReminderHandler
from sekai_bot.handlers.room_id_handler import RoomIdHandler

__all__ = [
    "CalcHandler",
    "CheckRoleHandler",
    "EfficiencyHandler",
    "PurgeHandler",
    "ReadChannelHandler",
    "ReminderHandler",
    "RoomIdHandler",
]
