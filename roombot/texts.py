# roombot/texts.py
# ユーザー向け文言（ロシア語）。理由コード → 文言の対応もここにまとめる。

BTN_CHECK_ID = "✅ Проверить ID"
BTN_EDIT_ID = "✏️ Изменить ID"
BTN_HELP = "ℹ️ Справка"
BTN_PICK_ROOM = "🏠 Выбрать комнату"
BTN_APPROVE = "✅ Одобрить"
BTN_REJECT = "❌ Отклонить"
BTN_REMOVE = "🚪 Исключить"

START = "🎮 Проверь свой ID в игре\n\nЕсли ты ещё не отправлял ID — нажми кнопку ниже 👇"
MAIN_MENU = "🎮 Главное меню:"
HELP = (
    "ℹ️ Это бот для сохранения твоего ID в игре и вступления в комнату.\n\n"
    "1. Отправь свой ID из игры (только цифры).\n"
    "2. Выбери комнату и отправь заявку.\n"
    "3. Дождись решения лидера комнаты."
)
ASK_GAME_ID = "❗ Пришли свой ID из игры одним сообщением (только цифры)"
ASK_NEW_GAME_ID = "✏️ Введи новый ID из игры, чтобы перезаписать старый (только цифры)"
INVALID_GAME_ID = "❌ ID должен состоять только из цифр. Попробуй ещё раз."
GENERIC_ERROR = "⚠️ Произошла ошибка. Попробуй позже."
PERMISSION_DENIED = "⛔ У тебя нет прав на это действие."
GROUP_NOT_CONFIGURED = (
    "⚙️ Группа не настроена.\n\n"
    "Добавь бота администратором в группу и укажи её ID в переменной GROUP_CHAT_ID."
)
NO_PENDING = "📭 Заявок нет."
NO_MEMBERS = "📭 В комнате пока нет участников."
NO_USERS = "📭 Пользователей нет."
ASSIGN_LEADER_USAGE = "Использование: /assign_leader <telegram_id>"
LEADER_WITHOUT_GAME_ID = "❗ У пользователя не сохранён ID в игре."


def game_id_saved(game_id: str) -> str:
    return f"✅ ID сохранён!\n🎮 Твой ID: {game_id}"


def game_id_current(game_id: str) -> str:
    return f"✅ Твой ID уже сохранён:\n🎮 {game_id}"


def room_button(room_game_id: str, approved: int) -> str:
    return f"🏠 {room_game_id} ({approved}/60)"


def pick_room() -> str:
    return "🏠 Выбери комнату:"


def forced_room(room_game_id: str) -> str:
    return f"🏠 Для тебя подобрана комната {room_game_id}. Нажми, чтобы отправить заявку:"


def request_sent(room_game_id: str) -> str:
    return f"📨 Заявка в комнату {room_game_id} отправлена. Ожидай решения лидера."


def leader_new_request(requester: str, game_id: str, room_game_id: str) -> str:
    return (
        f"📥 Новая заявка в комнату {room_game_id}\n"
        f"👤 {requester}\n🎮 ID: {game_id}"
    )


def request_line(requester: str, game_id: str, room_game_id: str) -> str:
    return f"👤 {requester} · 🎮 {game_id} → 🏠 {room_game_id}"


def approved_for_user(room_game_id: str, invite_link: str = None) -> str:
    text = f"🎉 Твоя заявка в комнату {room_game_id} одобрена!"
    if invite_link:
        text += f"\n\n🔗 Ссылка для вступления в чат (одноразовая):\n{invite_link}"
    return text


def rejected_for_user(room_game_id: str) -> str:
    return f"😔 Твоя заявка в комнату {room_game_id} отклонена."


def rejected_by_admin_for_leader(requester: str, room_game_id: str) -> str:
    return f"ℹ️ Администратор группы отклонил заявку {requester} в комнату {room_game_id}."


def removed_for_user(room_game_id: str) -> str:
    return f"🚪 Ты исключён из комнаты {room_game_id}."


def review_done(status: str) -> str:
    return {
        "APPROVED": "✅ Заявка одобрена.",
        "REJECTED": "❌ Заявка отклонена.",
    }.get(status, "✅ Готово.")


def member_removed() -> str:
    return "🚪 Участник исключён."


def leader_assigned(room_game_id: str, leader: str) -> str:
    return f"👑 {leader} назначен лидером комнаты {room_game_id}."


def room_line(room_game_id: str, leader: str, approved: int) -> str:
    return f"🏠 {room_game_id} · лидер {leader} · {approved}/60"


def user_line(display_name: str, telegram_id: int, game_id: str, role: str) -> str:
    return f"👤 {display_name} ({telegram_id}) · 🎮 {game_id or '—'} · {role}"


def stats(users: int, rooms: int, statuses: dict, delivered: int, failed: int) -> str:
    return (
        "📊 Статистика\n"
        f"Пользователей: {users}\n"
        f"Комнат: {rooms}\n"
        f"Заявок в ожидании: {statuses.get('PENDING', 0)}\n"
        f"Одобрено: {statuses.get('APPROVED', 0)}\n"
        f"Отклонено: {statuses.get('REJECTED', 0)}\n"
        f"Уведомлений доставлено / не доставлено: {delivered} / {failed}"
    )


# 理由コード → 文言
REASONS = {
    "invalid_game_id": INVALID_GAME_ID,
    "game_id_missing": ASK_GAME_ID,
    "user_not_found": "❗ Пользователь не найден. Нажми /start.",
    "room_not_found": "❗ Комната не найдена.",
    "request_not_found": "❗ Заявка не найдена.",
    "no_rooms": "😔 Сейчас нет свободных комнат. Попробуй позже.",
    "duplicate_request": "⏳ Ты уже отправил заявку в эту комнату. Дождись решения.",
    "active_request_exists": "⏳ У тебя уже есть активная заявка или ты уже в комнате.",
    "not_leader": "⛔ Ты не лидер этой комнаты.",
    "room_full": "🚫 Комната заполнена (60/60).",
    "already_processed": "ℹ️ Заявка уже обработана.",
    "not_approved": "ℹ️ Этот участник не в комнате.",
    "operation_failed": GENERIC_ERROR,
    # 認可
    "not_creator": PERMISSION_DENIED,
    "not_leader_role": PERMISSION_DENIED,
    "not_room_leader": "⛔ Ты не лидер этой комнаты.",
    "not_group_admin": "⛔ Это действие доступно только администраторам группы.",
    "group_not_configured": GROUP_NOT_CONFIGURED,
    "transport_error": "⚠️ Не удалось проверить права в группе. Попробуй позже.",
}


def reason_text(reason: str) -> str:
    return REASONS.get(reason, GENERIC_ERROR)
