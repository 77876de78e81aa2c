"""Reply texts sent back to the user.

These strings are the bot's observable contract; tests compare against
them verbatim.
"""

START = (
    "Команды:\n"
    "/settings — настройки генерации\n"
    "/password — сгенерировать пароль\n"
    "\n"
    "/add — добавить запись\n"
    "/list — список сервисов\n"
    "/get <сервис> — логин и пароль\n"
    "/delete <сервис> — удалить (+/-)\n"
    "/change <сервис> — изменить пароль\n"
)
UNKNOWN_COMMAND = "Неизвестная команда. Напишите /start"
STORAGE_ERROR = "Хранилище недоступно. Попробуйте позже"

# ── Settings wizard ──────────────────────────────────────
ASK_LENGTH = "Введите длину пароля (6–64):"
BAD_LENGTH = "Длина должна быть числом от 6 до 64"
ASK_DIGITS = "Использовать цифры? (+ / -)"
ASK_UPPER = "Использовать заглавные буквы? (+ / -)"
ASK_LOWER = "Использовать строчные буквы? (+ / -)"
ASK_SPECIAL = "Использовать специальные символы? (+ / -)"
ANSWER_YES_NO = "Ответьте + или -"
EMPTY_ALPHABET = (
    "Нужно оставить хотя бы один набор символов. Настройки не изменены"
)
YOUR_PASSWORD = "Ваш пароль: {password}"

# ── Credential manager ───────────────────────────────────
ASK_SERVICE = "Введите название сервиса:"
ASK_LOGIN = "Введите логин:"
ASK_METHOD = (
    "Выберите способ создания пароля:\n"
    "1. Автоматическая генерация\n"
    "2. Ввод вручную"
)
ASK_PASSWORD = "Введите пароль:"
ASK_NEW_PASSWORD = "Введите новый пароль:"
ENTER_ONE_OR_TWO = "Введите 1 или 2"
GENERATED_FOR = "Пароль для {service}: {password}"
SAVED = "Данные сохранены"

NO_SERVICES = "У вас пока нет сервисов"
SERVICES_HEADER = "Ваши сервисы (всего: {count}):"
SERVICE_NOT_FOUND = "Сервис не найден"
CREDENTIALS = "{service}:\nЛогин: {login}\nПароль: {password}"

CONFIRM_DELETE = 'Удалить данные для "{service}"? (+ / -)'
DELETED = 'Данные для "{service}" удалены'
DELETE_CANCELLED = "Удаление отменено"

CHANGE_PROMPT = (
    "Текущий логин для {service}: {login}\n"
    "Выберите способ создания нового пароля:\n"
    "1. Автоматическая генерация\n"
    "2. Ввод вручную"
)
NEW_PASSWORD_FOR = "Новый пароль для {service}: {password}"
PASSWORD_CHANGED = "Пароль изменён"
PASSWORD_CHANGED_FOR = "Пароль для {service} изменён"
CHANGE_NOT_FOUND = 'Сервис "{service}" не найден.\nИспользуйте /list.'

USAGE = "Использование: {command} <сервис>"
