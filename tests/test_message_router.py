"""Tests for the MessageRouter — end-to-end conversations through the dispatcher."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from password_bot.agents import messages
from password_bot.agents.states import ManagerState, ManagerWizard, WizardState
from password_bot.database.repository import CredentialRepository, StorageError
from password_bot.services.message_router import MessageRouter, split_command
from password_bot.services.password_generator import DIGITS, LOWERCASE, SPECIAL, UPPERCASE
from password_bot.services.session_manager import SessionManager

PASSWORD_PREFIX = "Ваш пароль: "


@pytest.fixture
def session_manager():
    return SessionManager()


@pytest.fixture
def router(session_manager):
    return MessageRouter(session_manager)


@pytest.fixture
def say(router, db_session):
    """Send one message as *user_id* and return the reply text."""

    async def _say(user_id: int, text: str) -> str | None:
        response = await router.route(user_id=user_id, message=text, db_session=db_session)
        return response.reply_text

    return _say


def test_split_command():
    assert split_command("/get Shop") == ("/get", "Shop")
    assert split_command("/get   My Shop  ") == ("/get", "My Shop")
    assert split_command("/get") == ("/get", None)
    assert split_command("/get ") == ("/get", None)


@pytest.mark.asyncio
async def test_start_lists_commands(say):
    assert await say(33333, "/start") == (
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


@pytest.mark.asyncio
async def test_unknown_command(say):
    assert await say(12345, "hello") == "Неизвестная команда. Напишите /start"
    assert await say(12345, "/START") == "Неизвестная команда. Напишите /start"


@pytest.mark.asyncio
async def test_password_with_default_settings_and_trimmed_input(say):
    result = await say(111, "    /password   ")
    assert result.startswith(PASSWORD_PREFIX)
    password = result.removeprefix(PASSWORD_PREFIX)
    assert len(password) == 10
    assert set(password) <= set(DIGITS + UPPERCASE + LOWERCASE + SPECIAL)


@pytest.mark.asyncio
async def test_successive_passwords_differ(say):
    assert await say(12345, "/password") != await say(12345, "/password")


@pytest.mark.asyncio
@pytest.mark.parametrize("command", ["/get", "/delete", "/change"])
async def test_service_commands_require_argument(say, command):
    assert await say(44444, command) == f"Использование: {command} <сервис>"


@pytest.mark.asyncio
async def test_settings_then_password(say):
    for text in ("/settings", "8", "-", "+", "+", "-"):
        await say(77777, text)

    result = await say(77777, "/password")
    password = result.removeprefix(PASSWORD_PREFIX)
    assert len(password) == 8
    assert not set(password) & set(DIGITS)
    assert not set(password) & set(SPECIAL)


@pytest.mark.asyncio
async def test_users_have_separate_settings(say):
    for text in ("/settings", "12", "+", "-", "+", "-"):
        await say(11111, text)

    password1 = (await say(11111, "/password")).removeprefix(PASSWORD_PREFIX)
    assert len(password1) == 12
    assert not set(password1) & set(UPPERCASE + SPECIAL)

    password2 = (await say(22222, "/password")).removeprefix(PASSWORD_PREFIX)
    assert len(password2) == 10


@pytest.mark.asyncio
async def test_add_get_scenario(say):
    assert await say(1, "/add") == messages.ASK_SERVICE
    assert await say(1, "Shop") == messages.ASK_LOGIN
    assert await say(1, "me@x.com") == messages.ASK_METHOD
    assert await say(1, "2") == messages.ASK_PASSWORD
    assert await say(1, "Secret1!") == "Данные сохранены"

    assert await say(1, "/get Shop") == "Shop:\nЛогин: me@x.com\nПароль: Secret1!"


@pytest.mark.asyncio
async def test_delete_cancel_keeps_record(say):
    for text in ("/add", "Shop", "me@x.com", "2", "Secret1!"):
        await say(2, text)

    assert await say(2, "/delete Shop") == 'Удалить данные для "Shop"? (+ / -)'
    assert await say(2, "-") == "Удаление отменено"
    assert (await say(2, "/get Shop")).startswith("Shop:")


@pytest.mark.asyncio
async def test_delete_confirm_removes_record(say):
    for text in ("/add", "ToDelete", "login", "2", "mypassword"):
        await say(77779, text)

    assert await say(77779, "/delete ToDelete") == 'Удалить данные для "ToDelete"? (+ / -)'
    assert await say(77779, "+") == 'Данные для "ToDelete" удалены'
    assert await say(77779, "/get ToDelete") == "Сервис не найден"


@pytest.mark.asyncio
async def test_list_after_two_adds(say):
    for text in ("/add", "Service1", "login1", "1"):
        await say(66666, text)
    for text in ("/add", "Service2", "login2", "2", "pass2"):
        await say(66666, text)

    assert (await say(66666, "/list")).split("\n") == [
        "Ваши сервисы (всего: 2):",
        "1. Service1",
        "2. Service2",
    ]


@pytest.mark.asyncio
async def test_settings_interrupts_add(say, session_manager, db_session):
    await say(22224, "/add")
    await say(22224, "Service")
    await say(22224, "login")

    assert await say(22224, "/settings") == "Введите длину пароля (6–64):"
    session = session_manager.get(22224)
    assert session.manager_state is ManagerState.NONE
    assert session.wizard_state is WizardState.WAIT_LENGTH

    assert await say(22224, "15") == "Использовать цифры? (+ / -)"
    assert await CredentialRepository(db_session).find(22224, "Service") is None


@pytest.mark.asyncio
async def test_settings_restarts_settings_wizard(say, session_manager):
    await say(5, "/settings")
    await say(5, "20")
    await say(5, "+")

    assert await say(5, "/settings") == messages.ASK_LENGTH
    assert session_manager.get(5).wizard_state is WizardState.WAIT_LENGTH


@pytest.mark.asyncio
async def test_password_abandons_wizard_and_uses_stored_settings(say, session_manager):
    await say(6, "/settings")
    await say(6, "30")

    result = await say(6, "/password")
    assert len(result.removeprefix(PASSWORD_PREFIX)) == 10
    assert session_manager.get(6).wizard_state is WizardState.NONE

    assert await say(6, "+") == messages.UNKNOWN_COMMAND


@pytest.mark.asyncio
async def test_other_commands_are_wizard_input(say, session_manager):
    await say(7, "/add")

    assert await say(7, "/list") == messages.ASK_LOGIN
    assert session_manager.get(7).pending_service == "/list"


@pytest.mark.asyncio
async def test_add_restarts_fresh_when_idle(say, session_manager):
    await say(8, "/add")
    await say(8, "Shop")
    await say(8, "/password")

    assert await say(8, "/add") == messages.ASK_SERVICE
    session = session_manager.get(8)
    assert session.manager_state is ManagerState.ADD_WAIT_SERVICE
    assert session.pending_service is None


@pytest.mark.asyncio
async def test_storage_failure_is_reported_and_resets_wizard(say, session_manager):
    await say(9, "/add")
    await say(9, "Shop")
    await say(9, "me")
    await say(9, "2")

    with patch.object(CredentialRepository, "save", AsyncMock(side_effect=StorageError("boom"))):
        assert await say(9, "pw") == messages.STORAGE_ERROR

    assert session_manager.get(9).manager_state is ManagerState.NONE


@pytest.mark.asyncio
async def test_storage_failure_is_not_reported_as_not_found(say):
    with patch.object(CredentialRepository, "find", AsyncMock(side_effect=StorageError("boom"))):
        assert await say(10, "/get Shop") == messages.STORAGE_ERROR


# ──────────────────────────────────────────────────────────
# Concurrency
# ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_same_user_messages_are_serialized(router, session_manager, db_session):
    await CredentialRepository(db_session).save(3, "Shop", "me", "pw")

    entered = asyncio.Event()
    release = asyncio.Event()
    real_find = CredentialRepository.find

    async def held_find(self, user_id, service):
        if user_id == 3:
            entered.set()
            await release.wait()
        return await real_find(self, user_id, service)

    with patch.object(CredentialRepository, "find", held_find):
        first = asyncio.create_task(router.route(3, "/delete Shop", db_session))
        await entered.wait()
        second = asyncio.create_task(router.route(3, "-", db_session))
        await asyncio.sleep(0)

        # another user is not blocked by user 3's lock
        other = await router.route(4, "/start", db_session)
        assert other.reply_text == messages.START
        assert session_manager.get(3).lock.locked()
        assert not second.done()

        release.set()
        reply_first, reply_second = await asyncio.gather(first, second)

    assert reply_first.reply_text == 'Удалить данные для "Shop"? (+ / -)'
    # the second message saw the DELETE_CONFIRM step set by the first
    assert reply_second.reply_text == "Удаление отменено"
    assert session_manager.get(3).manager_state is ManagerState.NONE


@pytest.mark.asyncio
async def test_waiting_message_keeps_its_session_under_capacity_pressure(db_session):
    manager = SessionManager(max_sessions=1)
    router = MessageRouter(manager)
    session = manager.get(1)

    await session.lock.acquire()
    pending = asyncio.create_task(router.route(1, "/add", db_session))
    await asyncio.sleep(0)
    session.lock.release()

    await router.route(2, "/start", db_session)
    response = await pending

    assert response.reply_text == messages.ASK_SERVICE
    assert manager.get(1) is session
    assert isinstance(session.mode, ManagerWizard)
    assert session.in_flight == 0
