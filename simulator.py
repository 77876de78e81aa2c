"""Interactive CLI chat simulator — talk to the bot without Telegram."""

import asyncio

from password_bot.database.engine import async_session_factory, init_db
from password_bot.services.message_router import MessageRouter
from password_bot.services.session_manager import SessionManager

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"


def _ask_user_id(prompt: str, default: int) -> int:
    raw = input(f"{YELLOW}{prompt}{RESET}").strip()
    try:
        return int(raw)
    except ValueError:
        return default


async def main() -> None:
    print(f"\n{BOLD}{'=' * 52}")
    print("  🔐  Password Bot — Chat Simulator")
    print(f"{'=' * 52}{RESET}\n")

    # ── Initialise database ──────────────────────────────
    await init_db()

    print(f"{DIM}Tip: start with /start to see the commands{RESET}")
    print(f"{DIM}     Type 'quit' to exit, 'switch' to change chat id{RESET}\n")

    user_id = _ask_user_id("Enter chat id to simulate: ", default=1)
    print(f"{DIM}Simulating as {user_id}{RESET}\n")

    # ── Set up the framework ─────────────────────────────
    session_manager = SessionManager()
    router = MessageRouter(session_manager)

    while True:
        try:
            user_input = input(f"{BLUE}{BOLD}You:{RESET} ").strip()
        except (KeyboardInterrupt, EOFError):
            print(f"\n{DIM}Goodbye!{RESET}")
            break

        if not user_input:
            continue

        if user_input.lower() == "quit":
            print(f"{DIM}Goodbye!{RESET}")
            break

        if user_input.lower() == "switch":
            user_id = _ask_user_id("New chat id: ", default=user_id)
            print(f"{DIM}Switched to {user_id}{RESET}\n")
            continue

        # ── Route the message through the framework ──────
        async with async_session_factory() as db_session:
            response = await router.route(
                user_id=user_id,
                message=user_input,
                db_session=db_session,
            )

        if response.reply_text:
            print(f"{GREEN}{BOLD}Bot:{RESET} {response.reply_text}\n")


if __name__ == "__main__":
    asyncio.run(main())
