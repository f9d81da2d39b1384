import functools
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, Optional

from rich.text import Text

from quiz_server.core.errors import ConnectionClosed, NotFound, QuizError, ValidationError
from quiz_server.models import Quiz
from quiz_server.services.play import PlaySession
from quiz_server.services.validation import answers_match, validate_id

if TYPE_CHECKING:
    from quiz_server.services.session_manager import QuizSession

Handler = Callable[["QuizSession", Optional[str]], Awaitable[None]]

logger = logging.getLogger("session")

COMMANDS: Dict[str, Handler] = {}

HELP_LINES = [
    "Commands:",
    "  h|help - Show this help.",
    "  list - List the existing quizzes.",
    "  show <id> - Show the question and answer of the given quiz.",
    "  add - Add a new quiz interactively.",
    "  delete <id> - Delete the given quiz.",
    "  edit <id> - Edit the given quiz.",
    "  test <id> - Test the given quiz.",
    "  p|play - Play: answer every quiz in random order.",
    "  credits - Credits.",
    "  q|quit - Leave the program.",
]


def command(*names: str, ready: bool = True) -> Callable[[Handler], Handler]:
    """Register a handler under ``names``.

    The wrapper reports any error raised by the handler once and then
    signals ready exactly once. A closed connection ends the session
    instead, so it is re-raised untouched.
    """

    def decorator(func: Handler) -> Handler:
        @functools.wraps(func)
        async def handler(session: "QuizSession", arg: Optional[str] = None) -> None:
            try:
                await func(session, arg)
            except ConnectionClosed:
                raise
            except ValidationError as exc:
                await session.presenter.error(exc.message)
                for message in exc.fields:
                    await session.presenter.error(message)
            except QuizError as exc:
                await session.presenter.error(exc.message)
            except Exception as exc:
                logger.exception("Command %s failed session=%s", names[0], session.id)
                await session.presenter.error(str(exc) or exc.__class__.__name__)
            if ready:
                await session.ready()

        for name in names:
            COMMANDS[name] = handler
        return handler

    return decorator


def quiz_line(quiz: Quiz, with_answer: bool = False) -> Text:
    line = Text.assemble(" [", (str(quiz.id), "magenta"), "]:  ", quiz.question)
    if with_answer:
        line.append_text(Text.assemble(" ", ("=>", "magenta"), " ", quiz.answer))
    return line


async def fetch_quiz(session: "QuizSession", arg: Optional[str]) -> Quiz:
    quiz_id = validate_id(arg)
    quiz = await session.store.find_by_id(quiz_id)
    if not quiz:
        raise NotFound(quiz_id)
    return quiz


@command("help", "h")
async def help_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    for line in HELP_LINES:
        await session.presenter.write(line)


@command("list")
async def list_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    for quiz in await session.store.list_all():
        await session.presenter.write(quiz_line(quiz))


@command("show")
async def show_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    quiz = await fetch_quiz(session, arg)
    await session.presenter.write(quiz_line(quiz, with_answer=True))


@command("add")
async def add_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    question = await session.prompt.ask(" Enter a question: ")
    answer = await session.prompt.ask(" Enter the answer: ")
    quiz = await session.store.create(question, answer)
    await session.presenter.write(
        Text.assemble(" ", ("Added", "magenta"), ": ", quiz.question, " ", ("=>", "magenta"), " ", quiz.answer)
    )


@command("delete")
async def delete_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    await session.store.delete(validate_id(arg))


@command("edit")
async def edit_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    quiz = await fetch_quiz(session, arg)
    question = await session.prompt.ask(f" Enter the question [{quiz.question}]: ", default=quiz.question)
    answer = await session.prompt.ask(f" Enter the answer [{quiz.answer}]: ", default=quiz.answer)
    quiz.question = question
    quiz.answer = answer
    quiz = await session.store.update(quiz)
    await session.presenter.write(
        Text.assemble(
            "Quiz ", (str(quiz.id), "magenta"), " changed to: ",
            quiz.question, " ", ("=>", "magenta"), " ", quiz.answer,
        )
    )


@command("test")
async def test_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    quiz = await fetch_quiz(session, arg)
    answer = await session.prompt.ask(f"{quiz.question}? ")
    if answers_match(answer, quiz.answer):
        await session.presenter.write("Your answer is correct.", "green")
    else:
        await session.presenter.write("Your answer is incorrect.", "red")


@command("play", "p")
async def play_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    await PlaySession(session, session.rng).run()


@command("credits")
async def credits_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    await session.presenter.write("Authors:")
    await session.presenter.write(session.settings.credits_author, "green")


@command("quit", "q", ready=False)
async def quit_cmd(session: "QuizSession", arg: Optional[str]) -> None:
    await session.close()
