import enum
import logging
import random
from typing import TYPE_CHECKING, List, Optional, Sequence

from quiz_server.models import Quiz
from quiz_server.services.validation import answers_match

if TYPE_CHECKING:
    from quiz_server.services.session_manager import QuizSession

logger = logging.getLogger("session")


class PlayState(str, enum.Enum):
    INIT = "init"
    ASK_NEXT = "ask_next"
    EVALUATE = "evaluate"
    FINISHED = "finished"


class PlayRound:
    """Quizzes still to be asked in one round, plus the running score."""

    def __init__(self, quizzes: Sequence[Quiz], rng: Optional[random.Random] = None):
        self.remaining: List[Quiz] = list(quizzes)
        self.score = 0
        self.rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self.remaining)

    def draw(self) -> Quiz:
        """Remove and return a uniformly chosen quiz (no replacement)."""
        if not self.remaining:
            raise IndexError("no quizzes left in this round")
        index = self.rng.randrange(len(self.remaining))
        last = len(self.remaining) - 1
        self.remaining[index], self.remaining[last] = self.remaining[last], self.remaining[index]
        return self.remaining.pop()


class PlaySession:
    """Ask random quizzes until one is missed or none are left."""

    def __init__(self, session: "QuizSession", rng: Optional[random.Random] = None):
        self.session = session
        self.rng = rng
        self.state = PlayState.INIT
        self.round: Optional[PlayRound] = None
        self.current: Optional[Quiz] = None
        self.answer: Optional[str] = None
        self.exhausted = False

    @property
    def score(self) -> int:
        return self.round.score if self.round else 0

    async def run(self) -> int:
        while self.state is not PlayState.FINISHED:
            if self.state is PlayState.INIT:
                self.state = await self._init()
            elif self.state is PlayState.ASK_NEXT:
                self.state = await self._ask_next()
            elif self.state is PlayState.EVALUATE:
                self.state = await self._evaluate()
        await self._finish()
        return self.score

    async def _init(self) -> PlayState:
        store = self.session.store
        if await store.count() == 0:
            self.exhausted = True
            return PlayState.FINISHED
        self.round = PlayRound(await store.list_all(), self.rng)
        return PlayState.ASK_NEXT

    async def _ask_next(self) -> PlayState:
        if not self.round:
            self.exhausted = True
            return PlayState.FINISHED
        self.current = self.round.draw()
        self.answer = await self.session.prompt.ask(f"{self.current.question}? ")
        return PlayState.EVALUATE

    async def _evaluate(self) -> PlayState:
        presenter = self.session.presenter
        if answers_match(self.answer, self.current.answer):
            self.round.score += 1
            await presenter.write(f"CORRECT - {self.round.score} hits so far", "green")
            return PlayState.ASK_NEXT
        await presenter.write("INCORRECT.", "red")
        return PlayState.FINISHED

    async def _finish(self) -> None:
        presenter = self.session.presenter
        if self.exhausted:
            await presenter.write("Nothing left to ask.", "magenta")
        await presenter.write(f"End of quiz. Score: {self.score}")
        logger.info(
            "Round finished session=%s score=%s exhausted=%s",
            self.session.id,
            self.score,
            self.exhausted,
        )
