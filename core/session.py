"""Interactive session: the prompt sequence driving the engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from graph.engine import CommitResult, RelationshipEngine
from interaction.collector import InputCollector
from interaction.validators import (
    AGE_FORMAT,
    BFF_FORMAT,
    CONTINUE_CHOICE,
    NAME_FORMAT,
    STAY_CHOICE,
    TECHNOLOGY_CHOICE,
    Validator,
)

logger = logging.getLogger("bff.session")


class SessionState(str, Enum):
    AWAITING_START = "awaiting_start"
    COLLECTING_NAME = "collecting_name"
    COLLECTING_BFF = "collecting_bff"
    COLLECTING_FRIEND = "collecting_friend"
    COLLECTING_AGE = "collecting_age"
    COLLECTING_TECHNOLOGY = "collecting_technology"
    COMMITTING = "committing"
    AWAITING_CONTINUE = "awaiting_continue"


@dataclass(frozen=True)
class Question:
    prompt: str
    label: str
    validator: Validator


START = Question("Enter SocialNetworkBFF ? ('q' to quit / enter to continue)", "choice", CONTINUE_CHOICE)
NAME = Question("What is your name ?", "name", NAME_FORMAT)
BFF = Question("Who is your best friend for life, a.k.a BFF ?", "bff name", BFF_FORMAT)
FRIEND = Question("Who is your other friend ?", "friend", NAME_FORMAT)
AGE = Question("How old are you ?", "age", AGE_FORMAT)
TECHNOLOGY = Question("Do you like Flink, Apex or Spark ?", "technology", TECHNOLOGY_CHOICE)
QUIT = Question("Quit SocialNetworkBFF ? (enter to quit / 's' to stay)", "choice", STAY_CHOICE)


@dataclass
class Answers:
    name: str = ""
    bff: str = ""
    friend: str = ""
    age: str = ""
    technology: str = ""


class InteractiveSession:
    """Runs the question loop for as many people as the operator enters."""

    def __init__(self, collector: InputCollector, engine: RelationshipEngine) -> None:
        self.collector = collector
        self.engine = engine
        self.state = SessionState.AWAITING_START

    def _enter(self, state: SessionState) -> None:
        logger.debug("Session %s -> %s", self.state.value, state.value)
        self.state = state

    def _ask(self, state: SessionState, question: Question) -> str:
        self._enter(state)
        return self.collector.ask_question(question.prompt, question.label, question.validator)

    def collect(self) -> Answers:
        """Ask the per-person questions; stops after the name when it is skipped."""
        answers = Answers(name=self._ask(SessionState.COLLECTING_NAME, NAME))
        if not answers.name:
            return answers
        answers.bff = self._ask(SessionState.COLLECTING_BFF, BFF)
        answers.friend = self._ask(SessionState.COLLECTING_FRIEND, FRIEND)
        answers.age = self._ask(SessionState.COLLECTING_AGE, AGE)
        answers.technology = self._ask(SessionState.COLLECTING_TECHNOLOGY, TECHNOLOGY)
        return answers

    def commit(self, answers: Answers) -> CommitResult:
        self._enter(SessionState.COMMITTING)
        result = self.engine.apply(
            answers.name,
            answers.bff,
            friend=answers.friend or None,
            info={"age": answers.age, "technology": answers.technology},
        )
        self.collector.console.write(
            f"Saved '{answers.name}' ({len(result.mutations)} record(s) updated)"
        )
        return result

    def run(self) -> list[CommitResult]:
        """Run until the operator quits; returns what was committed."""
        results: list[CommitResult] = []
        try:
            if self._ask(SessionState.AWAITING_START, START) == "q":
                return results
            while True:
                answers = self.collect()
                if answers.name:
                    results.append(self.commit(answers))
                else:
                    logger.info("No name entered, nothing to commit")
                if self._ask(SessionState.AWAITING_CONTINUE, QUIT) != "s":
                    break
        except Exception as exc:
            logger.error("Session aborted while %s: %s", self.state.value, exc)
            raise
        finally:
            self._enter(SessionState.AWAITING_START)
        return results
