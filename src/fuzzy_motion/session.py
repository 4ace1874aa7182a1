"""Interactive motion session: one key per cycle until a jump or cancel.

Each cycle renders the prompt and the current targets, then waits for
exactly one key code. The session ends on a jump (label key, Enter, or
auto-jump) or on Escape. Whatever ends it, labels, shading and the prompt
are torn down before :meth:`MotionSession.run` returns.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from fuzzy_motion.config import MotionConfig
from fuzzy_motion.keys import BACKSPACE_CODES, CTRL_W, ENTER, ESCAPE, is_printable
from fuzzy_motion.labels import SessionState, recompute
from fuzzy_motion.types import Target, Word

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------


class Renderer(Protocol):
    """Paints the session. Every method must be safe to call repeatedly."""

    async def shade(self) -> None: ...

    async def clear_shade(self) -> None: ...

    async def prompt(self, text: str) -> None: ...

    async def clear_prompt(self) -> None: ...

    async def mount(self, targets: Sequence[Target]) -> None: ...

    async def unmount(self) -> None: ...

    async def flush(self) -> None: ...


class Jumper(Protocol):
    """Moves the cursor to a target, remembering where it came from."""

    async def jump(self, target: Target) -> None: ...


class KeySource(Protocol):
    """Blocks until the next key code is available."""

    async def getchar(self) -> int: ...


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class MotionSession:
    """Drives one navigation session over a fixed word list."""

    def __init__(
        self,
        words: Sequence[Word],
        config: MotionConfig,
        renderer: Renderer,
        jumper: Jumper,
        keys: KeySource,
    ) -> None:
        self._words = list(words)
        self._config = config
        self._renderer = renderer
        self._jumper = jumper
        self._keys = keys
        self._label_codes = {ord(label) for label in config.labels}
        self._state = SessionState()
        self._input = ""
        self._targets: list[Target] = []
        self._error: Exception | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def input(self) -> str:
        return self._input

    @property
    def targets(self) -> list[Target]:
        return list(self._targets)

    @property
    def error(self) -> Exception | None:
        """The exception that aborted the last run, or None after a jump or cancel."""
        return self._error

    async def run(self) -> Target | None:
        """Run until the user jumps or cancels. Returns the jump target, if any.

        An unexpected failure also returns None; it is logged and kept in
        :attr:`error` so callers can tell it apart from a cancel.
        """
        self._state = SessionState()
        self._input = ""
        self._targets = []
        self._error = None
        try:
            await self._renderer.shade()
            return await self._loop()
        except Exception as e:
            logger.exception("Motion session aborted")
            self._error = e
            return None
        finally:
            await self._cleanup()

    async def _loop(self) -> Target | None:
        while True:
            await self._renderer.prompt(self._input)
            await self._renderer.unmount()
            self._state, self._targets = recompute(
                self._state, self._input, self._words, self._config
            )
            await self._renderer.mount(self._targets)
            await self._renderer.flush()

            code = await self._keys.getchar()
            logger.debug(
                "key=%d input=%r targets=%d", code, self._input, len(self._targets)
            )

            if code == ENTER:
                if not self._targets:
                    return None
                code = ord(self._targets[0].char)

            if code == ESCAPE:
                return None
            elif code in self._label_codes:
                target = self._find_target(chr(code))
                if target is not None:
                    await self._jump(target)
                    return target
            elif code in BACKSPACE_CODES:
                self._state = self._state.reset()
                self._input = self._input[:-1]
            elif code == CTRL_W:
                self._state = self._state.reset()
                self._input = ""
            elif is_printable(code):
                self._input += chr(code)
                self._state, self._targets = recompute(
                    self._state, self._input, self._words, self._config
                )
                if self._config.auto_jump and len(self._targets) == 1:
                    target = self._targets[0]
                    await self._jump(target)
                    return target

    def _find_target(self, char: str) -> Target | None:
        for target in self._targets:
            if target.char == char:
                return target
        return None

    async def _jump(self, target: Target) -> None:
        logger.info(
            "Jumping to %d:%d (%r)",
            target.jump_position.line,
            target.jump_position.col,
            target.text,
        )
        await self._jumper.jump(target)

    async def _cleanup(self) -> None:
        await self._renderer.unmount()
        await self._renderer.clear_shade()
        await self._renderer.clear_prompt()
        await self._renderer.flush()
