"""Undoable commands and a bounded undo/redo history."""

from __future__ import annotations

import weakref
from abc import ABC, abstractmethod
from collections import deque
from typing import Any


class Command(ABC):
    """An action that can be performed and reverted."""

    @abstractmethod
    def execute(self) -> None: ...

    @abstractmethod
    def undo(self) -> None: ...


class CommandStack:
    """Undo and redo history holding at most max_stack_size commands per side."""

    def __init__(self, max_stack_size: int = 20) -> None:
        if max_stack_size < 1:
            raise ValueError("max_stack_size must be at least 1")
        self.max_stack_size = max_stack_size
        self._done: deque[Command] = deque(maxlen=max_stack_size)
        self._undone: deque[Command] = deque(maxlen=max_stack_size)

    def execute(self, command_type: type[Command], *args: Any, **kwargs: Any) -> Command:
        """Build a command from the arguments, run it and record it."""
        if not (isinstance(command_type, type) and issubclass(command_type, Command)):
            raise TypeError(f"{command_type!r} is not a Command subclass")
        command = command_type(*args, **kwargs)
        command.execute()
        self._done.appendleft(command)
        return command

    def undo(self) -> bool:
        """Revert the latest command; False if there is nothing to undo."""
        if not self._done:
            return False
        self._done[0].undo()
        self._undone.appendleft(self._done.popleft())
        return True

    def redo(self) -> bool:
        """Re-run the latest undone command; False if there is none."""
        if not self._undone:
            return False
        self._undone[0].execute()
        self._done.appendleft(self._undone.popleft())
        return True


class CommandStackProxy:
    """Runs commands on a stack it does not keep alive."""

    def __init__(self, stack: CommandStack) -> None:
        self._stack = weakref.ref(stack)

    def execute(self, command_type: type[Command], *args: Any, **kwargs: Any) -> bool:
        """Execute on the stack; False if the stack no longer exists."""
        stack = self._stack()
        if stack is None:
            return False
        stack.execute(command_type, *args, **kwargs)
        return True