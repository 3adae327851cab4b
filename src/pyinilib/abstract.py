# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2024/11/02 21:40:17
# @Author : Kariko Lin

from abc import ABCMeta, abstractmethod
from typing import Generic, Iterator, TypeVar

T = TypeVar('T')


class TokenSource(Generic[T], metaclass=ABCMeta):
    """A cursor over tokens of some content, like `StringIO` over chars.

    Restartable via `reset_seek()`, but never seekable mid-stream.
    Iterating always starts over from the first token.
    """
    @abstractmethod
    def update(self, content: str) -> None:
        """Point the source at new content. Old tokens become invalid."""
        raise NotImplementedError

    @abstractmethod
    def reset_seek(self) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def seekable(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def next(self) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def current(self) -> T:
        raise NotImplementedError

    def __iter__(self) -> Iterator[T]:
        self.reset_seek()
        while self.seekable:
            yield self.current
            self.next()


class FileHandler(Generic[T], metaclass=ABCMeta):
    def __init__(self, filename: str, encoding: str = 'utf-8') -> None:
        self._fn = filename
        self._codec = encoding

    @abstractmethod
    def read(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def write(self, instance: T) -> None:
        raise NotImplementedError

    def __str__(self) -> str:
        return f'{self._fn} ({self._codec})'
