#!/usr/bin/env python3
"""
In-process message channel between the UI surface and the tile backend.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Callable
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

# backend -> UI
SHOW_TILE = "show-tile"
CLEAR_TILE = "clear-tile"
STATUS_MESSAGE = "status-message"

# UI -> backend
UPDATE_TILE = "update-tile"
SAVE_KEYWORDS = "save-keywords"
RESEND_TILE = "resend-tile"
PREVIOUS_TILE = "previous-tile"
NEXT_TILE = "next-tile"
CLEAR_TILES = "clear-tiles"
OPEN_FILES = "open-files"
OPEN_FOLDERS = "open-folders"

STATUS_AREAS = ("left", "middle", "right")

Handler = Callable[..., object]

#============================================


@dataclass(frozen=True, slots=True)
class Message:
	"""
	One message sent over a channel.
	"""
	name: str
	args: tuple


#============================================


class Channel:
	"""
	One direction of the boundary.

	Handlers run synchronously, in registration order, in the sender's
	thread, so messages are delivered in the order they are sent.
	"""

	#============================================
	def __init__(self, name: str) -> None:
		self.name = name
		self._handlers: dict[str, list[Handler]] = {}
		self._observers: list[Callable[[Message], object]] = []

	#============================================
	def on(self, message: str, handler: Handler) -> None:
		"""
		Register a handler for a message name.

		Args:
			message: Message name.
			handler: Callable receiving the message arguments.
		"""
		self._handlers.setdefault(message, []).append(handler)

	#============================================
	def observe(self, observer: Callable[[Message], object]) -> None:
		"""
		Register a callable that receives every message sent.
		"""
		self._observers.append(observer)

	#============================================
	def send(self, message: str, *args: object) -> int:
		"""
		Deliver a message to its handlers.

		Args:
			message: Message name.
			args: Message payload.

		Returns:
			Number of handlers that received the message.
		"""
		envelope = Message(name=message, args=args)
		for observer in self._observers:
			observer(envelope)
		handlers = self._handlers.get(message, [])
		if not handlers:
			logger.debug("No handler on %s channel for %s", self.name, message)
			return 0
		for handler in list(handlers):
			handler(*args)
		return len(handlers)


#============================================


class BoundaryChannel:
	"""
	Duplex channel: to_ui carries backend output, to_backend carries commands.
	"""

	#============================================
	def __init__(self) -> None:
		self.to_ui = Channel("ui")
		self.to_backend = Channel("backend")


#============================================


def status_area(area: str) -> str:
	"""
	Normalize a status area name, falling back to the left area.
	"""
	if area in STATUS_AREAS:
		return area
	return "left"
