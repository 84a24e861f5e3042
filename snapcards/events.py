"""Custom pygame events used by the snapcards table."""

from __future__ import annotations

import pygame

# Reserve a block of user events for the game.
USER_EVENT_BASE = pygame.USEREVENT + 1
AUTO_STEP = USER_EVENT_BASE + 0
