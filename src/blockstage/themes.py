"""Stage themes offered on the menu."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Theme:
    id: int
    title: str
    goal: str
    target_emoji: str
    initial_sprite: str


THEMES: tuple[Theme, ...] = (
    Theme(1, "Dance Party", "Make the cat dance to the music note!", "🎵", "🐱"),
    Theme(2, "Interactive Story", "Introduce yourself to the dragon!", "🐲", "👧"),
    Theme(3, "Bouncer", "Glide to the hoop to score points!", "🏀", "⛹️"),
    Theme(4, "Collector", "Collect all the hidden gems!", "💎", "🦊"),
    Theme(5, "Space Maze", "Navigate the rocket to the star!", "🌟", "🚀"),
    Theme(6, "Showcase", "Create your own creative sequence!", "🎨", "🦄"),
)


def get_theme(theme_id: int) -> Theme:
    for theme in THEMES:
        if theme.id == theme_id:
            return theme
    raise KeyError(f"Unknown theme id: {theme_id}")
