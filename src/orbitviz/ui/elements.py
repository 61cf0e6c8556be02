from typing import List

import pygame

from orbitviz.ui.constants import VisC


class OrbitSelector:
    """Column of buttons, one per orbit"""

    def __init__(
        self,
        labels: List[str],
        x: int = VisC.button_x,
        y: int = VisC.button_y,
    ) -> None:
        self._x = 0
        self._y = 0

        self.buttons: List["OrbitButton"] = [
            OrbitButton(label=label, index=i) for i, label in enumerate(labels)
        ]
        self.x = x
        self.y = y

    @property
    def x(self) -> int:
        return self._x

    @x.setter
    def x(self, value: int) -> None:
        if not isinstance(value, int):
            raise ValueError
        self._x = value
        self.place_buttons()

    @property
    def y(self) -> int:
        return self._y

    @y.setter
    def y(self, value: int) -> None:
        if not isinstance(value, int):
            raise ValueError
        self._y = value
        self.place_buttons()

    def place_buttons(self) -> None:
        for i, button in enumerate(self.buttons):
            button.x = self.x
            button.y = self.y + i * (VisC.button_height + VisC.button_padding)

    def draw(
        self,
        screen: pygame.Surface,
        font: pygame.font.Font,
        selected: int,
    ) -> None:
        for button in self.buttons:
            button.draw(screen, font, selected=button.index == selected)

    def handle_event(self, event: pygame.event.Event) -> int | None:
        """Index of the orbit whose button was clicked, if any"""
        for button in self.buttons:
            if button.handle_event(event):
                return button.index
        return None


class OrbitButton:
    def __init__(
        self,
        label: str,
        index: int,
        x: int = 0,
        y: int = 0,
    ) -> None:
        self._x = 0
        self._y = 0

        self.rect = pygame.Rect(0, 0, VisC.button_width, VisC.button_height)
        self.label = label
        self.index = index

        self.x = x
        self.y = y

    @property
    def x(self) -> int:
        return self._x

    @x.setter
    def x(self, value: int) -> None:
        if not isinstance(value, int):
            raise ValueError
        self._x = value
        self.rect.x = value

    @property
    def y(self) -> int:
        return self._y

    @y.setter
    def y(self, value: int) -> None:
        if not isinstance(value, int):
            raise ValueError
        self._y = value
        self.rect.y = value

    def draw(
        self, screen: pygame.Surface, font: pygame.font.Font, selected: bool = False
    ) -> None:
        color = VisC.button_selected_color if selected else VisC.button_color

        pygame.draw.rect(screen, color, self.rect)
        pygame.draw.rect(screen, VisC.button_border_color, self.rect, 1)

        # Draw orbit name
        text = font.render(self.label, True, VisC.white)
        text_rect = text.get_rect(center=self.rect.center)
        screen.blit(text, text_rect)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                return True
        return False
