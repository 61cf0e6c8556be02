import pygame

from orbitviz.ui.constants import VisC
from orbitviz.ui.elements import OrbitSelector
from orbitviz.ui.render import render_view
from orbitviz.ui.state import ViewState, select, selected_orbit, tick, toggle_pause
from orbitviz.utils.data import OrbitTable


class Visualization:
    def __init__(
        self,
        table: OrbitTable,
        size: int = VisC.size,
        scale: float = VisC.scale,
    ) -> None:
        self.table = table
        self.state = ViewState()
        self.running = True

        self.width = size  # [px]
        self.height = size  # [px]
        self.scale = scale  # [px/unit]

        self.last_frame_millis = 0

        self.screen: pygame.Surface
        self.clock: pygame.time.Clock
        self.font: pygame.font.Font
        self.small_font: pygame.font.Font

        self.selector = OrbitSelector(labels=table.names)
        self.ui_visible: bool = True

    def start(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )
        pygame.display.set_caption("Periodic Orbits")
        self.clock = pygame.time.Clock()

        self.font = pygame.font.SysFont("Courier New", VisC.font_size)
        self.small_font = pygame.font.SysFont("Courier New", VisC.small_font_size)

        while self.running:
            self.handle_input()
            self.advance_frame()
            self.draw_frame()

        pygame.quit()

    def handle_input(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.width, self.height = event.w, event.h
                self.screen = pygame.display.set_mode(
                    (self.width, self.height), pygame.RESIZABLE
                )
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                if event.key == pygame.K_SPACE:
                    self.state = toggle_pause(self.state)
                if event.key == pygame.K_h:
                    self.ui_visible = not self.ui_visible
            elif self.ui_visible:
                index = self.selector.handle_event(event)
                if index is not None:
                    self.state = select(self.state, index)

    def advance_frame(self) -> None:
        # Milliseconds since the previous frame, capped at the frame rate
        self.last_frame_millis = self.clock.tick(VisC.fps)
        self.state = tick(self.state, self.last_frame_millis)

    def draw_frame(self) -> None:
        render_view(self.screen, self.table, self.state, self.scale)

        if self.ui_visible:
            self.draw_name()
            self.selector.draw(
                screen=self.screen, font=self.small_font, selected=self.state.selected
            )
            self.draw_info()

        pygame.display.flip()

    def draw_name(self) -> None:
        name = selected_orbit(self.state, self.table).name
        text = self.font.render(name, True, VisC.white)
        self.screen.blit(text, (VisC.label_x, VisC.label_y))

    def draw_info(self) -> None:
        fps = 1000 / self.last_frame_millis if self.last_frame_millis else 0.0
        label = f"FPS: {fps:.0f}" + (" (paused)" if self.state.paused else "")
        text = self.small_font.render(label, True, VisC.white)
        self.screen.blit(text, (VisC.label_x, self.height - 2 * VisC.small_font_size))
