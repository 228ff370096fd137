"""Pygame frame loop and 2D view for Homestead.

Draws every owned parcel as an 8x8 block of cells, the purchasable
frontier around them, and a side panel with resources, the selected
tool and stage progress.  Production ticks are driven by the engine's
clock, checked once per frame.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

import pygame

if TYPE_CHECKING:
    from homestead.simulation.engine import GameEngine

from homestead.catalog.buildings import GROUND, BuildingType, derive
from homestead.catalog.resources import Resource
from homestead.world.parcel import PARCEL_SIZE
from homestead.world.pos import Pos

# Colour palette
_BG = (245, 245, 240)
_LAND = (215, 235, 210)
_GRID_LINE = (190, 205, 185)
_FRONTIER = (230, 230, 225)
_FRONTIER_OK = (200, 225, 245)
_TEXT = (40, 40, 40)
_VALID = (80, 200, 80)
_INVALID = (220, 70, 70)
_PLANNED = (120, 120, 200)

_PARCEL_GAP = 12
_PAN_STEP = 40


class Tool(Enum):
    """What a left click on a cell does."""

    BUILD = auto()
    PLAN = auto()
    REMOVE = auto()


class PygameRenderer:
    """Renders a GameEngine's world into a Pygame window and edits it.

    Attributes:
        engine: The engine to visualise and drive.
        cell_size: Pixel size of each cell.
        screen: The Pygame display surface.
    """

    def __init__(
        self,
        engine: GameEngine,
        cell_size: int = 24,
        width: int = 1100,
        height: int = 720,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The engine to render.
            cell_size: Pixel width/height per cell.
            width: Window width in pixels.
            height: Window height in pixels.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.tool = Tool.BUILD
        self.selected = BuildingType.HOUSE
        self._panel_width = 280
        self._win_w = width
        self._win_h = height
        self._offset = [width // 3, height // 3]

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption(f"Homestead - {engine.world.name}")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.cell_font = pygame.font.SysFont("monospace", max(10, cell_size // 2))
        self.running = True

    @property
    def _parcel_span(self) -> int:
        return PARCEL_SIZE * self.cell_size + _PARCEL_GAP

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, run due ticks, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            self.clock.tick(fps)
            self._handle_events()
            self.engine.update()
            self._draw()

        self.engine.save()
        pygame.quit()

    # -- Input -----------------------------------------------------------

    def _screen_to_world(self, sx: int, sy: int) -> tuple[Pos, Pos | None]:
        """Map a pixel to ``(parcel_pos, cell_pos)``; cell is None in gaps."""
        span = self._parcel_span
        rx, ry = sx - self._offset[0], sy - self._offset[1]
        parcel = Pos(rx // span, ry // span)
        inner_x, inner_y = rx - parcel.x * span, ry - parcel.y * span
        cell = Pos(inner_x // self.cell_size, inner_y // self.cell_size)
        if not cell.in_bounds(PARCEL_SIZE):
            return parcel, None
        return parcel, cell

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.pos[0] < self._win_w - self._panel_width:
                    self._handle_click(event.pos, event.button)

    def _handle_key(self, key: int) -> None:
        world = self.engine.world
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_r:
            self.tool = Tool.REMOVE
        elif key == pygame.K_p:
            self.tool = Tool.BUILD if self.tool is Tool.PLAN else Tool.PLAN
        elif key == pygame.K_s:
            self.engine.save()
        elif key == pygame.K_u:
            locked = [s for s in world.stages if not s.enabled]
            if locked:
                world.unlock_early(locked[0].num)
        elif key == pygame.K_TAB:
            self._cycle_building()
        elif key == pygame.K_LEFT:
            self._offset[0] += _PAN_STEP
        elif key == pygame.K_RIGHT:
            self._offset[0] -= _PAN_STEP
        elif key == pygame.K_UP:
            self._offset[1] += _PAN_STEP
        elif key == pygame.K_DOWN:
            self._offset[1] -= _PAN_STEP

    def _cycle_building(self) -> None:
        """Select the next unlocked building type."""
        options = self.engine.world.unlocked_buildings()
        if not options:
            return
        if self.selected in options:
            index = (options.index(self.selected) + 1) % len(options)
        else:
            index = 0
        self.selected = options[index]
        if self.tool is Tool.REMOVE:
            self.tool = Tool.BUILD

    def _handle_click(self, pixel: tuple[int, int], button: int) -> None:
        world = self.engine.world
        parcel_pos, cell_pos = self._screen_to_world(*pixel)
        if parcel_pos not in world.parcels:
            world.purchase(parcel_pos)
            return
        if cell_pos is None:
            return
        if button == 3 or self.tool is Tool.REMOVE:
            world.demolish(parcel_pos, cell_pos)
        elif self.tool is Tool.PLAN:
            world.plan(parcel_pos, cell_pos, self.selected)
        else:
            world.place(parcel_pos, cell_pos, self.selected)

    # -- Drawing ---------------------------------------------------------

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_frontier()
        self._draw_parcels()
        self._draw_hover()
        self._draw_info_panel()
        pygame.display.flip()

    def _parcel_origin(self, pos: Pos) -> tuple[int, int]:
        span = self._parcel_span
        return self._offset[0] + pos.x * span, self._offset[1] + pos.y * span

    def _draw_frontier(self) -> None:
        """Draw unowned neighbouring parcels with their price."""
        world = self.engine.world
        size = PARCEL_SIZE * self.cell_size
        for pos in world.frontier():
            x, y = self._parcel_origin(pos)
            colour = _FRONTIER_OK if world.can_purchase(pos) else _FRONTIER
            pygame.draw.rect(self.screen, colour, (x, y, size, size), border_radius=6)
            label = self.font.render(f"${world.land_cost(pos)}", True, _TEXT)
            self.screen.blit(label, (x + size // 3, y + size // 2 - 7))

    def _draw_parcels(self) -> None:
        """Draw each owned parcel and its buildings."""
        cs = self.cell_size
        size = PARCEL_SIZE * cs
        for pos, parcel in self.engine.world.parcels.items():
            x0, y0 = self._parcel_origin(pos)
            pygame.draw.rect(self.screen, _LAND, (x0, y0, size, size), border_radius=6)
            for cell in parcel.positions():
                rect = (x0 + cell.x * cs, y0 + cell.y * cs, cs, cs)
                pygame.draw.rect(self.screen, _GRID_LINE, rect, width=1)
                building_type = parcel.type_at(cell)
                if building_type is BuildingType.GROUND and cell in parcel.planned:
                    glyph = self.cell_font.render(
                        parcel.planned[cell].symbol,
                        True,
                        _PLANNED,
                    )
                else:
                    glyph = self.cell_font.render(building_type.symbol, True, _TEXT)
                self.screen.blit(glyph, (rect[0] + 2, rect[1] + cs // 4))

    def _draw_hover(self) -> None:
        """Tint the hovered cell by whether the selected tool would work."""
        world = self.engine.world
        parcel_pos, cell_pos = self._screen_to_world(*pygame.mouse.get_pos())
        parcel = world.parcel_at(parcel_pos)
        if parcel is None or cell_pos is None:
            return
        building = GROUND if self.tool is Tool.REMOVE else derive(self.selected)
        ok = parcel.is_valid(cell_pos, building) and (
            self.tool is not Tool.BUILD or world.ledger.can_afford(building.cost)
        )
        colour = _VALID if ok else _INVALID
        x0, y0 = self._parcel_origin(parcel_pos)
        cs = self.cell_size
        overlay = pygame.Surface((cs, cs), pygame.SRCALPHA)
        overlay.fill((*colour, 90))
        self.screen.blit(overlay, (x0 + cell_pos.x * cs, y0 + cell_pos.y * cs))

    def _draw_info_panel(self) -> None:
        """Draw resources, tool and stages on the right side."""
        world = self.engine.world
        panel_x = self._win_w - self._panel_width + 10
        pygame.draw.rect(
            self.screen,
            (230, 230, 225),
            (panel_x - 10, 0, self._panel_width, self._win_h),
        )
        rates = self.engine.per_second()
        lines = [
            f"{world.name}",
            f"Next tick: {self.engine.clock.progress():.0%}",
            "",
            "--- Resources ---",
        ]
        for resource in Resource:
            amount = world.ledger[resource]
            rate = rates.get(resource, 0.0)
            if amount or rate:
                lines.append(
                    f"{resource.display_name:<14}{amount:>7} "
                    f"/{world.ledger.cap(resource)} +{rate:.1f}/s",
                )

        tool = "Remove" if self.tool is Tool.REMOVE else self.selected.display_name
        lines += [
            "",
            f"Tool: {tool}",
            f"{'PLANNING' if self.tool is Tool.PLAN else ''}",
            "",
            "--- Stages ---",
        ]
        for stage in world.stages:
            mark = "x" if stage.enabled else " "
            lines.append(f"[{mark}] {stage.num} {stage.title}")
            if not stage.enabled:
                needs = ", ".join(f"{r.display_name} {n}" for r, n in stage.unlock_at[:2])
                lines.append(f"    needs {needs}")

        lines += [
            "",
            "--- Controls ---",
            "click: build / buy land",
            "right click: remove",
            "TAB: next building",
            "P: plan  R: remove",
            "U: unlock next early",
            "S: save  ESC: quit",
        ]

        y = 10
        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
