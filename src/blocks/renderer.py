"""
Blocks Text Renderer.

Draws the engine's data as text for terminals and logs. A graphical
front end would read the same engine attributes.
"""
from typing import List

from . import cells
from .engine import GameEngine, GameState
from .field import FieldBuffer
from .leaderboard import Leaderboard
from .scoring import ScoreKind, SCORE_LABELS


class Renderer:
    """
    ASCII renderer for the blocks game.

    Can be extended for graphical rendering if needed.
    """

    # ASCII characters for rendering
    EMPTY = "·"
    FILLED = "█"
    BLURRED = "▒"
    WALL = "|"
    FLOOR = "-"
    COLLAPSE = "="

    def cell_char(self, attr: int) -> str:
        """Pick the character for a cell attribute."""
        if cells.color(attr) == cells.TRANSPARENT:
            return self.EMPTY
        if cells.color(attr) == cells.INVISIBLE:
            return self.WALL
        if cells.is_blurred(attr):
            return self.BLURRED
        return self.FILLED

    def render_grid(self, grid: FieldBuffer) -> List[str]:
        """Render every cell of a grid, one line per row."""
        return ["".join(self.cell_char(int(attr)) for attr in row) for row in grid.data]

    def render_field(self, engine: GameEngine) -> List[str]:
        """
        Render the visible playing field.

        While rows are being cleared, they are shown collapsing.
        """
        field = engine.visible_field()
        lines = self.render_grid(field)
        # Floor row of the bordered field.
        lines[-1] = self.WALL + self.FLOOR * (field.width - 2) + self.WALL
        if engine.state == GameState.LINE_ANIM:
            clear = engine.row_clear
            cell_height = max(engine.field.cell_size[1], 1)
            collapsed = min(clear.span, -(-engine.collapse // cell_height))
            interior = self.COLLAPSE * (field.width - 2)
            # Visible rows are one less than field rows.
            for y in range(clear.last - collapsed, clear.last):
                lines[y - 1] = self.WALL + interior + self.WALL
        return lines

    def render_scores(self, engine: GameEngine) -> List[str]:
        """Render the score panel, leaving flashing fields blank on dimmed steps."""
        lines = []
        for kind in ScoreKind:
            if engine.score.dimmed(kind):
                lines.append("")
                continue
            lines.append(f"{SCORE_LABELS[kind]:<8} {engine.score[kind]:>8,}")
        return lines

    def render_game_state(self, engine: GameEngine) -> str:
        """
        Render the complete game screen.

        Returns:
            The field with the score panel and next piece on its right
        """
        field = self.render_field(engine)
        panel = ["NEXT"]
        panel.extend(self.render_grid(engine.next_field()))
        panel.append("")
        panel.extend(self.render_scores(engine))
        if engine.state == GameState.PAUSED:
            panel.extend(["", "** PAUSED **"])
        elif engine.state == GameState.OVER:
            panel.extend(["", "** GAME OVER **"])

        lines = []
        for i, row in enumerate(field):
            side = panel[i] if i < len(panel) else ""
            lines.append(f"{row}   {side}".rstrip())
        return "\n".join(lines)

    def render_leaderboard(self, board: Leaderboard) -> str:
        lines = ["=" * 40, "BEST SCORES", "=" * 40]
        lines.append(str(board) if len(board) else "(no scores yet)")
        return "\n".join(lines)


def clear_screen():
    """Clear the terminal screen."""
    import os
    os.system('cls' if os.name == 'nt' else 'clear')


if __name__ == "__main__":
    from .keymap import Action

    engine = GameEngine(seed=7)
    renderer = Renderer()
    engine.handle_actions([Action.MOVE_LEFT, Action.MOVE_LEFT, Action.HARD_DROP])
    print(renderer.render_game_state(engine))
